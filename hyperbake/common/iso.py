# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/common/iso.py
"""
ISO source resolution.

An ISO reference is either a URL or a local path. Local paths must exist
and are rewritten to a file:// URL with an absolute path. file: URLs must
point at an existing file. http(s) URLs are probed so an unreachable
source fails before a long build starts.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import unquote, urlparse

import requests

from ..core.decode import Field, Kind
from ..core.defaults import DEFAULTS
from ..core.exceptions import ConfigError, InvalidValueError, MissingValueError, ResourceError

LOG = logging.getLogger(__name__)

_HASH_LEN = {"md5": 32, "sha1": 40, "sha256": 64, "sha512": 128}
_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def probe_url(url: str, *, timeout_s: Optional[float] = None) -> None:
    """
    Confirm an http(s) URL answers with a non-error status.

    HEAD first; servers that refuse HEAD (405/501) get a streamed GET that is
    closed before the body is read. Raises requests.RequestException.
    """
    timeout = timeout_s if timeout_s is not None else DEFAULTS.iso_probe_timeout_s
    resp = requests.head(url, allow_redirects=True, timeout=timeout)
    if resp.status_code in (405, 501):
        resp = requests.get(url, allow_redirects=True, timeout=timeout, stream=True)
        resp.close()
    resp.raise_for_status()


def _local_file_url(path: str) -> str:
    return "file://" + os.path.abspath(path)


def resolve_iso_url(option: str, value: str, *, probe: bool = True) -> str:
    """
    Return the canonical URL for `value` or raise a ConfigError subclass.
    """
    value = (value or "").strip()
    if not value:
        raise MissingValueError.for_option(option, f"an {option} must be specified")

    try:
        u = urlparse(value)
    except ValueError as e:
        raise InvalidValueError.for_option(option, f"{option} is not a valid URL: {value}: {e}", cause=e)
    scheme = u.scheme.lower()

    # "C:\isos\x.iso" parses with scheme "c"
    if not scheme or len(scheme) == 1:
        if not os.path.isfile(value):
            raise ResourceError.for_option(option, f"{option} points to a file that does not exist: {value}")
        return _local_file_url(value)

    if scheme not in DEFAULTS.iso_url_schemes:
        raise InvalidValueError.for_option(
            option, f"{option}: unsupported URL scheme {scheme!r} (use {', '.join(DEFAULTS.iso_url_schemes)})"
        )

    if scheme == "file":
        path = unquote(u.path if not u.netloc else u.netloc + u.path)
        if not path or not os.path.isfile(path):
            raise ResourceError.for_option(option, f"{option} points to a bad file: {value}")
        return _local_file_url(path)

    if probe:
        try:
            probe_url(value)
        except requests.RequestException as e:
            raise ResourceError.for_option(option, f"{option} is not reachable: {value}: {e}", cause=e)
    return value


@dataclass
class ISOConfig:
    iso_url: str = ""
    iso_urls: List[str] = field(default_factory=list)
    iso_checksum: str = ""
    iso_checksum_type: str = ""
    iso_target_path: str = ""

    FIELDS = (
        Field("iso_url"),
        Field("iso_urls", Kind.STRING_LIST),
        Field("iso_checksum"),
        Field("iso_checksum_type"),
        Field("iso_target_path"),
    )

    def prepare(self) -> List[Exception]:
        errs: List[Exception] = []

        if self.iso_url and self.iso_urls:
            errs.append(InvalidValueError.for_option("iso_urls", "only one of iso_url or iso_urls can be specified"))
        elif self.iso_urls:
            resolved: List[str] = []
            for i, u in enumerate(self.iso_urls):
                try:
                    resolved.append(resolve_iso_url(f"iso_urls[{i}]", u))
                except ConfigError as e:
                    errs.append(e)
            if not errs:
                self.iso_urls = resolved
                self.iso_url = resolved[0]
        else:
            try:
                self.iso_url = resolve_iso_url("iso_url", self.iso_url)
            except ConfigError as e:
                errs.append(e)

        errs.extend(self._prepare_checksum())
        LOG.debug("iso source %s (checksum %s)", self.iso_url or "<unset>", self.iso_checksum_type)
        return errs

    def _prepare_checksum(self) -> List[Exception]:
        ctype = self.iso_checksum_type.strip().lower()
        csum = self.iso_checksum.strip().lower()

        if not ctype:
            if csum:
                return [MissingValueError.for_option("iso_checksum_type", "iso_checksum_type is required with iso_checksum")]
            ctype = "none"
        self.iso_checksum_type = ctype

        if ctype not in DEFAULTS.iso_checksum_types:
            return [
                InvalidValueError.for_option(
                    "iso_checksum_type", f"unsupported iso_checksum_type {ctype!r} (use {', '.join(DEFAULTS.iso_checksum_types)})"
                )
            ]
        if ctype == "none":
            return []

        if not csum:
            return [MissingValueError.for_option("iso_checksum", "due to large file sizes, an iso_checksum is required")]
        if not _HEX_RE.match(csum) or len(csum) != _HASH_LEN[ctype]:
            return [InvalidValueError.for_option("iso_checksum", f"iso_checksum is not a valid {ctype} digest")]
        self.iso_checksum = csum
        return []
