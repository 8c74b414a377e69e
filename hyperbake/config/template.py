# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/config/template.py
"""
Build templates: YAML or JSON files with `variables` and `builders`.

    variables:
      iso: ./centos.iso
    builders:
      - type: qemu
        name: centos
        iso_url: "{{user `iso`}}"
        ssh_username: root

Several files can be loaded together; later files override earlier ones.
Variables merge key by key, builders merge by name.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..builders import BUILDERS, new_builder
from ..core.exceptions import ConfigError, HyperbakeError, MultiError, format_exception_for_cli

LOG = logging.getLogger(__name__)


class TemplateError(ConfigError):
    """Template file missing, unreadable or malformed."""


def _load_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise TemplateError(code=2, msg=f"template not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise TemplateError(code=2, msg=f"{path}: cannot parse template: {e}", cause=e)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TemplateError(code=2, msg=f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def _builder_name(b: Dict[str, Any]) -> str:
    return str(b.get("name") or b.get("type") or "")


@dataclass
class BuildResult:
    name: str
    type: str
    warnings: List[str] = field(default_factory=list)
    error: Optional[HyperbakeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def describe(self, verbose: int = 0) -> str:
        """Report line(s) for this build; verbose adds option context and causes."""
        if self.error is None:
            return f"{self.name} ({self.type}): ok, {len(self.warnings)} warning(s)"
        return f"{self.name} ({self.type}): " + format_exception_for_cli(self.error, verbose=verbose)


@dataclass
class Template:
    variables: Dict[str, str] = field(default_factory=dict)
    builders: List[Dict[str, Any]] = field(default_factory=list)
    sources: List[Path] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Template":
        t = cls()
        t.merge(data)
        return t

    @classmethod
    def load(cls, *paths: Union[str, Path]) -> "Template":
        t = cls()
        for p in paths:
            path = Path(p).expanduser()
            LOG.debug("Loading template %s", path)
            t.merge(_load_file(path))
            t.sources.append(path)
        return t

    def merge(self, data: Dict[str, Any]) -> None:
        variables = data.get("variables") or {}
        if not isinstance(variables, dict):
            raise TemplateError(code=2, msg="`variables` must be a mapping")
        self.variables.update({str(k): "" if v is None else str(v) for k, v in variables.items()})

        builders = data.get("builders") or []
        if not isinstance(builders, list):
            raise TemplateError(code=2, msg="`builders` must be a list")
        for b in builders:
            if not isinstance(b, dict):
                raise TemplateError(code=2, msg=f"builder entries must be mappings, got {type(b).__name__}")
            if "type" not in b:
                raise TemplateError(code=2, msg=f"builder {_builder_name(b) or '#' + str(len(self.builders))} has no `type`")
            name = _builder_name(b)
            for existing in self.builders:
                if _builder_name(existing) == name:
                    existing.update(b)
                    break
            else:
                self.builders.append(dict(b))

    def prepare_builders(self) -> List[BuildResult]:
        """
        Run prepare() on every builder. One result per builder; a failing
        builder does not stop the others.
        """
        results: List[BuildResult] = []
        for b in self.builders:
            raw = dict(b)
            btype = str(raw.pop("type"))
            name = str(raw.pop("name", "") or btype)
            res = BuildResult(name=name, type=btype)

            if btype not in BUILDERS:
                res.error = TemplateError(code=2, msg=f"unknown builder type {btype!r} for build {name!r}").with_context(
                    build=name, builder=btype
                )
                results.append(res)
                continue

            builder = new_builder(btype)
            context = {
                "hyperbake_build_name": name,
                "hyperbake_builder_type": btype,
                "hyperbake_user_variables": self.variables,
            }
            try:
                res.warnings = builder.prepare(raw, context)
            except MultiError as e:
                res.error = e.with_context(build=name, builder=btype)
                LOG.debug("%s", res.describe(verbose=2))
            results.append(res)
        return results
