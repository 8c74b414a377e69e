# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/builders/base.py
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..core.decode import Decoder, RESERVED_PREFIX, _to_bool
from ..core.exceptions import DecodeError, MultiError
from ..core.interpolate import InterpolateContext
from ..core.logger import Log

LOG = logging.getLogger(__name__)


def build_context(reserved: Mapping[str, Any], builder_type: str) -> Tuple[InterpolateContext, Dict[str, Any]]:
    """
    Turn the reserved hyperbake_* keys into an interpolation context plus flags.

    Recognized keys: hyperbake_build_name, hyperbake_builder_type,
    hyperbake_debug, hyperbake_force, hyperbake_user_variables.
    """
    flags = {k[len(RESERVED_PREFIX):]: v for k, v in reserved.items()}
    user_vars = flags.get("user_variables") or {}
    if not isinstance(user_vars, Mapping):
        raise DecodeError.for_option("hyperbake_user_variables", "hyperbake_user_variables must be a mapping")
    ctx = InterpolateContext(
        build_name=str(flags.get("build_name") or ""),
        builder_type=str(flags.get("builder_type") or builder_type),
        user_variables={str(k): str(v) for k, v in user_vars.items()},
    )
    return ctx, flags


def _flag(flags: Mapping[str, Any], name: str) -> bool:
    value = flags.get(name)
    if value is None:
        return False
    try:
        return _to_bool(value)
    except TypeError as e:
        raise DecodeError.for_option(RESERVED_PREFIX + name, f"{RESERVED_PREFIX}{name}: {e}", cause=e) from None


class Builder(ABC):
    """
    A builder validates its settings in prepare() before any build work.

    prepare() returns the warnings on success and raises MultiError holding
    every problem found otherwise. `config` is populated either way once
    decoding succeeded.
    """

    builder_type: str = ""

    def __init__(self) -> None:
        self.config: Any = None
        self.ctx: InterpolateContext = InterpolateContext(builder_type=self.builder_type)
        self.force: bool = False
        self.debug: bool = False

    @abstractmethod
    def new_config(self) -> Any:
        """Return a config object with every section at its zero value."""

    @abstractmethod
    def sections(self, config: Any) -> Iterable[Tuple[Any, Iterable]]:
        """(section object, FIELDS table) pairs to decode into."""

    @abstractmethod
    def validate(self, config: Any) -> Tuple[List[str], List[Exception]]:
        """Apply defaults and collect (warnings, errors) for a decoded config."""

    def decode(self, *raws: Optional[Mapping[str, Any]]) -> Any:
        try:
            dec = Decoder(raws)
            ctx, flags = build_context(dec.reserved(), self.builder_type)
            self.force = _flag(flags, "force")
            self.debug = _flag(flags, "debug")
        except DecodeError as e:
            raise MultiError([e]) from e

        self.ctx = ctx
        dec.ctx = ctx

        config = self.new_config()
        for section, fields in self.sections(config):
            dec.decode(section, fields)
        errs = dec.finish()
        if errs:
            raise MultiError(errs)
        return config

    def prepare(self, *raws: Optional[Mapping[str, Any]]) -> List[str]:
        log = Log.bind(LOG, builder=self.builder_type)
        Log.step(log, "Validating builder configuration")

        try:
            config = self.decode(*raws)
        except MultiError as e:
            Log.fail(log, "Configuration could not be decoded", errors=len(e))
            raise

        self.config = config
        warnings, errs = self.validate(config)

        for w in warnings:
            Log.warn(log, w)
        if errs:
            for e in errs:
                log.debug("config error: %s", e)
            Log.fail(log, "Configuration is invalid", errors=len(errs))
            raise MultiError(errs)

        Log.ok(log, "Configuration is valid", warnings=len(warnings))
        return warnings
