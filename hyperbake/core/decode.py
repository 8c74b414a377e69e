# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/core/decode.py
"""
Schema-driven decoding of raw settings into typed config sections.

Each config section declares a FIELDS table of Field entries. The decoder
walks those tables, converts every present key to the field's kind and
sets it on the section object. Keys no table claims are reported as
unknown, type mismatches as DecodeError.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from .exceptions import DecodeError
from .interpolate import InterpolateContext
from .logger import Log

LOG = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off", ""}

RESERVED_PREFIX = "hyperbake_"


class Kind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    DURATION = "duration"      # kept as a string; parsed by the section's prepare()
    STRING_LIST = "string_list"
    STRING_MAP = "string_map"
    ARG_LIST = "arg_list"      # list of string lists (e.g. qemuargs)


@dataclass(frozen=True)
class Field:
    key: str
    kind: Kind = Kind.STRING
    attr: Optional[str] = None
    aliases: Tuple[str, ...] = ()
    interpolate: bool = True

    @property
    def name(self) -> str:
        return self.attr or self.key

    def keys(self) -> Tuple[str, ...]:
        return (self.key,) + self.aliases


def merge_raws(raws: Iterable[Optional[Mapping[str, Any]]]) -> Dict[str, Any]:
    """Merge raw maps left to right; later maps win."""
    merged: Dict[str, Any] = {}
    for raw in raws:
        if raw is None:
            continue
        if not isinstance(raw, Mapping):
            raise DecodeError(code=2, msg=f"settings must be a mapping, got {type(raw).__name__}")
        for k, v in raw.items():
            merged[str(k)] = v
    return merged


def _to_str(v: Any) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, (str, int, float)):
        return str(v)
    raise TypeError(f"expected a string, got {type(v).__name__}")


def _to_int(v: Any) -> int:
    if isinstance(v, bool):
        raise TypeError("expected an integer, got bool")
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, str):
        try:
            return int(v.strip(), 10)
        except ValueError:
            raise TypeError(f"expected an integer, got {v!r}") from None
    raise TypeError(f"expected an integer, got {type(v).__name__}")


def _to_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, int):
        return v != 0
    if isinstance(v, str):
        s = v.strip().lower()
        if s in TRUTHY:
            return True
        if s in FALSY:
            return False
    raise TypeError(f"expected a boolean, got {v!r}")


def _to_str_list(v: Any) -> List[str]:
    if isinstance(v, str):
        return [v]
    if isinstance(v, Sequence):
        return [_to_str(x) for x in v]
    raise TypeError(f"expected a list of strings, got {type(v).__name__}")


def _to_str_map(v: Any) -> Dict[str, str]:
    if not isinstance(v, Mapping):
        raise TypeError(f"expected a mapping, got {type(v).__name__}")
    return {str(k): _to_str(x) for k, x in v.items()}


def _to_arg_list(v: Any) -> List[List[str]]:
    if not isinstance(v, Sequence) or isinstance(v, str):
        raise TypeError(f"expected a list of argument lists, got {type(v).__name__}")
    return [_to_str_list(x) for x in v]


_CONVERTERS = {
    Kind.STRING: _to_str,
    Kind.INTEGER: _to_int,
    Kind.BOOLEAN: _to_bool,
    Kind.DURATION: _to_str,
    Kind.STRING_LIST: _to_str_list,
    Kind.STRING_MAP: _to_str_map,
    Kind.ARG_LIST: _to_arg_list,
}


class Decoder:
    """
    Decodes one merged raw map into any number of config sections.

    Usage:
      dec = Decoder(raws, ctx)
      dec.decode(cfg.comm.comm, CommunicatorConfig.FIELDS)
      dec.decode(cfg, VMwareConfig.FIELDS)
      errors = dec.finish()
    """

    def __init__(self, raws: Iterable[Optional[Mapping[str, Any]]], ctx: Optional[InterpolateContext] = None):
        self.raw = merge_raws(raws)
        self.ctx = ctx or InterpolateContext()
        self.used: Set[str] = set()
        self.errors: List[DecodeError] = []

    def reserved(self) -> Dict[str, Any]:
        out = {k: v for k, v in self.raw.items() if k.startswith(RESERVED_PREFIX)}
        self.used.update(out.keys())
        return out

    def _render(self, f: Field, value: Any) -> Any:
        if not f.interpolate:
            return value
        if isinstance(value, str):
            return self.ctx.render(value)
        if isinstance(value, list):
            return [self.ctx.render(x) if isinstance(x, str) else x for x in value]
        if isinstance(value, dict):
            return {k: self.ctx.render(x) for k, x in value.items()}
        return value

    def decode(self, target: Any, fields: Iterable[Field]) -> None:
        for f in fields:
            present = [k for k in f.keys() if k in self.raw]
            if not present:
                continue
            self.used.update(present)
            if len(present) > 1:
                LOG.debug("Option %s given under several names %s; using %s", f.key, present, present[0])
            key = present[0]
            raw_value = self.raw[key]
            if raw_value is None:
                continue
            try:
                value = _CONVERTERS[f.kind](raw_value)
                value = self._render(f, value)
            except (TypeError, ValueError) as e:
                self.errors.append(DecodeError.for_option(key, f"{key}: {e}", cause=e))
                continue
            setattr(target, f.name, value)
            Log.trace(LOG, "decoded %s (%s) into %s.%s", key, f.kind.value, type(target).__name__, f.name)

    def finish(self) -> List[DecodeError]:
        for k in sorted(set(self.raw) - self.used):
            self.errors.append(DecodeError.for_option(k, f"unknown configuration key: {k!r}"))
        return list(self.errors)
