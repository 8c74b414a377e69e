# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/core/interpolate.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

_TOKEN_RE = re.compile(r"\{\{\s*(.*?)\s*\}\}")
_USER_RE = re.compile(r"^user\s+[`\"']([^`\"']+)[`\"']$")
_FIELD_RE = re.compile(r"^\.([A-Za-z_][A-Za-z0-9_]*)$")


@dataclass
class InterpolateContext:
    """
    Template variables available while rendering option values.

    Supported placeholders:
      {{user `name`}}   user variable
      {{build_name}}    name of the build
      {{build_type}}    builder type
      {{ .Field }}      entry from `data`
    """
    build_name: str = ""
    builder_type: str = ""
    user_variables: Dict[str, str] = field(default_factory=dict)
    data: Dict[str, Any] = field(default_factory=dict)

    def _resolve(self, expr: str) -> str:
        if expr == "build_name":
            return self.build_name
        if expr == "build_type":
            return self.builder_type

        m = _USER_RE.match(expr)
        if m:
            name = m.group(1)
            if name not in self.user_variables:
                raise ValueError(f"undefined user variable: {name!r}")
            return str(self.user_variables[name])

        m = _FIELD_RE.match(expr)
        if m:
            name = m.group(1)
            if name not in self.data:
                raise ValueError(f"no value for template field .{name}")
            return str(self.data[name])

        raise ValueError(f"unsupported template expression: {{{{{expr}}}}}")

    def render(self, text: Optional[str]) -> str:
        if not text:
            return text or ""
        return _TOKEN_RE.sub(lambda m: self._resolve(m.group(1)), text)

    def with_data(self, **data: Any) -> "InterpolateContext":
        merged = dict(self.data)
        merged.update(data)
        return InterpolateContext(
            build_name=self.build_name,
            builder_type=self.builder_type,
            user_variables=dict(self.user_variables),
            data=merged,
        )
