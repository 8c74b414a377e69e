# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/builders/vmware/vmx.py
"""
VMX descriptor parsing and encoding.

A .vmx file is a flat list of `key = "value"` lines. Keys are
case-insensitive to VMware, so they are compared and written lowercased.
"""
from __future__ import annotations

import re
from typing import Dict, Mapping

_LINE_RE = re.compile(r'^\s*([^=\s][^=]*?)\s*=\s*"?(.*?)"?\s*$')


def parse_vmx(text: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for raw in (text or "").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = _LINE_RE.match(line)
        if not m:
            continue
        out[m.group(1).lower()] = m.group(2).replace("|22", '"')
    return out


def encode_vmx(data: Mapping[str, str]) -> str:
    """
    Render a descriptor. `.encoding` has to come first so VMware reads the
    rest with the right charset; everything else is sorted.
    """
    lowered = {str(k).lower(): str(v) for k, v in data.items()}
    lines = []
    if ".encoding" in lowered:
        lines.append(f'.encoding = "{lowered.pop(".encoding")}"')
    for k in sorted(lowered):
        v = lowered[k].replace('"', "|22")
        lines.append(f'{k} = "{v}"')
    return "\n".join(lines) + "\n"


def merge_vmx(base: Mapping[str, str], overrides: Mapping[str, str]) -> Dict[str, str]:
    """Overrides win; keys match case-insensitively."""
    merged = {str(k).lower(): str(v) for k, v in base.items()}
    for k, v in overrides.items():
        merged[str(k).lower()] = str(v)
    return merged
