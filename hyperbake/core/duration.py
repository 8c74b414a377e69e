# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/core/duration.py
"""
Duration strings in the "1h30m", "5s", "300ms", "1.5h" form.

A bare "0" is accepted; any other number needs a unit.
"""
from __future__ import annotations

import re
from datetime import timedelta
from typing import List, Union

from .exceptions import InvalidValueError

Duration = Union[str, timedelta, None]

_UNITS_US = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "ms": 1000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}

_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: Union[str, timedelta]) -> timedelta:
    """
    Parse a duration string into a timedelta.

    Raises ValueError on anything malformed (missing unit, unknown unit,
    trailing garbage, empty string).
    """
    if isinstance(value, timedelta):
        return value
    s = str(value).strip()
    if not s:
        raise ValueError("invalid duration: empty string")

    sign = 1
    body = s
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    if body == "0":
        return timedelta(0)

    pos = 0
    total_us = 0.0
    while pos < len(body):
        m = _PART_RE.match(body, pos)
        if not m:
            raise ValueError(f"invalid duration: {s!r}")
        total_us += float(m.group(1)) * _UNITS_US[m.group(2)]
        pos = m.end()

    if pos == 0:
        raise ValueError(f"invalid duration: {s!r}")
    try:
        return timedelta(microseconds=sign * total_us)
    except OverflowError:
        raise ValueError(f"invalid duration: {s!r} is out of range") from None


def format_duration(td: timedelta) -> str:
    secs = int(td.total_seconds())
    if secs == 0:
        return "0s"
    sign = "-" if secs < 0 else ""
    secs = abs(secs)
    h, rem = divmod(secs, 3600)
    m, s = divmod(rem, 60)
    out = ""
    if h:
        out += f"{h}h"
    if m or (h and s):
        out += f"{m}m"
    if s or not out:
        out += f"{s}s"
    return sign + out


def prepare_duration(option: str, value: Duration, default: timedelta, errs: List[Exception]) -> Union[str, timedelta]:
    """Parse `value`, or return `default` when unset. A bad value stays as-is and is reported in `errs`."""
    if value is None or value == "":
        return default
    try:
        return parse_duration(value)
    except ValueError as e:
        errs.append(InvalidValueError.for_option(option, f"failed parsing {option}: {e}", cause=e))
        return value
