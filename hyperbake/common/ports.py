# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/common/ports.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..core.decode import Field, Kind
from ..core.defaults import DEFAULTS
from ..core.exceptions import InvalidValueError


def check_port_range(prefix: str, lo: int, hi: int) -> List[Exception]:
    """Every failing bound is reported; checks do not stop at the first."""
    errs: List[Exception] = []
    if lo < 0:
        errs.append(InvalidValueError.for_option(f"{prefix}_port_min", f"{prefix}_port_min must be positive"))
    if hi > DEFAULTS.port_max:
        errs.append(InvalidValueError.for_option(f"{prefix}_port_max", f"{prefix}_port_max must not exceed {DEFAULTS.port_max}"))
    if lo > hi:
        errs.append(
            InvalidValueError.for_option(f"{prefix}_port_min", f"{prefix}_port_min must be less than or equal to {prefix}_port_max")
        )
    return errs


@dataclass
class HTTPConfig:
    """Local HTTP server that serves http_directory to the guest during boot."""
    http_directory: str = ""
    http_port_min: Optional[int] = None
    http_port_max: Optional[int] = None

    FIELDS = (
        Field("http_directory"),
        Field("http_port_min", Kind.INTEGER),
        Field("http_port_max", Kind.INTEGER),
    )

    def prepare(self) -> List[Exception]:
        if self.http_port_min is None:
            self.http_port_min = DEFAULTS.http_port_min
        if self.http_port_max is None:
            self.http_port_max = DEFAULTS.http_port_max
        return check_port_range("http", self.http_port_min, self.http_port_max)


@dataclass
class VNCConfig:
    vnc_port_min: Optional[int] = None
    vnc_port_max: Optional[int] = None
    vnc_bind_address: str = ""

    FIELDS = (
        Field("vnc_port_min", Kind.INTEGER),
        Field("vnc_port_max", Kind.INTEGER),
        Field("vnc_bind_address"),
    )

    def prepare(self) -> List[Exception]:
        if self.vnc_port_min is None:
            self.vnc_port_min = DEFAULTS.vnc_port_min
        if self.vnc_port_max is None:
            self.vnc_port_max = DEFAULTS.vnc_port_max
        if not self.vnc_bind_address:
            self.vnc_bind_address = DEFAULTS.vnc_bind_address
        return check_port_range("vnc", self.vnc_port_min, self.vnc_port_max)
