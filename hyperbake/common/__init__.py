# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/common/__init__.py
"""Config sections shared by every builder."""

from .iso import ISOConfig, resolve_iso_url
from .ports import HTTPConfig, VNCConfig, check_port_range
from .run import BootConfig, FloppyConfig, OutputConfig, ShutdownConfig

__all__ = [
    "BootConfig",
    "FloppyConfig",
    "HTTPConfig",
    "ISOConfig",
    "OutputConfig",
    "ShutdownConfig",
    "VNCConfig",
    "check_port_range",
    "resolve_iso_url",
]
