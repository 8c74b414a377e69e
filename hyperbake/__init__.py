# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/__init__.py
"""
hyperbake - configuration validation for QEMU and VMware image builders

Every builder decodes its raw settings, fills in defaults and reports all
problems at once before a build starts:

    from hyperbake import QemuBuilder, MultiError

    b = QemuBuilder()
    try:
        warnings = b.prepare({"iso_url": "./centos.iso", "ssh_username": "root"})
    except MultiError as e:
        for err in e.errors:
            print(err)
"""

__version__ = "0.1.0"

from .builders import BUILDERS, Builder, QemuBuilder, VMwareBuilder
from .communicator import CommConfig, CommunicatorConfig
from .config import Template
from .core.exceptions import ConfigError, HyperbakeError, MultiError
from .core.interpolate import InterpolateContext

__all__ = [
    "__version__",
    "BUILDERS",
    "Builder",
    "QemuBuilder",
    "VMwareBuilder",
    "CommConfig",
    "CommunicatorConfig",
    "Template",
    "ConfigError",
    "HyperbakeError",
    "MultiError",
    "InterpolateContext",
]
