# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/builders/__init__.py
"""Builder registry: template `type` -> builder class."""

from typing import Dict, Type

from .base import Builder
from .qemu import QemuBuilder
from .vmware import VMwareBuilder

BUILDERS: Dict[str, Type[Builder]] = {
    "qemu": QemuBuilder,
    "vmware": VMwareBuilder,
    "vmware-iso": VMwareBuilder,
}


def new_builder(builder_type: str) -> Builder:
    try:
        return BUILDERS[builder_type]()
    except KeyError:
        raise KeyError(f"unknown builder type {builder_type!r} (known: {', '.join(sorted(BUILDERS))})") from None


__all__ = ["BUILDERS", "Builder", "QemuBuilder", "VMwareBuilder", "new_builder"]
