# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/builders/qemu/__init__.py
"""QEMU/KVM builder."""

from .builder import QemuBuilder
from .config import QemuConfig, parse_disk_size_mb

__all__ = ["QemuBuilder", "QemuConfig", "parse_disk_size_mb"]
