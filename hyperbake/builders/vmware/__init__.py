# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/builders/vmware/__init__.py
"""VMware ISO builder."""

from .builder import VMwareBuilder
from .config import VMwareConfig

__all__ = ["VMwareBuilder", "VMwareConfig"]
