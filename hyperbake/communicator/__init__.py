# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/communicator/__init__.py
"""Guest communicator (SSH/WinRM) configuration."""

from .comm_config import CommConfig
from .config import CommunicatorConfig

__all__ = ["CommConfig", "CommunicatorConfig"]
