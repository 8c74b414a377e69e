# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/builders/vmware/builder.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlparse

from ...communicator import CommunicatorConfig, CommConfig
from ...core.duration import format_duration
from ..base import Builder
from .config import VMwareConfig
from .vmx import encode_vmx, merge_vmx, parse_vmx

LOG = logging.getLogger(__name__)


class VMwareBuilder(Builder):
    """VMware Workstation/Fusion builder that installs from an ISO."""

    builder_type = "vmware"

    def new_config(self) -> VMwareConfig:
        return VMwareConfig()

    def sections(self, config: VMwareConfig) -> Iterable[Tuple[object, Iterable]]:
        return (
            (config, VMwareConfig.FIELDS),
            (config.iso, config.iso.FIELDS),
            (config.http, config.http.FIELDS),
            (config.vnc, config.vnc.FIELDS),
            (config.boot, config.boot.FIELDS),
            (config.shutdown, config.shutdown.FIELDS),
            (config.output, config.output.FIELDS),
            (config.floppy, config.floppy.FIELDS),
            (config.comm, CommConfig.FIELDS),
            (config.comm.comm, CommunicatorConfig.FIELDS),
        )

    def validate(self, config: VMwareConfig) -> Tuple[List[str], List[Exception]]:
        errs: List[Exception] = []
        errs += config.prepare()
        errs += config.output.prepare(self.builder_type, force=self.force)
        errs += config.iso.prepare()
        errs += config.http.prepare()
        errs += config.vnc.prepare()
        errs += config.boot.prepare()
        errs += config.shutdown.prepare()
        errs += config.floppy.prepare()

        warnings, comm_errs = config.comm.prepare(self.ctx)
        errs += comm_errs

        if not config.shutdown.shutdown_command:
            warnings.append(
                "A shutdown_command was not specified. Without a shutdown command, the build "
                "will forcibly halt the virtual machine, which may result in data loss."
            )

        if not errs:
            LOG.debug(
                "vmware: vm=%s disk=%s boot_wait=%s communicator=%s vmx_data=%d",
                config.vm_name,
                config.disk_name,
                format_duration(config.boot.boot_wait),
                config.comm.comm.type,
                len(config.vmx_data),
            )
        return warnings, errs

    # ------------------------------------------------------------------
    # VMX rendering
    # ------------------------------------------------------------------

    def _iso_path(self, config: VMwareConfig) -> str:
        u = urlparse(config.iso.iso_url)
        if u.scheme == "file":
            return u.path
        if config.iso.iso_target_path:
            return config.iso.iso_target_path
        return os.path.basename(u.path) or "install.iso"

    def base_vmx(self, config: Optional[VMwareConfig] = None) -> Dict[str, str]:
        c = config or self.config
        if c.vmx_template_path:
            return parse_vmx(Path(c.vmx_template_path).read_text(encoding="utf-8"))
        return {
            ".encoding": "UTF-8",
            "config.version": "8",
            "virtualHW.version": "9",
            "displayName": c.vm_name,
            "guestOS": c.guest_os_type,
            "memsize": "512",
            "numvcpus": "1",
            "ide0:0.present": "TRUE",
            "ide0:0.fileName": f"{c.disk_name}.vmdk",
            "ide1:0.present": "TRUE",
            "ide1:0.deviceType": "cdrom-image",
            "ide1:0.fileName": self._iso_path(c),
            "ethernet0.present": "TRUE",
            "ethernet0.connectionType": "nat",
            "ethernet0.addressType": "generated",
            "ethernet0.virtualDev": "e1000",
            "floppy0.present": "FALSE",
        }

    def render_vmx(self, config: Optional[VMwareConfig] = None) -> str:
        """
        Render the VM descriptor: default (or template) entries with
        vmx_data layered on top.
        """
        c = config or self.config
        if c is None:
            raise RuntimeError("render_vmx() needs a prepared config")
        return encode_vmx(merge_vmx(self.base_vmx(c), c.vmx_data))
