# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/builders/vmware/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, List, Optional, Union

from ...common import BootConfig, FloppyConfig, HTTPConfig, ISOConfig, OutputConfig, ShutdownConfig, VNCConfig
from ...communicator import CommConfig
from ...core.decode import Field, Kind
from ...core.defaults import DEFAULTS
from ...core.exceptions import InvalidValueError, ResourceError


@dataclass
class VMwareConfig:
    iso: ISOConfig = field(default_factory=ISOConfig)
    http: HTTPConfig = field(default_factory=HTTPConfig)
    vnc: VNCConfig = field(default_factory=VNCConfig)
    boot: BootConfig = field(default_factory=BootConfig)
    shutdown: ShutdownConfig = field(default_factory=ShutdownConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    floppy: FloppyConfig = field(default_factory=FloppyConfig)
    comm: CommConfig = field(default_factory=CommConfig)

    disk_name: str = ""
    disk_size: Optional[int] = None
    disk_type_id: str = ""
    guest_os_type: str = ""
    vm_name: str = ""
    headless: bool = False
    skip_compaction: bool = False
    tools_upload_flavor: str = ""
    tools_upload_path: str = ""
    vmx_template_path: str = ""
    vmx_data: Dict[str, str] = field(default_factory=dict)
    vmx_data_post: Dict[str, str] = field(default_factory=dict)

    FIELDS = (
        Field("disk_name"),
        Field("disk_size", Kind.INTEGER),
        Field("disk_type_id"),
        Field("guest_os_type"),
        Field("vm_name"),
        Field("headless", Kind.BOOLEAN),
        Field("skip_compaction", Kind.BOOLEAN),
        Field("tools_upload_flavor"),
        Field("tools_upload_path", interpolate=False),
        Field("vmx_template_path"),
        Field("vmx_data", Kind.STRING_MAP, interpolate=False),
        Field("vmx_data_post", Kind.STRING_MAP, interpolate=False),
    )

    # Shortcuts for the options callers look at most.

    @property
    def iso_url(self) -> str:
        return self.iso.iso_url

    @property
    def output_dir(self) -> str:
        return self.output.output_directory

    @property
    def ssh_wait_timeout(self) -> Union[str, timedelta, None]:
        return self.comm.comm.ssh_timeout

    def prepare(self) -> List[Exception]:
        """Defaults and checks for the VMware-only options."""
        errs: List[Exception] = []

        if not self.disk_name:
            self.disk_name = DEFAULTS.disk_name
        if not self.vm_name:
            self.vm_name = DEFAULTS.vm_name
        if not self.guest_os_type:
            self.guest_os_type = DEFAULTS.vmware_guest_os_type
        if not self.disk_type_id:
            self.disk_type_id = DEFAULTS.vmware_disk_type_id

        if self.disk_size is None:
            self.disk_size = DEFAULTS.vmware_disk_size_mb
        elif self.disk_size <= 0:
            errs.append(InvalidValueError.for_option("disk_size", "disk_size must be a positive number of megabytes"))

        if self.tools_upload_flavor not in DEFAULTS.vmware_tools_flavors:
            errs.append(
                InvalidValueError.for_option(
                    "tools_upload_flavor",
                    f"tools_upload_flavor must be one of linux, windows, darwin; got {self.tools_upload_flavor!r}",
                )
            )
        if self.tools_upload_flavor and not self.tools_upload_path:
            self.tools_upload_path = DEFAULTS.vmware_tools_upload_path

        if self.vmx_template_path and not os.path.isfile(self.vmx_template_path):
            errs.append(ResourceError.for_option("vmx_template_path", f"vmx_template_path does not exist: {self.vmx_template_path}"))

        return errs
