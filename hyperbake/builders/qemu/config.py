# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/builders/qemu/config.py
from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional, Union

from ...common import BootConfig, FloppyConfig, HTTPConfig, ISOConfig, OutputConfig, ShutdownConfig, VNCConfig
from ...communicator import CommConfig
from ...core.decode import Field, Kind
from ...core.defaults import DEFAULTS
from ...core.exceptions import InvalidValueError

_SIZE_RE = re.compile(r"^\s*(\d+)\s*([MGT]?)i?B?\s*$", re.IGNORECASE)
_SIZE_MB = {"": 1, "M": 1, "G": 1024, "T": 1024 * 1024}


def parse_disk_size_mb(value: str) -> int:
    """
    "40960", "40960M", "40G", "1T" -> megabytes. A bare number is megabytes.
    """
    m = _SIZE_RE.match(value or "")
    if not m:
        raise ValueError(f"invalid disk size: {value!r}")
    return int(m.group(1)) * _SIZE_MB[m.group(2).upper()]


def _one_of(option: str, value: str, allowed, errs: List[Exception]) -> None:
    if value not in allowed:
        errs.append(InvalidValueError.for_option(option, f"{option} must be one of {', '.join(allowed)}; got {value!r}"))


@dataclass
class QemuConfig:
    iso: ISOConfig = field(default_factory=ISOConfig)
    http: HTTPConfig = field(default_factory=HTTPConfig)
    vnc: VNCConfig = field(default_factory=VNCConfig)
    boot: BootConfig = field(default_factory=BootConfig)
    shutdown: ShutdownConfig = field(default_factory=ShutdownConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    floppy: FloppyConfig = field(default_factory=FloppyConfig)
    comm: CommConfig = field(default_factory=CommConfig)

    accelerator: str = ""
    disk_name: str = ""
    disk_interface: str = ""
    disk_size: str = ""
    disk_image: bool = False
    use_backing_file: bool = False
    format: str = ""
    headless: bool = False
    machine_type: str = ""
    net_device: str = ""
    net_bridge: str = ""
    qemu_binary: str = ""
    # rendered by the build runner
    qemuargs: List[List[str]] = field(default_factory=list)
    cpus: Optional[int] = None
    memory: Optional[int] = None
    vm_name: str = ""

    disk_size_mb: int = 0

    FIELDS = (
        Field("accelerator"),
        Field("disk_name"),
        Field("disk_interface"),
        Field("disk_size"),
        Field("disk_image", Kind.BOOLEAN),
        Field("use_backing_file", Kind.BOOLEAN),
        Field("format"),
        Field("headless", Kind.BOOLEAN),
        Field("machine_type"),
        Field("net_device"),
        Field("net_bridge"),
        Field("qemu_binary"),
        Field("qemuargs", Kind.ARG_LIST, interpolate=False),
        Field("cpus", Kind.INTEGER),
        Field("memory", Kind.INTEGER),
        Field("vm_name"),
    )

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
        """Defaults and checks for the QEMU-only options."""
        errs: List[Exception] = []

        self.accelerator = (self.accelerator or DEFAULTS.qemu_accelerator).lower()
        self.disk_interface = self.disk_interface or DEFAULTS.qemu_disk_interface
        self.format = (self.format or DEFAULTS.qemu_format).lower()
        self.disk_name = self.disk_name or DEFAULTS.disk_name
        self.vm_name = self.vm_name or DEFAULTS.vm_name
        self.machine_type = self.machine_type or DEFAULTS.qemu_machine_type
        self.net_device = self.net_device or DEFAULTS.qemu_net_device
        self.qemu_binary = self.qemu_binary or DEFAULTS.qemu_binary
        self.disk_size = self.disk_size or DEFAULTS.qemu_disk_size

        _one_of("accelerator", self.accelerator, DEFAULTS.qemu_accelerators, errs)
        _one_of("format", self.format, DEFAULTS.qemu_formats, errs)
        _one_of("disk_interface", self.disk_interface, DEFAULTS.qemu_disk_interfaces, errs)

        try:
            self.disk_size_mb = parse_disk_size_mb(self.disk_size)
            if self.disk_size_mb <= 0:
                raise ValueError("disk size must be positive")
        except ValueError as e:
            errs.append(InvalidValueError.for_option("disk_size", f"disk_size: {e}", cause=e))

        if self.use_backing_file and not (self.disk_image and self.format == "qcow2"):
            errs.append(
                InvalidValueError.for_option("use_backing_file", "use_backing_file can only be enabled for qcow2 disk images (disk_image: true)")
            )

        if self.net_bridge and not sys.platform.startswith("linux"):
            errs.append(InvalidValueError.for_option("net_bridge", "net_bridge is only supported on Linux hosts"))

        if self.cpus is None:
            self.cpus = DEFAULTS.qemu_cpus
        if self.memory is None:
            self.memory = DEFAULTS.qemu_memory_mb
        if self.cpus <= 0:
            errs.append(InvalidValueError.for_option("cpus", "cpus must be positive"))
        if self.memory <= 0:
            errs.append(InvalidValueError.for_option("memory", "memory must be a positive number of megabytes"))

        return errs
