# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/core/defaults.py
"""
Built-in defaults for every recognized option.

Validators read these instead of carrying literals, so the complete set of
defaults is visible in one place.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Tuple


@dataclass(frozen=True)
class Defaults:
    # communicator
    communicator_type: str = "ssh"
    host_port_min: int = 2222
    host_port_max: int = 4444
    nat_skip_host: str = "127.0.0.1"
    ssh_port: int = 22
    ssh_timeout: timedelta = timedelta(minutes=20)
    ssh_handshake_attempts: int = 10
    ssh_file_transfer_method: str = "scp"
    ssh_bastion_port: int = 22
    winrm_port: int = 5985
    winrm_ssl_port: int = 5986
    winrm_timeout: timedelta = timedelta(minutes=30)

    # shared builder sections
    disk_name: str = "disk"
    vm_name: str = "packer"
    http_port_min: int = 8000
    http_port_max: int = 9000
    vnc_port_min: int = 5900
    vnc_port_max: int = 6000
    vnc_bind_address: str = "127.0.0.1"
    boot_wait: timedelta = timedelta(seconds=10)
    shutdown_timeout: timedelta = timedelta(minutes=5)
    iso_checksum_types: Tuple[str, ...] = ("md5", "sha1", "sha256", "sha512", "none")
    iso_url_schemes: Tuple[str, ...] = ("file", "http", "https")
    iso_probe_timeout_s: float = 10.0

    # qemu
    qemu_accelerator: str = "kvm"
    qemu_accelerators: Tuple[str, ...] = ("kvm", "xen", "hvf", "whpx", "tcg", "none")
    qemu_disk_interface: str = "virtio"
    qemu_disk_interfaces: Tuple[str, ...] = ("virtio", "virtio-scsi", "ide", "scsi", "sata")
    qemu_disk_size: str = "40960M"
    qemu_format: str = "qcow2"
    qemu_formats: Tuple[str, ...] = ("qcow2", "raw")
    qemu_net_device: str = "virtio-net"
    qemu_machine_type: str = "pc"
    qemu_binary: str = "qemu-system-x86_64"
    qemu_cpus: int = 1
    qemu_memory_mb: int = 512

    # vmware
    vmware_disk_size_mb: int = 40000
    vmware_disk_type_id: str = "1"
    vmware_guest_os_type: str = "other"
    vmware_tools_flavors: Tuple[str, ...] = ("", "linux", "windows", "darwin")
    vmware_tools_upload_path: str = "{{ .Flavor }}.iso"

    # ports
    port_max: int = 65535


DEFAULTS = Defaults()
