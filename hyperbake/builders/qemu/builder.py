# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/builders/qemu/builder.py
from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from ...communicator import CommConfig, CommunicatorConfig
from ..base import Builder
from .config import QemuConfig

LOG = logging.getLogger(__name__)


class QemuBuilder(Builder):
    """QEMU/KVM builder; installs from an ISO or boots an existing disk image."""

    builder_type = "qemu"

    def new_config(self) -> QemuConfig:
        return QemuConfig()

    def sections(self, config: QemuConfig) -> Iterable[Tuple[object, Iterable]]:
        return (
            (config, QemuConfig.FIELDS),
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

    def validate(self, config: QemuConfig) -> Tuple[List[str], List[Exception]]:
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

        if config.disk_image and config.iso.iso_checksum_type == "none":
            warnings.append("disk_image is set without an iso_checksum; the source image will not be verified")

        LOG.debug(
            "qemu: accelerator=%s format=%s disk=%sMB interface=%s, %d error(s)",
            config.accelerator,
            config.format,
            config.disk_size_mb,
            config.disk_interface,
            len(errs),
        )
        return warnings, errs
