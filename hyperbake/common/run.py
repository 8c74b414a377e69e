# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/common/run.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from ..core.decode import Field, Kind
from ..core.defaults import DEFAULTS
from ..core.duration import Duration, prepare_duration
from ..core.exceptions import ResourceError


@dataclass
class BootConfig:
    boot_wait: Duration = None
    # rendered by the build runner ({{ .HTTPIP }}, {{ .HTTPPort }}, ...)
    boot_command: List[str] = field(default_factory=list)

    FIELDS = (
        Field("boot_wait", Kind.DURATION),
        Field("boot_command", Kind.STRING_LIST, interpolate=False),
    )

    def prepare(self) -> List[Exception]:
        errs: List[Exception] = []
        self.boot_wait = prepare_duration("boot_wait", self.boot_wait, DEFAULTS.boot_wait, errs)
        return errs


@dataclass
class ShutdownConfig:
    shutdown_command: str = ""
    shutdown_timeout: Duration = None

    FIELDS = (
        Field("shutdown_command", interpolate=False),
        Field("shutdown_timeout", Kind.DURATION),
    )

    def prepare(self) -> List[Exception]:
        errs: List[Exception] = []
        self.shutdown_timeout = prepare_duration("shutdown_timeout", self.shutdown_timeout, DEFAULTS.shutdown_timeout, errs)
        return errs


@dataclass
class OutputConfig:
    output_directory: str = ""

    FIELDS = (Field("output_directory"),)

    def prepare(self, builder_type: str, *, force: bool = False) -> List[Exception]:
        if not self.output_directory:
            self.output_directory = builder_type
        if os.path.exists(self.output_directory) and not force:
            return [
                ResourceError.for_option(
                    "output_directory",
                    f"output directory {self.output_directory!r} already exists; remove it or force the build",
                )
            ]
        return []


@dataclass
class FloppyConfig:
    floppy_files: List[str] = field(default_factory=list)

    FIELDS = (Field("floppy_files", Kind.STRING_LIST),)

    def prepare(self) -> List[Exception]:
        errs: List[Exception] = []
        for path in self.floppy_files:
            if not os.path.isfile(path):
                errs.append(ResourceError.for_option("floppy_files", f"floppy file not found: {path}"))
        return errs
