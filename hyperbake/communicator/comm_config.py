# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/communicator/comm_config.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.decode import Field, Kind
from ..core.defaults import DEFAULTS
from ..core.exceptions import InvalidValueError
from ..core.interpolate import InterpolateContext
from .config import CommunicatorConfig

LOG = logging.getLogger(__name__)


@dataclass
class CommConfig:
    """
    Communicator settings for builders that forward a host port to the guest.

    host_port_min/host_port_max bound the host port picked for the NAT
    forward. With skip_nat_mapping the build connects to the guest address
    directly, and an unset host becomes the loopback address.
    """
    comm: CommunicatorConfig = field(default_factory=CommunicatorConfig)
    host_port_min: Optional[int] = None
    host_port_max: Optional[int] = None
    skip_nat_mapping: bool = False

    # deprecated spellings of host_port_min/max
    ssh_host_port_min: Optional[int] = None
    ssh_host_port_max: Optional[int] = None

    FIELDS = (
        Field("host_port_min", Kind.INTEGER),
        Field("host_port_max", Kind.INTEGER),
        Field("skip_nat_mapping", Kind.BOOLEAN),
        Field("ssh_host_port_min", Kind.INTEGER),
        Field("ssh_host_port_max", Kind.INTEGER),
    )

    def prepare(self, ctx: Optional[InterpolateContext] = None) -> Tuple[List[str], List[Exception]]:
        warnings: List[str] = []

        if self.ssh_host_port_min is not None:
            warnings.append("ssh_host_port_min is deprecated and will be removed; use host_port_min")
            self.host_port_min = self.ssh_host_port_min
        if self.ssh_host_port_max is not None:
            warnings.append("ssh_host_port_max is deprecated and will be removed; use host_port_max")
            self.host_port_max = self.ssh_host_port_max

        if self.skip_nat_mapping and not self.comm.host:
            if not self.comm.type:
                self.comm.type = DEFAULTS.communicator_type
            self.comm.host = DEFAULTS.nat_skip_host

        if self.host_port_min is None:
            self.host_port_min = DEFAULTS.host_port_min
        if self.host_port_max is None:
            self.host_port_max = DEFAULTS.host_port_max

        errs: List[Exception] = list(self.comm.prepare(ctx))

        if self.host_port_min > self.host_port_max:
            errs.append(
                InvalidValueError.for_option(
                    "host_port_min", "host port min must be less than or equal to host port max"
                )
            )
        if self.host_port_min < 0:
            errs.append(InvalidValueError.for_option("host_port_min", "host_port_min must be positive"))
        if self.host_port_max > DEFAULTS.port_max:
            errs.append(InvalidValueError.for_option("host_port_max", f"host_port_max must not exceed {DEFAULTS.port_max}"))

        LOG.debug(
            "host ports %s-%s, skip_nat_mapping=%s, %d error(s)",
            self.host_port_min,
            self.host_port_max,
            self.skip_nat_mapping,
            len(errs),
        )
        return warnings, errs
