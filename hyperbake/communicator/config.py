# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# hyperbake/communicator/config.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..core.decode import Field, Kind
from ..core.defaults import DEFAULTS
from ..core.duration import Duration, prepare_duration
from ..core.exceptions import InvalidValueError, MissingValueError
from ..core.interpolate import InterpolateContext
from .keys import check_private_key_file

LOG = logging.getLogger(__name__)

COMMUNICATOR_TYPES = ("ssh", "winrm", "none")
FILE_TRANSFER_METHODS = ("scp", "sftp")


def _check_port(option: str, port: Optional[int], errs: List[Exception]) -> None:
    if port is not None and not (0 < port <= DEFAULTS.port_max):
        errs.append(InvalidValueError.for_option(option, f"{option} must be between 1 and {DEFAULTS.port_max}, got {port}"))


@dataclass
class CommunicatorConfig:
    """
    How the build reaches the guest: SSH, WinRM, or not at all.

    Only the fields of the active `type` are validated.
    """
    type: str = ""

    # ssh
    ssh_username: str = ""
    ssh_password: str = ""
    ssh_host: str = ""
    ssh_port: Optional[int] = None
    ssh_private_key_file: str = ""
    ssh_timeout: Duration = None
    ssh_pty: bool = False
    ssh_handshake_attempts: Optional[int] = None
    ssh_agent_auth: bool = False
    ssh_disable_agent_forwarding: bool = False
    ssh_file_transfer_method: str = ""
    ssh_bastion_host: str = ""
    ssh_bastion_port: Optional[int] = None
    ssh_bastion_username: str = ""
    ssh_bastion_private_key_file: str = ""

    # winrm
    winrm_username: str = ""
    winrm_password: str = ""
    winrm_host: str = ""
    winrm_port: Optional[int] = None
    winrm_timeout: Duration = None
    winrm_use_ssl: bool = False
    winrm_insecure: bool = False
    winrm_use_ntlm: bool = False

    FIELDS = (
        Field("communicator", attr="type"),
        Field("ssh_username"),
        Field("ssh_password"),
        Field("ssh_host"),
        Field("ssh_port", Kind.INTEGER),
        Field("ssh_private_key_file"),
        Field("ssh_timeout", Kind.DURATION, aliases=("ssh_wait_timeout",)),
        Field("ssh_pty", Kind.BOOLEAN),
        Field("ssh_handshake_attempts", Kind.INTEGER),
        Field("ssh_agent_auth", Kind.BOOLEAN),
        Field("ssh_disable_agent_forwarding", Kind.BOOLEAN),
        Field("ssh_file_transfer_method"),
        Field("ssh_bastion_host"),
        Field("ssh_bastion_port", Kind.INTEGER),
        Field("ssh_bastion_username"),
        Field("ssh_bastion_private_key_file"),
        Field("winrm_username", aliases=("winrm_user",)),
        Field("winrm_password"),
        Field("winrm_host"),
        Field("winrm_port", Kind.INTEGER),
        Field("winrm_timeout", Kind.DURATION),
        Field("winrm_use_ssl", Kind.BOOLEAN),
        Field("winrm_insecure", Kind.BOOLEAN),
        Field("winrm_use_ntlm", Kind.BOOLEAN),
    )

    @property
    def host(self) -> str:
        return self.winrm_host if self.type == "winrm" else self.ssh_host

    @host.setter
    def host(self, value: str) -> None:
        if self.type == "winrm":
            self.winrm_host = value
        else:
            self.ssh_host = value

    @property
    def port(self) -> Optional[int]:
        return self.winrm_port if self.type == "winrm" else self.ssh_port

    def prepare(self, ctx: Optional[InterpolateContext] = None) -> List[Exception]:
        if not self.type:
            self.type = DEFAULTS.communicator_type

        if self.type == "ssh":
            return self._prepare_ssh()
        if self.type == "winrm":
            return self._prepare_winrm()
        if self.type == "none":
            return []
        return [
            InvalidValueError.for_option(
                "communicator", f"communicator must be one of {', '.join(COMMUNICATOR_TYPES)}, got {self.type!r}"
            )
        ]

    def _prepare_ssh(self) -> List[Exception]:
        errs: List[Exception] = []

        if self.ssh_port is None:
            self.ssh_port = DEFAULTS.ssh_port
        _check_port("ssh_port", self.ssh_port, errs)

        self.ssh_timeout = prepare_duration("ssh_timeout", self.ssh_timeout, DEFAULTS.ssh_timeout, errs)

        if self.ssh_handshake_attempts is None or self.ssh_handshake_attempts == 0:
            self.ssh_handshake_attempts = DEFAULTS.ssh_handshake_attempts
        elif self.ssh_handshake_attempts < 0:
            errs.append(InvalidValueError.for_option("ssh_handshake_attempts", "ssh_handshake_attempts must be positive"))

        if not self.ssh_file_transfer_method:
            self.ssh_file_transfer_method = DEFAULTS.ssh_file_transfer_method
        elif self.ssh_file_transfer_method not in FILE_TRANSFER_METHODS:
            errs.append(
                InvalidValueError.for_option(
                    "ssh_file_transfer_method", f"ssh_file_transfer_method must be scp or sftp, got {self.ssh_file_transfer_method!r}"
                )
            )

        if not self.ssh_username:
            errs.append(MissingValueError.for_option("ssh_username", "an ssh_username must be specified"))

        if self.ssh_private_key_file:
            err = check_private_key_file("ssh_private_key_file", self.ssh_private_key_file)
            if err is not None:
                errs.append(err)

        if self.ssh_bastion_host:
            if self.ssh_bastion_port is None:
                self.ssh_bastion_port = DEFAULTS.ssh_bastion_port
            _check_port("ssh_bastion_port", self.ssh_bastion_port, errs)
            if not self.ssh_bastion_username:
                errs.append(MissingValueError.for_option("ssh_bastion_username", "ssh_bastion_username is required with ssh_bastion_host"))
            if self.ssh_bastion_private_key_file:
                err = check_private_key_file("ssh_bastion_private_key_file", self.ssh_bastion_private_key_file)
                if err is not None:
                    errs.append(err)

        LOG.debug("ssh communicator: user=%s host=%s port=%s", self.ssh_username, self.ssh_host or "<auto>", self.ssh_port)
        return errs

    def _prepare_winrm(self) -> List[Exception]:
        errs: List[Exception] = []

        if self.winrm_port is None:
            self.winrm_port = DEFAULTS.winrm_ssl_port if self.winrm_use_ssl else DEFAULTS.winrm_port
        _check_port("winrm_port", self.winrm_port, errs)

        self.winrm_timeout = prepare_duration("winrm_timeout", self.winrm_timeout, DEFAULTS.winrm_timeout, errs)

        if not self.winrm_username:
            errs.append(MissingValueError.for_option("winrm_username", "winrm_username must be specified"))

        LOG.debug("winrm communicator: user=%s host=%s port=%s", self.winrm_username, self.winrm_host or "<auto>", self.winrm_port)
        return errs
