# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/communicator/keys.py
from __future__ import annotations

import logging
import os
from typing import Optional

import paramiko

from ..core.exceptions import ConfigError, PrivateKeyInvalidError, PrivateKeyNotFoundError

LOG = logging.getLogger(__name__)

# Tried in order; each raises SSHException when the file holds another key type.
_KEY_CLASSES = (paramiko.RSAKey, paramiko.ECDSAKey, paramiko.Ed25519Key)


def load_private_key(path: str) -> paramiko.PKey:
    """
    Parse an unencrypted SSH private key (RSA, ECDSA or Ed25519; PEM or
    OpenSSH container). Raises PrivateKeyInvalidError when nothing parses.
    """
    last: Optional[BaseException] = None
    for cls in _KEY_CLASSES:
        try:
            return cls.from_private_key_file(path)
        except paramiko.PasswordRequiredException as e:
            raise PrivateKeyInvalidError(code=2, msg=f"{path}: encrypted private keys are not supported", cause=e)
        except (paramiko.SSHException, ValueError) as e:
            last = e
    raise PrivateKeyInvalidError(code=2, msg=f"{path}: not a recognized private key", cause=last)


def check_private_key_file(option: str, path: str) -> Optional[ConfigError]:
    """
    Validate the private key referenced by `option`.

    Returns the error instead of raising so callers can accumulate it.
    """
    p = os.path.expanduser(path)
    if not os.path.isfile(p):
        return PrivateKeyNotFoundError.for_option(option, f"{option} is invalid: {path} does not exist")
    try:
        key = load_private_key(p)
    except PrivateKeyInvalidError as e:
        return PrivateKeyInvalidError.for_option(option, f"{option} is not a valid key: {e}", cause=e.cause)
    except OSError as e:
        return PrivateKeyInvalidError.for_option(option, f"{option} could not be read: {e}", cause=e)
    LOG.debug("Private key %s parsed (%s)", p, key.get_name())
    return None
