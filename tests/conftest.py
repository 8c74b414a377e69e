# SPDX-License-Identifier: LGPL-3.0-or-later
import os
import sys
from pathlib import Path

import pytest

_THIS_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _THIS_DIR.parent

if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

os.environ.setdefault("PYTHONPATH", str(_REPO_ROOT))


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no network or hypervisor access")


@pytest.fixture
def rsa_key_file(tmp_path):
    """A freshly generated, unencrypted RSA private key in PEM form."""
    import paramiko

    path = tmp_path / "id_rsa"
    paramiko.RSAKey.generate(2048).write_private_key_file(str(path))
    return path


@pytest.fixture
def iso_file(tmp_path):
    path = tmp_path / "install.iso"
    path.write_bytes(b"\x00" * 16)
    return path


@pytest.fixture
def in_tmp_cwd(tmp_path, monkeypatch):
    """Run from an empty directory so default output directories never exist."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def base_config(iso_file, in_tmp_cwd):
    """A minimal valid raw builder config."""
    return {
        "iso_url": str(iso_file),
        "iso_checksum": "0123456789abcdef0123456789abcdef",
        "iso_checksum_type": "md5",
        "shutdown_command": "shutdown -P now",
        "ssh_username": "foo",
        "hyperbake_build_name": "foo",
    }
