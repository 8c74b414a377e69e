# SPDX-License-Identifier: LGPL-3.0-or-later
import unittest
from datetime import timedelta

from hyperbake.communicator import CommunicatorConfig
from hyperbake.core.exceptions import InvalidValueError, MissingValueError, PrivateKeyNotFoundError


class TestSSH(unittest.TestCase):

    def test_defaults(self):
        c = CommunicatorConfig(ssh_username="root")
        errs = c.prepare()

        self.assertEqual(errs, [])
        self.assertEqual(c.type, "ssh")
        self.assertEqual(c.ssh_port, 22)
        self.assertEqual(c.ssh_timeout, timedelta(minutes=20))
        self.assertEqual(c.ssh_handshake_attempts, 10)
        self.assertEqual(c.ssh_file_transfer_method, "scp")

    def test_username_required(self):
        errs = CommunicatorConfig().prepare()
        self.assertEqual(len(errs), 1)
        self.assertIsInstance(errs[0], MissingValueError)
        self.assertEqual(errs[0].option, "ssh_username")

    def test_any_username_accepted(self):
        self.assertEqual(CommunicatorConfig(ssh_username="exists").prepare(), [])
        self.assertEqual(CommunicatorConfig(ssh_username="Administrator@CORP").prepare(), [])

    def test_bad_timeout(self):
        errs = CommunicatorConfig(ssh_username="root", ssh_timeout="this is not good").prepare()
        self.assertEqual(len(errs), 1)
        self.assertIsInstance(errs[0], InvalidValueError)

    def test_custom_timeout(self):
        c = CommunicatorConfig(ssh_username="root", ssh_timeout="5s")
        self.assertEqual(c.prepare(), [])
        self.assertEqual(c.ssh_timeout, timedelta(seconds=5))

    def test_explicit_port_kept(self):
        c = CommunicatorConfig(ssh_username="root", ssh_port=2200)
        self.assertEqual(c.prepare(), [])
        self.assertEqual(c.ssh_port, 2200)

    def test_port_out_of_range(self):
        errs = CommunicatorConfig(ssh_username="root", ssh_port=70000).prepare()
        self.assertEqual([e.option for e in errs], ["ssh_port"])

    def test_file_transfer_method(self):
        self.assertEqual(CommunicatorConfig(ssh_username="root", ssh_file_transfer_method="sftp").prepare(), [])
        errs = CommunicatorConfig(ssh_username="root", ssh_file_transfer_method="rsync").prepare()
        self.assertEqual(len(errs), 1)

    def test_errors_accumulate(self):
        errs = CommunicatorConfig(ssh_timeout="bad", ssh_file_transfer_method="ftp").prepare()
        self.assertEqual(len(errs), 3)

    def test_bastion(self):
        c = CommunicatorConfig(ssh_username="root", ssh_bastion_host="jump.example.com")
        errs = c.prepare()
        self.assertEqual([e.option for e in errs], ["ssh_bastion_username"])
        self.assertEqual(c.ssh_bastion_port, 22)

        c = CommunicatorConfig(
            ssh_username="root",
            ssh_bastion_host="jump.example.com",
            ssh_bastion_username="ops",
            ssh_bastion_private_key_file="/i/dont/exist",
        )
        errs = c.prepare()
        self.assertEqual(len(errs), 1)
        self.assertIsInstance(errs[0], PrivateKeyNotFoundError)


class TestWinRM(unittest.TestCase):

    def test_defaults(self):
        c = CommunicatorConfig(type="winrm", winrm_username="Administrator")
        self.assertEqual(c.prepare(), [])
        self.assertEqual(c.winrm_port, 5985)
        self.assertEqual(c.winrm_timeout, timedelta(minutes=30))

    def test_ssl_port(self):
        c = CommunicatorConfig(type="winrm", winrm_username="Administrator", winrm_use_ssl=True)
        self.assertEqual(c.prepare(), [])
        self.assertEqual(c.winrm_port, 5986)

    def test_username_required(self):
        errs = CommunicatorConfig(type="winrm").prepare()
        self.assertEqual([e.option for e in errs], ["winrm_username"])

    def test_ssh_fields_ignored(self):
        c = CommunicatorConfig(type="winrm", winrm_username="a", ssh_private_key_file="/i/dont/exist")
        self.assertEqual(c.prepare(), [])

    def test_host_property_follows_type(self):
        c = CommunicatorConfig(type="winrm")
        c.host = "10.0.0.5"
        self.assertEqual(c.winrm_host, "10.0.0.5")
        self.assertEqual(c.ssh_host, "")


class TestOtherTypes(unittest.TestCase):

    def test_none_skips_checks(self):
        self.assertEqual(CommunicatorConfig(type="none").prepare(), [])

    def test_unknown_type(self):
        errs = CommunicatorConfig(type="telnet").prepare()
        self.assertEqual(len(errs), 1)
        self.assertEqual(errs[0].option, "communicator")


if __name__ == "__main__":
    unittest.main()
