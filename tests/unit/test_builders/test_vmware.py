# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the VMware builder's prepare step and VMX rendering."""
from __future__ import annotations

from datetime import timedelta
from unittest.mock import patch

import pytest
import requests

from hyperbake.builders import VMwareBuilder
from hyperbake.builders.vmware.vmx import encode_vmx, merge_vmx, parse_vmx
from hyperbake.core.exceptions import DecodeError, MultiError, ResourceError


def _prepare(config):
    b = VMwareBuilder()
    warns = b.prepare(config)
    return b, warns


@pytest.mark.unit
class TestVMwarePrepare:

    def test_defaults(self, base_config, iso_file):
        b, warns = _prepare(base_config)

        assert warns == []
        c = b.config
        assert c.disk_name == "disk"
        assert c.vm_name == "packer"
        assert c.disk_size == 40000
        assert c.guest_os_type == "other"
        assert c.output_dir == "vmware"
        assert c.iso_url == "file://" + str(iso_file)
        assert (c.http.http_port_min, c.http.http_port_max) == (8000, 9000)
        assert (c.vnc.vnc_port_min, c.vnc.vnc_port_max) == (5900, 6000)
        assert c.ssh_wait_timeout == timedelta(minutes=20)
        assert c.boot.boot_wait == timedelta(seconds=10)
        assert c.shutdown.shutdown_timeout == timedelta(minutes=5)
        assert (c.comm.host_port_min, c.comm.host_port_max) == (2222, 4444)
        assert b.ctx.build_name == "foo"
        assert b.ctx.builder_type == "vmware"

    def test_boot_wait(self, base_config):
        base_config["boot_wait"] = "this is not good"
        with pytest.raises(MultiError) as ei:
            _prepare(base_config)
        assert [e.option for e in ei.value.errors] == ["boot_wait"]

    def test_boot_wait_out_of_range(self, base_config):
        base_config["boot_wait"] = "99999999999h"
        with pytest.raises(MultiError) as ei:
            _prepare(base_config)
        assert [e.option for e in ei.value.errors] == ["boot_wait"]

    def test_boot_wait_good(self, base_config):
        base_config["boot_wait"] = "5s"
        b, _ = _prepare(base_config)
        assert b.config.boot.boot_wait == timedelta(seconds=5)

    def test_disk_size(self, base_config):
        base_config["disk_size"] = 60000
        b, _ = _prepare(base_config)
        assert b.config.disk_size == 60000

        base_config["disk_size"] = 0
        with pytest.raises(MultiError):
            _prepare(base_config)

    def test_http_port(self, base_config):
        base_config.update(http_port_min=1000, http_port_max=500)
        with pytest.raises(MultiError):
            _prepare(base_config)

        base_config.update(http_port_min=500, http_port_max=1000)
        b, _ = _prepare(base_config)
        assert (b.config.http.http_port_min, b.config.http.http_port_max) == (500, 1000)

    def test_vnc_port(self, base_config):
        base_config.update(vnc_port_min=1000, vnc_port_max=500)
        with pytest.raises(MultiError):
            _prepare(base_config)

        base_config.update(vnc_port_min=-500, vnc_port_max=500)
        with pytest.raises(MultiError):
            _prepare(base_config)

        base_config.update(vnc_port_min=500, vnc_port_max=1000)
        _prepare(base_config)

    def test_iso_url_missing(self, base_config):
        del base_config["iso_url"]
        with pytest.raises(MultiError) as ei:
            _prepare(base_config)
        assert [e.option for e in ei.value.errors] == ["iso_url"]

    def test_iso_url_unreachable(self, base_config):
        base_config["iso_url"] = "http://mirror.example.com/x.iso"
        with patch("hyperbake.common.iso.requests.head", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(MultiError) as ei:
                _prepare(base_config)
        assert ei.value.of_type(ResourceError)

    def test_iso_url_reachable(self, base_config):
        base_config["iso_url"] = "http://mirror.example.com/x.iso"
        with patch("hyperbake.common.iso.requests.head") as head:
            head.return_value.status_code = 200
            b, _ = _prepare(base_config)
        assert b.config.iso_url == "http://mirror.example.com/x.iso"

    def test_shutdown_command_missing_warns(self, base_config):
        del base_config["shutdown_command"]
        _, warns = _prepare(base_config)
        assert len(warns) == 1
        assert "shutdown_command" in warns[0]

    def test_shutdown_timeout(self, base_config):
        base_config["shutdown_timeout"] = "NaN"
        with pytest.raises(MultiError):
            _prepare(base_config)

        base_config["shutdown_timeout"] = "5s"
        b, _ = _prepare(base_config)
        assert b.config.shutdown.shutdown_timeout == timedelta(seconds=5)

    def test_ssh_username_required(self, base_config):
        del base_config["ssh_username"]
        with pytest.raises(MultiError) as ei:
            _prepare(base_config)
        assert [e.option for e in ei.value.errors] == ["ssh_username"]

    def test_ssh_wait_timeout(self, base_config):
        base_config["ssh_wait_timeout"] = "this is not good"
        with pytest.raises(MultiError):
            _prepare(base_config)

        base_config["ssh_wait_timeout"] = "5s"
        b, _ = _prepare(base_config)
        assert b.config.ssh_wait_timeout == timedelta(seconds=5)

    def test_errors_accumulate(self, base_config):
        del base_config["ssh_username"]
        base_config.update(boot_wait="bad", vnc_port_min=-1, vnc_port_max=10)
        with pytest.raises(MultiError) as ei:
            _prepare(base_config)
        assert len(ei.value) == 3

    def test_unknown_key(self, base_config):
        base_config["i_am_a_typo"] = "bar"
        with pytest.raises(MultiError) as ei:
            _prepare(base_config)
        assert isinstance(ei.value.errors[0], DecodeError)
        assert "i_am_a_typo" in str(ei.value)

    def test_wrong_type(self, base_config):
        base_config["disk_size"] = "lots"
        with pytest.raises(MultiError) as ei:
            _prepare(base_config)
        assert ei.value.errors[0].option == "disk_size"

    def test_vmx_data(self, base_config):
        base_config["vmx_data"] = {"one": "foo", "two": "bar"}
        b, _ = _prepare(base_config)
        assert b.config.vmx_data == {"one": "foo", "two": "bar"}

    def test_tools_upload_flavor(self, base_config):
        base_config["tools_upload_flavor"] = "linux"
        b, _ = _prepare(base_config)
        assert b.config.tools_upload_path == "{{ .Flavor }}.iso"

        base_config["tools_upload_flavor"] = "beos"
        with pytest.raises(MultiError):
            _prepare(base_config)

    def test_user_variables_interpolated(self, base_config):
        base_config["vm_name"] = "{{user `name`}}-{{build_name}}"
        base_config["hyperbake_user_variables"] = {"name": "centos"}
        b, _ = _prepare(base_config)
        assert b.config.vm_name == "centos-foo"

    def test_output_directory_exists(self, base_config, in_tmp_cwd):
        (in_tmp_cwd / "vmware").mkdir()
        with pytest.raises(MultiError) as ei:
            _prepare(base_config)
        assert [e.option for e in ei.value.errors] == ["output_directory"]

        base_config["hyperbake_force"] = True
        b, _ = _prepare(base_config)
        assert b.force is True

    @pytest.mark.parametrize("flag", ["false", "no", "0", False])
    def test_force_false_strings_do_not_force(self, base_config, in_tmp_cwd, flag):
        (in_tmp_cwd / "vmware").mkdir()
        base_config["hyperbake_force"] = flag
        with pytest.raises(MultiError) as ei:
            _prepare(base_config)
        assert [e.option for e in ei.value.errors] == ["output_directory"]

    def test_force_string_true(self, base_config, in_tmp_cwd):
        (in_tmp_cwd / "vmware").mkdir()
        base_config.update(hyperbake_force="true", hyperbake_debug="yes")
        b, _ = _prepare(base_config)
        assert (b.force, b.debug) == (True, True)

    def test_bad_force_flag(self, base_config):
        base_config["hyperbake_force"] = "sometimes"
        with pytest.raises(MultiError) as ei:
            _prepare(base_config)
        assert isinstance(ei.value.errors[0], DecodeError)
        assert ei.value.errors[0].option == "hyperbake_force"

    def test_later_maps_override(self, base_config):
        b = VMwareBuilder()
        b.prepare(base_config, {"vm_name": "override"})
        assert b.config.vm_name == "override"

    def test_prepare_is_idempotent(self, base_config):
        b, _ = _prepare(base_config)
        first = b.config
        warns, errs = b.validate(first)
        assert warns == [] and errs == []
        assert first.iso_url == b.config.iso_url


@pytest.mark.unit
class TestVMX:

    def test_parse(self):
        text = '.encoding = "UTF-8"\n# comment\n\ndisplayName = "my |22vm|22"\nMemSize = "1024"\n'
        assert parse_vmx(text) == {".encoding": "UTF-8", "displayname": 'my "vm"', "memsize": "1024"}

    def test_encode_puts_encoding_first(self):
        out = encode_vmx({"zeta": "1", ".encoding": "UTF-8", "alpha": 'a"b'})
        assert out.splitlines() == ['.encoding = "UTF-8"', 'alpha = "a|22b"', 'zeta = "1"']

    def test_merge_case_insensitive(self):
        assert merge_vmx({"memsize": "512"}, {"MemSize": "2048"}) == {"memsize": "2048"}

    def test_render_vmx(self, base_config):
        base_config["vmx_data"] = {"memsize": "2048", "numvcpus": "2"}
        b, _ = _prepare(base_config)
        vmx = parse_vmx(b.render_vmx())

        assert vmx["memsize"] == "2048"
        assert vmx["numvcpus"] == "2"
        assert vmx["displayname"] == "packer"
        assert vmx["ide1:0.filename"] == b.config.iso_url[len("file://"):]

    def test_render_from_template(self, base_config, tmp_path):
        tpl = tmp_path / "base.vmx"
        tpl.write_text('.encoding = "UTF-8"\nguestOS = "ubuntu-64"\n', encoding="utf-8")
        base_config["vmx_template_path"] = str(tpl)
        base_config["vmx_data"] = {"memsize": "4096"}
        b, _ = _prepare(base_config)

        assert parse_vmx(b.render_vmx()) == {".encoding": "UTF-8", "guestos": "ubuntu-64", "memsize": "4096"}

    def test_missing_template(self, base_config):
        base_config["vmx_template_path"] = "/i/dont/exist.vmx"
        with pytest.raises(MultiError) as ei:
            _prepare(base_config)
        assert [e.option for e in ei.value.errors] == ["vmx_template_path"]

    def test_render_before_prepare(self):
        with pytest.raises(RuntimeError):
            VMwareBuilder().render_vmx()
