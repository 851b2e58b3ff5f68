import ipaddress

import pytest

from dualink.keymap import KeyRemapConfig, ModifierRole
from dualink.remap import (
    DEFAULT_PORT,
    CaptureBackend,
    ConfigClient,
    EmulationBackend,
    Position,
    apply_remap_override,
    merge_cli_remap_strings,
    parse_key_remap,
    parse_remap_strings,
)
from dualink.scancodes import Scancode


def test_capture_backend_names():
    assert CaptureBackend("layer-shell") is CaptureBackend.LAYER_SHELL
    assert str(CaptureBackend.X11) == "X11"
    assert str(CaptureBackend.MACOS) == "MacOS"
    assert CaptureBackend("dummy").value == "dummy"


def test_emulation_backend_names():
    assert EmulationBackend("xdp") is EmulationBackend.XDP
    assert str(EmulationBackend.XDP) == "xdg-desktop-portal"
    assert str(EmulationBackend.MACOS_VHID) == "macos-vhid"
    with pytest.raises(ValueError):
        EmulationBackend("no-such-backend")


def test_client_from_empty_table_uses_defaults():
    client = ConfigClient.from_toml({})
    assert client.port == DEFAULT_PORT
    assert client.pos is Position.default()
    assert client.active is False
    assert client.ips == set()
    assert client.hostname is None
    assert client.enter_hook is None


def test_client_from_table():
    client = ConfigClient.from_toml(
        {
            "hostname": "host.example.com",
            "ips": ["192.168.1.2", "::1"],
            "port": 5000,
            "position": "right",
            "activate_on_startup": True,
            "enter_hook": "true",
        }
    )
    assert client.hostname == "host.example.com"
    assert client.ips == {
        ipaddress.ip_address("192.168.1.2"),
        ipaddress.ip_address("::1"),
    }
    assert client.port == 5000
    assert client.pos is Position.RIGHT
    assert client.active is True
    assert client.enter_hook == "true"


def test_client_from_table_rejects_bad_values():
    with pytest.raises(ValueError):
        ConfigClient.from_toml({"ips": ["not-an-ip"]})
    with pytest.raises(ValueError):
        ConfigClient.from_toml({"position": "diagonal"})


def test_client_to_toml_omits_defaults():
    table = ConfigClient(pos=Position.TOP).to_toml()
    assert "port" not in table
    assert "activate_on_startup" not in table
    assert "hostname" not in table
    assert "enter_hook" not in table
    assert table["position"] == "top"
    assert table["ips"] == []


def test_client_to_toml_sorts_ips_v4_first():
    client = ConfigClient(
        ips={
            ipaddress.ip_address("::1"),
            ipaddress.ip_address("10.0.0.2"),
            ipaddress.ip_address("10.0.0.1"),
        }
    )
    assert client.to_toml()["ips"] == ["10.0.0.1", "10.0.0.2", "::1"]


def test_client_toml_round_trip():
    client = ConfigClient(
        ips={ipaddress.ip_address("192.168.1.2")},
        hostname="host.example.com",
        port=5000,
        pos=Position.BOTTOM,
        active=True,
        enter_hook="true",
    )
    assert ConfigClient.from_toml(client.to_toml()) == client


def test_parse_key_remap_none_is_empty():
    assert parse_key_remap(None, None).is_empty()


def test_parse_key_remap_modifiers_and_keys():
    config = parse_key_remap(
        {"ctrl": "cmd", "bogus": "alt"},
        {"KeyCapsLock": "KeyEsc", "KeyNope": "KeyEsc"},
    )
    assert config.modifier_remap == [(ModifierRole.CTRL, ModifierRole.META)]
    assert config.key_remap == {int(Scancode.KeyCapsLock): int(Scancode.KeyEsc)}


def test_apply_override_modifier():
    config = KeyRemapConfig()
    apply_remap_override(config, " Control = Option ")
    assert config.modifier_remap == [(ModifierRole.CTRL, ModifierRole.ALT)]
    assert config.key_remap == {}


def test_apply_override_key():
    config = KeyRemapConfig()
    apply_remap_override(config, "KeyCapsLock=KeyEsc")
    assert config.key_remap == {int(Scancode.KeyCapsLock): int(Scancode.KeyEsc)}
    assert config.modifier_remap == []


def test_apply_override_invalid_entries_ignored():
    config = KeyRemapConfig()
    apply_remap_override(config, "ctrl")
    apply_remap_override(config, "KeyNope=KeyEsc")
    apply_remap_override(config, "ctrl=KeyEsc")
    assert config.is_empty()


def test_merge_cli_remap_strings():
    modifiers = {"alt": "meta"}
    keys = {"KeyA": "KeyB"}
    merged_mods, merged_keys = merge_cli_remap_strings(
        ["ctrl = cmd", "KeyCapsLock=KeyEsc", "ctrl=KeyEsc", "garbage"],
        modifiers,
        keys,
    )
    assert merged_mods == {"alt": "meta", "ctrl": "cmd"}
    assert merged_keys == {"KeyA": "KeyB", "KeyCapsLock": "KeyEsc", "ctrl": "KeyEsc"}
    assert modifiers == {"alt": "meta"}
    assert keys == {"KeyA": "KeyB"}


def test_parse_remap_strings_empty():
    config = parse_remap_strings({}, {})
    assert config.is_empty()
    assert config.mapping_count() == 0


def test_parse_remap_strings_counts_mappings():
    config = parse_remap_strings({"ctrl": "meta"}, {"KeyCapsLock": "KeyEsc"})
    assert config.mapping_count() == 3
    assert config.validate() == []