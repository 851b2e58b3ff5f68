"""Client, backend and key remap settings as they appear in configuration."""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from dualink.keymap import KeyRemapConfig, ModifierRole
from dualink.scancodes import scancode_from_name

log = logging.getLogger(__name__)

DEFAULT_PORT = 4242
"""Port used when a client or the service does not configure one."""

IpAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


class Position(Enum):
    """Side of the screen at which a client is placed."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"

    @classmethod
    def default(cls) -> Position:
        """Position used when none is configured."""
        return cls.LEFT

    def __str__(self) -> str:
        return self.value


class CaptureBackend(Enum):
    """Input capture backends, valued by their configuration names."""

    INPUT_CAPTURE_PORTAL = "input-capture-portal"
    LAYER_SHELL = "layer-shell"
    X11 = "x11"
    WINDOWS = "windows"
    MACOS = "macos"
    DUMMY = "dummy"

    def __str__(self) -> str:
        return _CAPTURE_DISPLAY[self]


_CAPTURE_DISPLAY = {
    CaptureBackend.INPUT_CAPTURE_PORTAL: "input-capture-portal",
    CaptureBackend.LAYER_SHELL: "layer-shell",
    CaptureBackend.X11: "X11",
    CaptureBackend.WINDOWS: "windows",
    CaptureBackend.MACOS: "MacOS",
    CaptureBackend.DUMMY: "dummy",
}


class EmulationBackend(Enum):
    """Input emulation backends, valued by their configuration names."""

    WLROOTS = "wlroots"
    LIBEI = "libei"
    XDP = "xdp"
    X11 = "x11"
    WINDOWS = "windows"
    MACOS = "macos"
    MACOS_VHID = "macos-vhid"
    DUMMY = "dummy"

    def __str__(self) -> str:
        return _EMULATION_DISPLAY[self]


_EMULATION_DISPLAY = {
    EmulationBackend.WLROOTS: "wlroots",
    EmulationBackend.LIBEI: "libei",
    EmulationBackend.XDP: "xdg-desktop-portal",
    EmulationBackend.X11: "X11",
    EmulationBackend.WINDOWS: "windows",
    EmulationBackend.MACOS: "macos",
    EmulationBackend.MACOS_VHID: "macos-vhid",
    EmulationBackend.DUMMY: "dummy",
}


def _ip_sort_key(ip: IpAddress) -> tuple[int, int]:
    return ip.version, int(ip)


@dataclass
class ConfigClient:
    """A client as stored in the configuration file."""

    ips: set[IpAddress] = field(default_factory=set)
    hostname: str | None = None
    port: int = DEFAULT_PORT
    pos: Position = field(default_factory=Position.default)
    active: bool = False
    enter_hook: str | None = None

    @classmethod
    def from_toml(cls, data: Mapping[str, Any]) -> ConfigClient:
        """Build a client from a ``[[clients]]`` table.

        Raises ``ValueError`` for malformed addresses or positions.
        """
        ips = {ipaddress.ip_address(ip) for ip in data.get("ips") or ()}
        position = data.get("position")
        return cls(
            ips=ips,
            hostname=data.get("hostname"),
            port=data.get("port", DEFAULT_PORT),
            pos=Position(position) if position is not None else Position.default(),
            active=bool(data.get("activate_on_startup", False)),
            enter_hook=data.get("enter_hook"),
        )

    def to_toml(self) -> dict[str, Any]:
        """The ``[[clients]]`` table for this client, without unset entries."""
        table: dict[str, Any] = {}
        if self.hostname is not None:
            table["hostname"] = self.hostname
        table["ips"] = [str(ip) for ip in sorted(self.ips, key=_ip_sort_key)]
        if self.port != DEFAULT_PORT:
            table["port"] = self.port
        table["position"] = self.pos.value
        if self.active:
            table["activate_on_startup"] = True
        if self.enter_hook is not None:
            table["enter_hook"] = self.enter_hook
        return table


def _key_code(name: str) -> int | None:
    try:
        return int(scancode_from_name(name))
    except ValueError:
        return None


def parse_key_remap(
    modifiers: Mapping[str, str] | None, keys: Mapping[str, str] | None
) -> KeyRemapConfig:
    """Build a remap configuration from name maps; invalid entries are skipped."""
    config = KeyRemapConfig()
    for from_str, to_str in (modifiers or {}).items():
        src = ModifierRole.from_config_str(from_str)
        dst = ModifierRole.from_config_str(to_str)
        if src is None or dst is None:
            log.warning("ignoring invalid modifier remap: %s = %s", from_str, to_str)
            continue
        config.modifier_remap.append((src, dst))
    for from_str, to_str in (keys or {}).items():
        src_key = _key_code(from_str)
        dst_key = _key_code(to_str)
        if src_key is None or dst_key is None:
            log.warning("ignoring invalid key remap: %s = %s", from_str, to_str)
            continue
        config.key_remap[src_key] = dst_key
    return config


def _split_entry(entry: str) -> tuple[str, str] | None:
    from_str, sep, to_str = entry.partition("=")
    if not sep:
        return None
    return from_str.strip(), to_str.strip()


def apply_remap_override(config: KeyRemapConfig, entry: str) -> None:
    """Add one ``FROM=TO`` override to ``config``; invalid entries are skipped."""
    parts = _split_entry(entry)
    if parts is None:
        log.warning("invalid --remap format: %s (expected FROM=TO)", entry)
        return
    from_str, to_str = parts

    src_role = ModifierRole.from_config_str(from_str)
    dst_role = ModifierRole.from_config_str(to_str)
    if src_role is not None and dst_role is not None:
        config.modifier_remap.append((src_role, dst_role))
        return

    src_key = _key_code(from_str)
    dst_key = _key_code(to_str)
    if src_key is None or dst_key is None:
        log.warning("invalid --remap entry: %s (unknown key name)", entry)
        return
    config.key_remap[src_key] = dst_key


def merge_cli_remap_strings(
    entries: Iterable[str],
    modifiers: Mapping[str, str],
    keys: Mapping[str, str],
) -> tuple[dict[str, str], dict[str, str]]:
    """Return copies of the name maps with ``FROM=TO`` entries merged in.

    Entries naming two modifier roles go to the modifier map, all others to
    the key map; entries without ``=`` are skipped.
    """
    merged_modifiers = dict(modifiers)
    merged_keys = dict(keys)
    for entry in entries:
        parts = _split_entry(entry)
        if parts is None:
            continue
        src, dst = parts
        if (
            ModifierRole.from_config_str(src) is not None
            and ModifierRole.from_config_str(dst) is not None
        ):
            merged_modifiers[src] = dst
        else:
            merged_keys[src] = dst
    return merged_modifiers, merged_keys


def parse_remap_strings(
    modifiers: Mapping[str, str], keys: Mapping[str, str]
) -> KeyRemapConfig:
    """Build a remap configuration from the name maps sent by frontends."""
    return parse_key_remap(modifiers or None, keys or None)