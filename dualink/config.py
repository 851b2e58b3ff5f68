"""Command line arguments and the configuration file."""

from __future__ import annotations

import argparse
import logging
import os
import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from dualink.keymap import KeyRemapConfig
from dualink.remap import (
    DEFAULT_PORT,
    CaptureBackend,
    ConfigClient,
    EmulationBackend,
    apply_remap_override,
    merge_cli_remap_strings,
    parse_key_remap,
)
from dualink.scancodes import Scancode, scancode_from_name

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.toml"
CERT_FILE_NAME = "dualink.pem"

DEFAULT_RELEASE_KEYS = (
    Scancode.KeyLeftCtrl,
    Scancode.KeyLeftShift,
    Scancode.KeyLeftMeta,
    Scancode.KeyLeftAlt,
)
DEFAULT_MOUSE_SPEED = 1.0
DEFAULT_SCROLL_SPEED = 1.0
DEFAULT_COALESCE_WINDOW_US = 1000
DEFAULT_CLIPBOARD_MAX_IMAGE_SIZE = 50 * 1024 * 1024

_MAX_U16 = 0xFFFF


class ConfigError(Exception):
    """The configuration could not be read, parsed or located."""


def default_path() -> Path:
    """Directory holding the configuration and certificate by default."""

    def var(name: str) -> str:
        try:
            return os.environ[name]
        except KeyError:
            raise ConfigError(f"environment variable not found: {name}") from None

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or f"{var('USERPROFILE')}/.config"
    else:
        base = os.environ.get("XDG_CONFIG_HOME") or f"{var('HOME')}/.config"
    return Path(base) / "dualink"


# --- configuration file -----------------------------------------------------


def _typed(data: Mapping[str, Any], key: str, kind: Any, label: str) -> Any:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise ConfigError(f"invalid type for `{key}`: expected {label}")
    return value


def _unsigned(data: Mapping[str, Any], key: str, maximum: int | None = None) -> int | None:
    value = _typed(data, key, int, "an integer")
    if value is None:
        return None
    if value < 0 or (maximum is not None and value > maximum):
        raise ConfigError(f"`{key}` out of range: {value}")
    return value


def _number(data: Mapping[str, Any], key: str) -> float | None:
    value = _typed(data, key, (int, float), "a number")
    return None if value is None else float(value)


def _str_map(data: Mapping[str, Any], key: str) -> dict[str, str] | None:
    table = _typed(data, key, dict, "a table")
    if table is None:
        return None
    if not all(isinstance(v, str) for v in table.values()):
        raise ConfigError(f"invalid value in `{key}`: expected strings")
    return dict(table)


def _enum(data: Mapping[str, Any], key: str, enum_cls: Any) -> Any:
    value = _typed(data, key, str, "a string")
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise ConfigError(f"unknown variant `{value}` for `{key}`") from None


def _parse_client(data: Any) -> ConfigClient:
    if not isinstance(data, dict):
        raise ConfigError("invalid client entry: expected a table")
    _typed(data, "hostname", str, "a string")
    _typed(data, "host_name", str, "a string")
    ips = _typed(data, "ips", list, "an array")
    if ips is not None and not all(isinstance(ip, str) for ip in ips):
        raise ConfigError("invalid value in `ips`: expected strings")
    _unsigned(data, "port", _MAX_U16)
    _typed(data, "position", str, "a string")
    _typed(data, "activate_on_startup", bool, "a boolean")
    _typed(data, "enter_hook", str, "a string")
    try:
        return ConfigClient.from_toml(data)
    except ValueError as e:
        raise ConfigError(f"invalid client entry: {e}") from e


@dataclass
class _KeyRemapToml:
    modifiers: dict[str, str] | None = None
    keys: dict[str, str] | None = None


@dataclass
class _ConfigToml:
    capture_backend: CaptureBackend | None = None
    emulation_backend: EmulationBackend | None = None
    port: int | None = None
    release_bind: list[Scancode] | None = None
    cert_path: Path | None = None
    clients: list[ConfigClient] | None = None
    authorized_fingerprints: dict[str, str] | None = None
    key_remap: _KeyRemapToml | None = None
    mouse_speed: float | None = None
    scroll_speed: float | None = None
    natural_scrolling: bool | None = None
    coalesce_window_us: int | None = None
    clipboard_max_image_size: int | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> _ConfigToml:
        release_bind = _typed(data, "release_bind", list, "an array")
        if release_bind is not None:
            try:
                release_bind = [scancode_from_name(name) for name in release_bind]
            except (ValueError, TypeError, KeyError) as e:
                raise ConfigError(f"invalid `release_bind`: {e}") from e
        cert_path = _typed(data, "cert_path", str, "a string")
        clients = _typed(data, "clients", list, "an array")
        key_remap = _typed(data, "key_remap", dict, "a table")
        return cls(
            capture_backend=_enum(data, "capture_backend", CaptureBackend),
            emulation_backend=_enum(data, "emulation_backend", EmulationBackend),
            port=_unsigned(data, "port", _MAX_U16),
            release_bind=release_bind,
            cert_path=Path(cert_path) if cert_path is not None else None,
            clients=[_parse_client(c) for c in clients] if clients is not None else None,
            authorized_fingerprints=_str_map(data, "authorized_fingerprints"),
            key_remap=(
                _KeyRemapToml(_str_map(key_remap, "modifiers"), _str_map(key_remap, "keys"))
                if key_remap is not None
                else None
            ),
            mouse_speed=_number(data, "mouse_speed"),
            scroll_speed=_number(data, "scroll_speed"),
            natural_scrolling=_typed(data, "natural_scrolling", bool, "a boolean"),
            coalesce_window_us=_unsigned(data, "coalesce_window_us"),
            clipboard_max_image_size=_unsigned(data, "clipboard_max_image_size"),
        )

    @classmethod
    def load(cls, path: Path) -> _ConfigToml:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(str(e)) from e
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(str(e)) from e
        return cls.from_mapping(data)

    def to_toml(self) -> dict[str, Any]:
        doc: dict[str, Any] = {}
        if self.capture_backend is not None:
            doc["capture_backend"] = self.capture_backend.value
        if self.emulation_backend is not None:
            doc["emulation_backend"] = self.emulation_backend.value
        if self.port is not None:
            doc["port"] = self.port
        if self.release_bind is not None:
            doc["release_bind"] = [key.name for key in self.release_bind]
        if self.cert_path is not None:
            doc["cert_path"] = str(self.cert_path)
        if self.clients is not None:
            doc["clients"] = [client.to_toml() for client in self.clients]
        if self.authorized_fingerprints is not None:
            doc["authorized_fingerprints"] = dict(self.authorized_fingerprints)
        if self.key_remap is not None:
            remap: dict[str, Any] = {}
            if self.key_remap.modifiers is not None:
                remap["modifiers"] = dict(self.key_remap.modifiers)
            if self.key_remap.keys is not None:
                remap["keys"] = dict(self.key_remap.keys)
            doc["key_remap"] = remap
        for key in (
            "mouse_speed",
            "scroll_speed",
            "natural_scrolling",
            "coalesce_window_us",
            "clipboard_max_image_size",
        ):
            value = getattr(self, key)
            if value is not None:
                doc[key] = value
        return doc


# --- command line -----------------------------------------------------------


def _port(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {text}") from None
    if not 0 <= value <= _MAX_U16:
        raise argparse.ArgumentTypeError(f"port out of range: {text}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dualink",
        description="Software KVM: share mouse and keyboard between computers",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.10.0")
    parser.add_argument("-p", "--port", type=_port, help="the listen port for dualink")
    parser.add_argument("-c", "--config", type=Path, help="non-default config file location")
    parser.add_argument(
        "--capture-backend",
        type=CaptureBackend,
        choices=list(CaptureBackend),
        metavar="{" + ",".join(b.value for b in CaptureBackend) + "}",
        help="capture backend override",
    )
    parser.add_argument(
        "--emulation-backend",
        type=EmulationBackend,
        choices=list(EmulationBackend),
        metavar="{" + ",".join(b.value for b in EmulationBackend) + "}",
        help="emulation backend override",
    )
    parser.add_argument("--cert-path", type=Path, help="path to non-default certificate location")
    parser.add_argument(
        "--diagnose", action="store_true", help="print system compatibility report and exit"
    )
    parser.add_argument(
        "--remap",
        action="append",
        default=[],
        metavar="FROM=TO",
        help='key remap override (e.g. "ctrl=cmd" or "KeyCapsLock=KeyEsc")',
    )
    commands = parser.add_subparsers(dest="command")
    emulation = commands.add_parser("test-emulation", help="test input emulation")
    emulation.add_argument("--mouse", action="store_true")
    emulation.add_argument("--keyboard", action="store_true")
    emulation.add_argument("--scroll", action="store_true")
    commands.add_parser("daemon", help="run in daemon mode")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments; exits on invalid input."""
    return _build_parser().parse_args(argv)


# --- combined configuration -------------------------------------------------


class Config:
    """Command line arguments merged with the configuration file."""

    def __init__(
        self,
        args: argparse.Namespace,
        config_path: Path,
        cert_path: Path,
        config_toml: _ConfigToml | None = None,
    ) -> None:
        self._args = args
        self._config_path = Path(config_path)
        self._cert_path = Path(cert_path)
        self._toml = config_toml

    def _file_value(self, name: str) -> Any:
        return getattr(self._toml, name) if self._toml is not None else None

    def _remap_toml(self) -> _KeyRemapToml | None:
        return self._file_value("key_remap")

    def diagnose(self) -> bool:
        """Whether ``--diagnose`` was passed."""
        return bool(self._args.diagnose)

    def command(self) -> str | None:
        """Name of the subcommand to run, if any."""
        return self._args.command

    def config_path(self) -> Path:
        """Path of the configuration file in use."""
        return self._config_path

    def authorized_fingerprints(self) -> dict[str, str]:
        """Certificate fingerprints authorized to connect, with descriptions."""
        return dict(self._file_value("authorized_fingerprints") or {})

    def cert_path(self) -> Path:
        """Path of the certificate file."""
        return self._cert_path

    def capture_backend(self) -> CaptureBackend | None:
        """Input capture backend override."""
        return self._args.capture_backend or self._file_value("capture_backend")

    def emulation_backend(self) -> EmulationBackend | None:
        """Input emulation backend override."""
        return self._args.emulation_backend or self._file_value("emulation_backend")

    def port(self) -> int:
        """The port to listen on initially."""
        if self._args.port is not None:
            return self._args.port
        port = self._file_value("port")
        return DEFAULT_PORT if port is None else port

    def clients(self) -> list[ConfigClient]:
        """Configured clients."""
        return list(self._file_value("clients") or [])

    def _remap_with_overrides(self, remap: _KeyRemapToml | None) -> KeyRemapConfig:
        config = parse_key_remap(
            remap.modifiers if remap else None, remap.keys if remap else None
        )
        for entry in self._args.remap:
            apply_remap_override(config, entry)
        return config

    def _remap_strings(self, remap: _KeyRemapToml | None) -> tuple[dict[str, str], dict[str, str]]:
        modifiers = (remap.modifiers if remap else None) or {}
        keys = (remap.keys if remap else None) or {}
        return merge_cli_remap_strings(self._args.remap, modifiers, keys)

    def key_remap_config(self) -> KeyRemapConfig:
        """Key remapping from the file with ``--remap`` overrides applied."""
        return self._remap_with_overrides(self._remap_toml())

    def reload_key_remap_from_disk(
        self,
    ) -> tuple[KeyRemapConfig, dict[str, str], dict[str, str]]:
        """Re-read the file; return the remap config and its name maps."""
        try:
            toml = _ConfigToml.load(self._config_path)
        except ConfigError as e:
            log.warning("failed to reload config from %s: %s", self._config_path, e)
            return KeyRemapConfig(), {}, {}
        config = self._remap_with_overrides(toml.key_remap)
        modifiers, keys = self._remap_strings(toml.key_remap)
        return config, modifiers, keys

    def key_remap_strings(self) -> tuple[dict[str, str], dict[str, str]]:
        """Modifier and key remap name maps, including ``--remap`` entries."""
        return self._remap_strings(self._remap_toml())

    def mouse_speed(self) -> float:
        """Multiplier for incoming pointer motion."""
        value = self._file_value("mouse_speed")
        return DEFAULT_MOUSE_SPEED if value is None else value

    def scroll_speed(self) -> float:
        """Multiplier for incoming scroll events."""
        value = self._file_value("scroll_speed")
        return DEFAULT_SCROLL_SPEED if value is None else value

    def natural_scrolling(self) -> bool | None:
        """Natural scrolling override; None follows the system setting."""
        return self._file_value("natural_scrolling")

    def coalesce_window_us(self) -> int:
        """Motion coalescing window in microseconds; 0 disables it."""
        value = self._file_value("coalesce_window_us")
        return DEFAULT_COALESCE_WINDOW_US if value is None else value

    def clipboard_max_image_size(self) -> int:
        """Largest clipboard image synchronised, in bytes."""
        value = self._file_value("clipboard_max_image_size")
        return DEFAULT_CLIPBOARD_MAX_IMAGE_SIZE if value is None else value

    def release_bind(self) -> list[Scancode]:
        """Key combination that returns control to this host."""
        value = self._file_value("release_bind")
        return list(DEFAULT_RELEASE_KEYS if value is None else value)

    def _ensure_toml(self) -> _ConfigToml:
        if self._toml is None:
            self._toml = _ConfigToml()
        return self._toml

    def set_clients(self, clients: Sequence[ConfigClient]) -> None:
        """Replace the configured clients; an empty list changes nothing."""
        if not clients:
            return
        self._ensure_toml().clients = list(clients)

    def set_authorized_keys(self, fingerprints: Mapping[str, str]) -> None:
        """Replace the authorized fingerprints; an empty map changes nothing."""
        if not fingerprints:
            return
        self._ensure_toml().authorized_fingerprints = dict(fingerprints)

    def set_key_remap_toml(self, modifiers: Mapping[str, str], keys: Mapping[str, str]) -> None:
        """Replace the key remap section kept in memory."""
        self._ensure_toml().key_remap = _KeyRemapToml(
            modifiers=dict(modifiers) or None, keys=dict(keys) or None
        )

    def write_back(self) -> None:
        """Write the in-memory configuration to the configuration file."""
        log.info("writing config to %s", self._config_path)
        if not self._config_path.exists():
            log.info("%s does not exist => creating new config", self._config_path)
        text = tomli_w.dumps((self._toml or _ConfigToml()).to_toml())
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        self._config_path.write_text(text, encoding="utf-8")


def load_config(argv: Sequence[str] | None = None) -> Config:
    """Parse arguments and read the configuration file they point to.

    A missing or invalid file is reported and the defaults are used.
    """
    args = parse_args(argv)
    config_path = args.config if args.config is not None else default_path() / CONFIG_FILE_NAME
    try:
        config_toml: _ConfigToml | None = _ConfigToml.load(config_path)
    except ConfigError as e:
        log.warning("%s: %s", config_path, e)
        log.warning("Continuing without config file ...")
        config_toml = None
    cert_path = args.cert_path
    if cert_path is None and config_toml is not None:
        cert_path = config_toml.cert_path
    if cert_path is None:
        cert_path = default_path() / CERT_FILE_NAME
    return Config(args, config_path, cert_path, config_toml)