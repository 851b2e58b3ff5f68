# dualink

Building blocks for a software KVM: the pieces that decide what happens to
keyboard and mouse input on its way from one machine to another, and the
settings and identity that go with it.

| Module | What it holds |
| --- | --- |
| `dualink.events` | Event dataclasses: `PointerMotion`, `PointerButton`, `KeyboardKey`, `KeyboardModifiers`, and the `BTN_LEFT` button code |
| `dualink.coalescer` | `EventCoalescer`, which merges bursts of pointer motion |
| `dualink.scancodes` | `Scancode`, an `IntEnum` of Linux key codes, and `scancode_from_name()` |
| `dualink.keymap` | `ModifierRole`, `KeyRemapConfig` and `KeyRemapEngine` |
| `dualink.remap` | `Position`, `CaptureBackend`, `EmulationBackend`, `ConfigClient` and helpers that turn remap names into a `KeyRemapConfig` |
| `dualink.config` | Command-line parsing, `config.toml` loading and writing, `Config` |
| `dualink.crypto` | `Certificate`, certificate storage and SHA-256 fingerprints |
| `dualink.dns` | `DnsResolver`, background hostname resolution per client |

Install with `pip install .`; the test suite needs the `test` extra.

## Coalescing pointer motion

```python
from datetime import timedelta

from dualink.coalescer import EventCoalescer
from dualink.events import KeyboardKey, PointerMotion

coalescer = EventCoalescer(timedelta(milliseconds=1))
coalescer.feed(PointerMotion(time=0, dx=1.0, dy=2.0))
coalescer.feed(PointerMotion(time=0, dx=3.0, dy=-1.0))

# A non-motion event flushes the accumulated motion ahead of itself.
flushed, passthrough = coalescer.feed(KeyboardKey(time=0, key=42, state=1))
# flushed == PointerMotion(time=0, dx=4.0, dy=1.0)
```

The window may be a `timedelta` or a number of seconds; a negative window
raises `ValueError`. A window of zero turns coalescing off and every event
passes straight through. While motion is buffered, `has_pending()` is true and
`next_deadline()` gives the `time.monotonic()` value at which the caller should
call `flush()`.

## Remapping keys

```python
from dualink.events import KeyboardKey
from dualink.keymap import KeyRemapConfig, KeyRemapEngine, ModifierRole
from dualink.scancodes import Scancode

config = KeyRemapConfig(
    modifier_remap=[
        (ModifierRole.CTRL, ModifierRole.META),
        (ModifierRole.META, ModifierRole.CTRL),
    ],
    key_remap={Scancode.KeyCapsLock: Scancode.KeyEsc},
)
for warning in config.validate():
    print(warning)

engine = KeyRemapEngine(config)
engine.remap_event(KeyboardKey(time=0, key=Scancode.KeyLeftCtrl, state=1))
# -> KeyboardKey(time=0, key=Scancode.KeyLeftMeta, state=1)
```

`ModifierRole.from_config_str()` accepts `ctrl`/`control`, `shift`,
`alt`/`option` and `meta`/`cmd`/`command`/`win`/`super`, in any case.
`validate()` warns about no-op remaps, a modifier mapped to two targets, and
chains of remaps; a plain swap produces no warning. Modifier remaps take
precedence over key remaps for the same scancode. A held modifier is released
as the key it was pressed as; `drain_pressed()` hands back the held modifiers
so releases can be sent before the mapping is replaced, and `reset()` forgets
them. `KeyboardModifiers` bitmasks are remapped too, circular swaps included.

From names, as they appear in configuration:

```python
from dualink.remap import apply_remap_override, parse_remap_strings

config = parse_remap_strings({"ctrl": "cmd"}, {"KeyCapsLock": "KeyEsc"})
apply_remap_override(config, "alt=meta")
```

Invalid entries are skipped and logged as warnings rather than rejected.

## Configuration

`dualink.config.load_config(argv)` parses the arguments, reads the
configuration file and falls back to defaults, with a logged warning, when the
file is missing or invalid. The file is `config.toml` in `default_path()`:
`$XDG_CONFIG_HOME/dualink` (or `~/.config/dualink`) on Unix,
`%LOCALAPPDATA%\dualink` on Windows.

```toml
port = 4242
capture_backend = "layer-shell"
emulation_backend = "wlroots"
release_bind = ["KeyLeftCtrl", "KeyLeftShift", "KeyLeftMeta", "KeyLeftAlt"]
mouse_speed = 1.0
scroll_speed = 1.0
natural_scrolling = true
coalesce_window_us = 1000
clipboard_max_image_size = 52428800

[authorized_fingerprints]
"ab:cd:..." = "laptop"

[key_remap.modifiers]
ctrl = "cmd"

[key_remap.keys]
KeyCapsLock = "KeyEsc"

[[clients]]
hostname = "laptop"
ips = ["192.168.0.10"]
position = "left"
activate_on_startup = true
```

```python
from dualink.config import load_config

config = load_config(["--remap", "alt=meta"])
print(config.port(), config.key_remap_config().mapping_count())
```

Arguments understood by `parse_args()`: `-p/--port`, `-c/--config`,
`--capture-backend`, `--emulation-backend`, `--cert-path`, `--diagnose`,
`--remap FROM=TO` (repeatable), `--version`, and the subcommands
`test-emulation` (with `--mouse`, `--keyboard`, `--scroll`) and `daemon`.
Command-line values take precedence over the file. `Config.command()` and
`Config.diagnose()` only report what was given.

`Config.reload_key_remap_from_disk()` re-reads the file and returns the remap
configuration with the `--remap` overrides applied, together with the modifier
and key name maps. `set_clients()`, `set_authorized_keys()` and
`set_key_remap_toml()` change the configuration in memory, and `write_back()`
writes it to the configuration file, replacing what was there.

## Certificates

```python
from pathlib import Path

from dualink.crypto import certificate_fingerprint, load_or_generate_key_and_cert

cert = load_or_generate_key_and_cert(Path("dualink.pem"))
print(certificate_fingerprint(cert))
```

A new certificate is a self-signed ECDSA P-256 certificate, stored as a PEM
file holding the private key and the certificate; where the platform supports
it, the file is made readable by its owner only. Fingerprints are SHA-256
digests written as colon-separated lower-case hex bytes. Unreadable PEM data
raises `CertificateError`.

## Resolving hostnames

```python
import asyncio

from dualink.dns import DnsResolver, Resolved

async def main():
    resolver = DnsResolver()
    resolver.resolve(0, "localhost")
    while not isinstance(event := await resolver.event(), Resolved):
        pass
    print(event.ips, event.error)
    await resolver.terminate()

asyncio.run(main())
```

Each `resolve()` emits a `Resolving` event followed by a `Resolved` event,
whose `error` is set when the lookup failed. A new request for a handle
cancels the one still running for it. A custom lookup coroutine may be passed
to `DnsResolver(lookup)`.

## What this package does not do

There is no running service and no command to start one: the package does not
capture local input, inject input, open network connections or DTLS sessions,
listen on the configured port, synchronise the clipboard or print a
diagnostics report. The `daemon` and `test-emulation` subcommands and
`--diagnose` are parsed but not acted on. It supplies the data types, remapping,
configuration and identity that such a service would use.