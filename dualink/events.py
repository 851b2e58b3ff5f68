"""Input events exchanged between devices."""

from __future__ import annotations

from dataclasses import dataclass

BTN_LEFT = 0x110
"""Linux event code of the left mouse button."""


@dataclass(frozen=True, slots=True)
class PointerMotion:
    """Relative pointer movement."""

    time: int
    dx: float
    dy: float


@dataclass(frozen=True, slots=True)
class PointerButton:
    """A mouse button press (state 1) or release (state 0)."""

    time: int
    button: int
    state: int


@dataclass(frozen=True, slots=True)
class KeyboardKey:
    """A key press (state != 0) or release (state 0), by Linux scancode."""

    time: int
    key: int
    state: int


@dataclass(frozen=True, slots=True)
class KeyboardModifiers:
    """Modifier state as XMods bitmasks."""

    depressed: int
    latched: int
    locked: int
    group: int


Event = PointerMotion | PointerButton | KeyboardKey | KeyboardModifiers