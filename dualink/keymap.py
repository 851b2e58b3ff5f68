"""Modifier-aware key remapping.

Transforms keyboard events according to modifier role remapping
(e.g. Ctrl to Cmd) and plain key-to-key remapping (e.g. CapsLock to Escape),
tracking pressed modifiers so that releases match their presses.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from dualink.events import Event, KeyboardKey, KeyboardModifiers
from dualink.scancodes import Scancode


class ModifierRole(Enum):
    """A modifier role, mapping to left/right scancodes and an XMods bit."""

    CTRL = "ctrl"
    SHIFT = "shift"
    ALT = "alt"
    META = "meta"

    @classmethod
    def from_config_str(cls, s: str) -> ModifierRole | None:
        """Parse a configuration name (case-insensitive, with aliases)."""
        return _ALIASES.get(s.lower())

    def to_config_str(self) -> str:
        """Canonical configuration name."""
        return self.value

    def scancodes(self) -> tuple[int, int]:
        """The (left, right) Linux scancodes of this role."""
        return _SCANCODES[self]

    def xmod_bit(self) -> int:
        """XMods bitmask of this role (X11 convention)."""
        return _XMOD_BITS[self]

    def __str__(self) -> str:
        return self.name.title()


_ALIASES = {
    "ctrl": ModifierRole.CTRL,
    "control": ModifierRole.CTRL,
    "shift": ModifierRole.SHIFT,
    "alt": ModifierRole.ALT,
    "option": ModifierRole.ALT,
    "meta": ModifierRole.META,
    "cmd": ModifierRole.META,
    "command": ModifierRole.META,
    "win": ModifierRole.META,
    "super": ModifierRole.META,
}

_SCANCODES = {
    ModifierRole.CTRL: (int(Scancode.KeyLeftCtrl), int(Scancode.KeyRightCtrl)),
    ModifierRole.SHIFT: (int(Scancode.KeyLeftShift), int(Scancode.KeyRightShift)),
    ModifierRole.ALT: (int(Scancode.KeyLeftAlt), int(Scancode.KeyRightalt)),
    ModifierRole.META: (int(Scancode.KeyLeftMeta), int(Scancode.KeyRightmeta)),
}

_XMOD_BITS = {
    ModifierRole.SHIFT: 1 << 0,
    ModifierRole.CTRL: 1 << 2,
    ModifierRole.ALT: 1 << 3,
    ModifierRole.META: 1 << 6,
}

_MODIFIER_SCANCODES = frozenset(code for pair in _SCANCODES.values() for code in pair)


@dataclass
class KeyRemapConfig:
    """Modifier role remaps and scancode-to-scancode remaps."""

    modifier_remap: list[tuple[ModifierRole, ModifierRole]] = field(default_factory=list)
    key_remap: dict[int, int] = field(default_factory=dict)

    def is_empty(self) -> bool:
        """True when no remapping is configured."""
        return not self.modifier_remap and not self.key_remap

    def mapping_count(self) -> int:
        """Number of scancode mappings this configuration produces."""
        return len(self.modifier_remap) * 2 + len(self.key_remap)

    def validate(self) -> list[str]:
        """Warnings about no-ops, conflicts and chains."""
        warnings: list[str] = []

        seen_sources: dict[ModifierRole, ModifierRole] = {}
        for src, dst in self.modifier_remap:
            if src == dst:
                warnings.append(f"modifier remap {src} -> {dst} is a no-op")
                continue
            prev = seen_sources.get(src)
            seen_sources[src] = dst
            if prev is not None and prev != dst:
                warnings.append(
                    f"conflicting modifier remap: {src} mapped to both {prev} and {dst}"
                )

        for src, dst in self.modifier_remap:
            if src == dst:
                continue
            nxt = seen_sources.get(dst)
            if nxt is not None and nxt != src and nxt != dst:
                warnings.append(
                    f"modifier chain: {src} -> {dst} -> {nxt} "
                    "(may produce unexpected results)"
                )

        for src, dst in self.key_remap.items():
            nxt = self.key_remap.get(dst)
            if nxt is not None and nxt != src:
                warnings.append(
                    f"key remap chain: {src} -> {dst} -> {nxt} "
                    "(may produce unexpected results)"
                )

        return warnings


class KeyRemapEngine:
    """Stateful remapper that keeps modifier releases consistent with presses."""

    def __init__(self, config: KeyRemapConfig) -> None:
        self._scancode_map: dict[int, int] = {}
        self._modifier_bit_remap: list[tuple[int, int]] = []
        self._source_bits = 0
        self._pressed_modifiers: dict[int, int] = {}

        for src_role, dst_role in config.modifier_remap:
            if src_role == dst_role:
                continue
            src_left, src_right = src_role.scancodes()
            dst_left, dst_right = dst_role.scancodes()
            self._scancode_map[src_left] = dst_left
            self._scancode_map[src_right] = dst_right
            self._modifier_bit_remap.append((src_role.xmod_bit(), dst_role.xmod_bit()))
            self._source_bits |= src_role.xmod_bit()

        # modifier remaps take precedence over plain key remaps
        for src, dst in config.key_remap.items():
            self._scancode_map.setdefault(src, dst)

    def is_active(self) -> bool:
        """True when any remapping is in effect."""
        return bool(self._scancode_map)

    def reset(self) -> None:
        """Forget all pressed modifiers."""
        self._pressed_modifiers.clear()

    def drain_pressed(self) -> list[tuple[int, int]]:
        """Remove and return ``(physical, remapped)`` pairs of pressed modifiers."""
        pressed = list(self._pressed_modifiers.items())
        self._pressed_modifiers.clear()
        return pressed

    def remap_event(self, event: Event) -> Event:
        """Remap one event, updating modifier state."""
        if isinstance(event, KeyboardKey):
            return replace(event, key=self._remap_key(event.key, event.state))
        if isinstance(event, KeyboardModifiers):
            return replace(event, depressed=self.remap_modifier_bits(event.depressed))
        return event

    def _remap_key(self, key: int, state: int) -> int:
        is_modifier = key in _MODIFIER_SCANCODES
        if state != 0:
            remapped = self._scancode_map.get(key, key)
            if is_modifier:
                self._pressed_modifiers[key] = remapped
            return remapped
        if is_modifier and key in self._pressed_modifiers:
            return self._pressed_modifiers.pop(key)
        return self._scancode_map.get(key, key)

    def remap_modifier_bits(self, depressed: int) -> int:
        """Remap an XMods bitmask; circular swaps are handled correctly."""
        if not self._modifier_bit_remap:
            return depressed
        result = depressed & ~self._source_bits
        for src_bit, dst_bit in self._modifier_bit_remap:
            if depressed & src_bit:
                result |= dst_bit
        return result