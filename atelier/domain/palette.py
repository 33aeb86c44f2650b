from __future__ import annotations

"""Color values, presets, and the saved-color palette."""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

_HEX_PATTERN = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_NON_HEX = re.compile(r"[^0-9A-Fa-f]")


@dataclass(frozen=True)
class ColorPreset:
    name: str
    hex: str


PRESET_COLORS: Tuple[ColorPreset, ...] = (
    ColorPreset("Black", "#000000"),
    ColorPreset("White", "#ffffff"),
    ColorPreset("Light Blue", "#0ea5e9"),
    ColorPreset("Dark Blue", "#1e3a8a"),
    ColorPreset("Red", "#ef4444"),
    ColorPreset("Yellow", "#eab308"),
    ColorPreset("Purple", "#a855f7"),
    ColorPreset("Pink", "#ec4899"),
    ColorPreset("Orange", "#f97316"),
    ColorPreset("Cyan", "#22d3ee"),
)

DEFAULT_COLOR = "#000000"


def is_valid_hex(value: object) -> bool:
    return isinstance(value, str) and bool(_HEX_PATTERN.match(value.strip()))


def normalize_hex(value: object) -> str:
    """Return ``#rrggbb`` in lower case; short ``#rgb`` forms are expanded."""
    if not isinstance(value, str):
        raise ValueError(f"Color must be a hex string, got {value!r}.")
    match = _HEX_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid hex color: {value!r}")
    digits = match.group(1).lower()
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits}"


def sanitize_hex_input(text: str) -> Optional[str]:
    """Filter free text typed into the hex field.

    Non-hex characters are dropped; input longer than six digits is refused
    (``None``) so the field keeps its previous value.
    """
    digits = _NON_HEX.sub("", text or "")
    if len(digits) > 6:
        return None
    return f"#{digits}"


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    digits = normalize_hex(value)[1:]
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


@dataclass
class Palette:
    """Saved colors: unique under case-insensitive comparison, insertion order kept."""

    _colors: List[str] = field(default_factory=list)

    @classmethod
    def from_list(cls, values: Iterable[object]) -> "Palette":
        palette = cls()
        for value in values or ():
            if is_valid_hex(value):
                palette.add(str(value))
        return palette

    def to_list(self) -> List[str]:
        return list(self._colors)

    @property
    def colors(self) -> Tuple[str, ...]:
        return tuple(self._colors)

    def __len__(self) -> int:
        return len(self._colors)

    def __contains__(self, value: object) -> bool:
        if not is_valid_hex(value):
            return False
        return normalize_hex(value) in self._colors

    def add(self, value: str) -> bool:
        """Store ``value``; returns False when an equal color is already saved."""
        color = normalize_hex(value)
        if color in self._colors:
            return False
        self._colors.append(color)
        return True

    def remove(self, value: str) -> bool:
        if not is_valid_hex(value):
            return False
        color = normalize_hex(value)
        if color not in self._colors:
            return False
        self._colors.remove(color)
        return True


__all__ = [
    "ColorPreset",
    "DEFAULT_COLOR",
    "PRESET_COLORS",
    "Palette",
    "hex_to_rgb",
    "is_valid_hex",
    "normalize_hex",
    "sanitize_hex_input",
]
