from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ..domain.palette import (
    DEFAULT_COLOR,
    PRESET_COLORS,
    ColorPreset,
    is_valid_hex,
    normalize_hex,
    sanitize_hex_input,
)


@dataclass
class PaletteVM:
    """Selected color, hex field text and the saved-color list. Pure UI-logic.

    Persistence goes through ``on_save_color`` / ``on_delete_color`` which
    return the stored list; the VM only mirrors it.
    """

    on_save_color: Optional[Callable[[str], List[str]]] = None
    on_delete_color: Optional[Callable[[str], List[str]]] = None

    color: str = DEFAULT_COLOR
    hex_text: str = DEFAULT_COLOR
    _saved: List[str] = field(default_factory=list)

    @property
    def presets(self) -> Tuple[ColorPreset, ...]:
        return PRESET_COLORS

    @property
    def saved(self) -> Tuple[str, ...]:
        return tuple(self._saved)

    def load(self, colors: List[str]) -> None:
        self._saved = [normalize_hex(c) for c in colors if is_valid_hex(c)]

    def select(self, value: str) -> str:
        self.color = normalize_hex(value)
        self.hex_text = self.color
        return self.color

    def on_hex_input(self, text: str) -> str:
        """Filter typed text; a complete six-digit value also becomes the selected color."""
        filtered = sanitize_hex_input(text)
        if filtered is None:
            return self.hex_text
        self.hex_text = filtered
        if len(filtered) == 7:
            self.color = normalize_hex(filtered)
        return self.hex_text

    def is_saved(self, value: str) -> bool:
        return is_valid_hex(value) and normalize_hex(value) in self._saved

    # ---- Commands surfaced to View ----
    def cmd_save_current(self) -> Tuple[str, ...]:
        if self.on_save_color:
            self._saved = list(self.on_save_color(self.color))
        return self.saved

    def cmd_delete(self, value: str) -> Tuple[str, ...]:
        if self.on_delete_color:
            self._saved = list(self.on_delete_color(value))
        return self.saved


__all__ = ["PaletteVM"]
