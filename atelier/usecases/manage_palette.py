from __future__ import annotations

"""Saved-color use cases over the preference port."""

import logging
from dataclasses import dataclass
from typing import List

from atelier.domain.palette import Palette, normalize_hex
from atelier.domain.ports import PreferencePort, UseCaseError

LOGGER = logging.getLogger(__name__)

SAVED_COLORS_KEY = "saved_colors"


def _load(preferences: PreferencePort) -> Palette:
    try:
        raw = preferences.get(SAVED_COLORS_KEY, [])
    except Exception as exc:
        raise UseCaseError("PALETTE_LOAD_FAILED", str(exc))
    if not isinstance(raw, list):
        LOGGER.warning("Ignoring malformed saved colors: %r", raw)
        return Palette()
    return Palette.from_list(raw)


def _store(preferences: PreferencePort, palette: Palette) -> None:
    try:
        preferences.set(SAVED_COLORS_KEY, palette.to_list())
    except Exception as exc:
        raise UseCaseError("PALETTE_SAVE_FAILED", str(exc))


@dataclass
class LoadPalette:
    preferences: PreferencePort

    def __call__(self) -> List[str]:
        return _load(self.preferences).to_list()


@dataclass
class SaveColor:
    """Append a color to the saved palette; already saved colors are left in place."""

    preferences: PreferencePort

    def __call__(self, color_hex: str) -> List[str]:
        try:
            color = normalize_hex(color_hex)
        except ValueError as exc:
            raise UseCaseError("INVALID_COLOR", str(exc))
        palette = _load(self.preferences)
        if palette.add(color):
            _store(self.preferences, palette)
        return palette.to_list()


@dataclass
class DeleteColor:
    preferences: PreferencePort

    def __call__(self, color_hex: str) -> List[str]:
        palette = _load(self.preferences)
        if palette.remove(color_hex):
            _store(self.preferences, palette)
        return palette.to_list()


__all__ = ["DeleteColor", "LoadPalette", "SAVED_COLORS_KEY", "SaveColor"]
