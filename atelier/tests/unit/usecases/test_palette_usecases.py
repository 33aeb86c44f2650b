from __future__ import annotations

import asyncio
from typing import Optional

import pytest

from atelier.adapters.storage_memory import MappingPreferences
from atelier.domain.errors import CapabilityUnavailableError
from atelier.domain.ports import UseCaseError
from atelier.usecases.manage_palette import SAVED_COLORS_KEY, DeleteColor, LoadPalette, SaveColor
from atelier.usecases.sample_color import SampleColor


def test_save_color_is_idempotent_and_persisted() -> None:
    prefs = MappingPreferences()
    save = SaveColor(prefs)

    assert save("#AA0000") == ["#aa0000"]
    assert save("#aa0000") == ["#aa0000"]
    assert save("#00bb00") == ["#aa0000", "#00bb00"]
    assert prefs.get(SAVED_COLORS_KEY) == ["#aa0000", "#00bb00"]
    assert LoadPalette(prefs)() == ["#aa0000", "#00bb00"]


def test_save_color_rejects_invalid_hex() -> None:
    with pytest.raises(UseCaseError) as excinfo:
        SaveColor(MappingPreferences())("blue")

    assert excinfo.value.code == "INVALID_COLOR"


def test_delete_color_keeps_order_of_remaining() -> None:
    prefs = MappingPreferences({SAVED_COLORS_KEY: ["#111111", "#222222", "#333333"]})

    assert DeleteColor(prefs)("#222222") == ["#111111", "#333333"]
    assert DeleteColor(prefs)("#999999") == ["#111111", "#333333"]
    assert prefs.get(SAVED_COLORS_KEY) == ["#111111", "#333333"]


def test_load_palette_ignores_malformed_data() -> None:
    assert LoadPalette(MappingPreferences({SAVED_COLORS_KEY: "oops"}))() == []
    assert LoadPalette(MappingPreferences({SAVED_COLORS_KEY: ["#abc", 3]}))() == ["#aabbcc"]


class _Sampler:
    def __init__(self, available: bool, picked: Optional[str]) -> None:
        self.available = available
        self.picked = picked

    async def is_available(self) -> bool:
        return self.available

    async def pick(self) -> Optional[str]:
        return self.picked


def test_sample_color_returns_normalized_hex() -> None:
    assert asyncio.run(SampleColor(_Sampler(True, "#ABCDEF"))()) == "#abcdef"


def test_sample_color_cancel_returns_none() -> None:
    assert asyncio.run(SampleColor(_Sampler(True, None))()) is None


def test_sample_color_unavailable_raises_capability_error() -> None:
    with pytest.raises(CapabilityUnavailableError) as excinfo:
        asyncio.run(SampleColor(_Sampler(False, "#000000"))())

    assert excinfo.value.capability == "Color sampling"

    with pytest.raises(CapabilityUnavailableError):
        asyncio.run(SampleColor(None)())
