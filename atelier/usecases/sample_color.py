from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from atelier.domain.errors import CapabilityUnavailableError
from atelier.domain.palette import normalize_hex
from atelier.domain.ports import ColorSamplerPort, UseCaseError


@dataclass
class SampleColor:
    """Pick a color from the screen through the optional platform sampler.

    Returns the normalized hex, or ``None`` when the user cancels the picker.
    """

    sampler: Optional[ColorSamplerPort]

    async def __call__(self) -> Optional[str]:
        if self.sampler is None or not await self.sampler.is_available():
            raise CapabilityUnavailableError("Color sampling")
        picked = await self.sampler.pick()
        if not picked:
            return None
        try:
            return normalize_hex(picked)
        except ValueError as exc:
            raise UseCaseError("INVALID_COLOR", str(exc))
