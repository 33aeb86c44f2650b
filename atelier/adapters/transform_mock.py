from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from PIL import Image, ImageOps

from atelier.domain.entities import ArtifactState
from atelier.domain.ports import TransformPort, VideoPort

_HEX_IN_TEXT = re.compile(r"#[0-9a-fA-F]{6}")

# Minimal ISO-BMFF header so players recognize the placeholder as MP4.
_PLACEHOLDER_MP4 = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"


@dataclass
class TransformMock(TransformPort, VideoPort):
    """Offline substitute for ``GeminiRestAdapter`` with deterministic responses.

    Recolor instructions tint the source toward the requested hex color, any
    instruction mentioning the background drops near-white pixels to
    transparent, everything else yields a grayscale copy.
    """

    calls: List[Tuple[str, str]] = field(default_factory=list)
    fail_with: Optional[Exception] = None

    # ---------- TransformPort ----------

    def transform_image(self, source: ArtifactState, instruction: str) -> ArtifactState:
        self.calls.append(("transform_image", instruction))
        self._maybe_fail()
        with Image.open(io.BytesIO(source.payload)) as opened:
            image = opened.convert("RGB")
        match = _HEX_IN_TEXT.search(instruction or "")
        if match:
            result = ImageOps.colorize(ImageOps.grayscale(image), black="#000000", white=match.group(0))
        elif "background" in (instruction or "").lower():
            result = self._drop_light_background(image)
        else:
            result = ImageOps.grayscale(image).convert("RGB")
        buf = io.BytesIO()
        result.save(buf, format="PNG")
        return ArtifactState(payload=buf.getvalue(), mime_type="image/png")

    # ---------- VideoPort ----------

    def generate_video(
        self, prompt: str, source: Optional[ArtifactState] = None
    ) -> ArtifactState:
        self.calls.append(("generate_video", prompt))
        self._maybe_fail()
        return ArtifactState(payload=_PLACEHOLDER_MP4, mime_type="video/mp4")

    # ------------------------------------------------------------------
    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            exc, self.fail_with = self.fail_with, None
            raise exc

    @staticmethod
    def _drop_light_background(image: Image.Image, threshold: int = 235) -> Image.Image:
        rgba = image.convert("RGBA")
        gray = ImageOps.grayscale(image)
        alpha = gray.point(lambda value: 0 if value >= threshold else 255)
        rgba.putalpha(alpha)
        return rgba


__all__ = ["TransformMock"]
