from __future__ import annotations

import io

import pytest
from PIL import Image

from atelier.adapters.transform_mock import TransformMock
from atelier.domain.entities import ArtifactState


def _png(color=(200, 30, 30), size=(8, 6)) -> ArtifactState:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return ArtifactState(buf.getvalue(), "image/png")


def _open(artifact: ArtifactState) -> Image.Image:
    return Image.open(io.BytesIO(artifact.payload))


def test_recolor_instruction_tints_toward_hex() -> None:
    mock = TransformMock()

    result = mock.transform_image(_png(color=(255, 255, 255)), "Recolor Dress to hex #ff0000. Keep light.")

    image = _open(result)
    assert result.mime_type == "image/png"
    assert image.size == (8, 6)
    assert image.convert("RGB").getpixel((0, 0)) == (255, 0, 0)
    assert mock.calls == [("transform_image", "Recolor Dress to hex #ff0000. Keep light.")]


def test_remove_background_makes_light_pixels_transparent() -> None:
    result = TransformMock().transform_image(_png(color=(250, 250, 250)), "Remove background")

    image = _open(result)
    assert image.mode == "RGBA"
    assert image.getpixel((0, 0))[3] == 0


def test_other_instructions_yield_grayscale() -> None:
    result = TransformMock().transform_image(_png(color=(200, 30, 30)), "make it vintage")

    r, g, b = _open(result).convert("RGB").getpixel((0, 0))
    assert r == g == b


def test_fail_with_raises_once() -> None:
    mock = TransformMock(fail_with=RuntimeError("offline"))

    with pytest.raises(RuntimeError, match="offline"):
        mock.transform_image(_png(), "x")

    assert mock.transform_image(_png(), "x").mime_type == "image/png"


def test_generate_video_returns_mp4_placeholder() -> None:
    mock = TransformMock()

    video = mock.generate_video("catwalk", _png())

    assert video.is_video
    assert video.mime_type == "video/mp4"
    assert mock.calls[-1] == ("generate_video", "catwalk")
