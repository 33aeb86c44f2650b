from __future__ import annotations

import pytest

from atelier.domain.entities import ArtifactKind, ArtifactState, Point


def test_artifact_kind_follows_mime_type() -> None:
    image = ArtifactState(b"\x89PNG", "IMAGE/PNG")
    video = ArtifactState(b"\x00\x00", "video/mp4")

    assert image.mime_type == "image/png"
    assert image.kind is ArtifactKind.IMAGE
    assert video.is_video
    assert video.extension == "mp4"
    assert ArtifactState(b"x", "video/webm").extension == "mp4"
    assert ArtifactState(b"x", "image/webp").extension == "png"
    assert ArtifactState(b"x", "image/jpeg").extension == "jpg"


def test_data_url_round_trip() -> None:
    art = ArtifactState(b"hello", "image/jpeg")

    url = art.to_data_url()

    assert url == "data:image/jpeg;base64,aGVsbG8="
    assert ArtifactState.from_data_url(url) == art


def test_data_url_rejects_non_base64_payload() -> None:
    with pytest.raises(ValueError):
        ArtifactState.from_data_url("data:image/png,raw")
    with pytest.raises(ValueError):
        ArtifactState.from_data_url("not a url")
    with pytest.raises(ValueError):
        ArtifactState.from_base64("***", "image/png")


def test_artifact_requires_bytes_payload() -> None:
    with pytest.raises(ValueError):
        ArtifactState(b"", "image/png")
    with pytest.raises(TypeError):
        ArtifactState("text", "image/png")


def test_point_arithmetic() -> None:
    assert Point(3, 4) - Point(1, 1) == Point(2, 3)
    assert Point(1, 2) + Point(1, 1) == Point(2, 3)
