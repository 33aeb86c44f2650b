from __future__ import annotations

"""Domain value objects shared across adapters, use-cases, and view models."""

import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum

_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^;,]*)*),(?P<data>.*)$", re.S)

_IMAGE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
}


class ArtifactKind(str, Enum):
    """Media family of an artifact."""

    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class ArtifactState:
    """Immutable media payload representing one point in the edit history."""

    payload: bytes
    """Encoded media bytes (PNG/JPEG/... for images, MP4 for videos)."""
    mime_type: str = "image/png"
    """MIME type of ``payload``; the artifact kind is derived from it."""

    def __post_init__(self) -> None:
        if not isinstance(self.payload, (bytes, bytearray)):
            raise TypeError("ArtifactState payload must be bytes.")
        if not self.payload:
            raise ValueError("ArtifactState payload must not be empty.")
        if not isinstance(self.mime_type, str) or "/" not in self.mime_type:
            raise ValueError(f"Invalid MIME type: {self.mime_type!r}")
        if isinstance(self.payload, bytearray):
            object.__setattr__(self, "payload", bytes(self.payload))
        object.__setattr__(self, "mime_type", self.mime_type.strip().lower())

    @property
    def kind(self) -> ArtifactKind:
        if self.mime_type.startswith("video/"):
            return ArtifactKind.VIDEO
        return ArtifactKind.IMAGE

    @property
    def is_video(self) -> bool:
        return self.kind is ArtifactKind.VIDEO

    @property
    def extension(self) -> str:
        """File extension used for downloads (``mp4`` for video, ``png``/``jpg`` for images)."""
        if self.is_video:
            return "mp4"
        return _IMAGE_EXTENSIONS.get(self.mime_type, "png")

    def to_base64(self) -> str:
        return base64.b64encode(self.payload).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"

    @classmethod
    def from_base64(cls, data: str, mime_type: str) -> "ArtifactState":
        try:
            raw = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("Artifact data is not valid base64.") from exc
        return cls(payload=raw, mime_type=mime_type)

    @classmethod
    def from_data_url(cls, url: str) -> "ArtifactState":
        """Decode a ``data:<mime>;base64,<data>`` URL as produced by browser file readers."""
        match = _DATA_URL_PATTERN.match((url or "").strip())
        if not match:
            raise ValueError("Not a data URL.")
        params = match.group("params") or ""
        if ";base64" not in params:
            raise ValueError("Only base64 data URLs are supported.")
        mime = match.group("mime") or "application/octet-stream"
        return cls.from_base64(match.group("data"), mime)

    def __repr__(self) -> str:
        return f"ArtifactState(mime_type={self.mime_type!r}, size={len(self.payload)})"


@dataclass(frozen=True)
class Point:
    """Surface-relative coordinate pair in CSS pixels."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    @classmethod
    def of(cls, x: float, y: float) -> "Point":
        return cls(float(x), float(y))


ORIGIN_POINT = Point(0.0, 0.0)


__all__ = ["ArtifactKind", "ArtifactState", "Point", "ORIGIN_POINT"]
