from __future__ import annotations
from typing import Any, Optional, Protocol

from .entities import ArtifactState
from .page import PageComposition


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


# ---- Ports (Hexagonal boundaries) ----
class TransformPort(Protocol):
    """Remote image edit service: one source image plus an instruction."""

    def transform_image(self, source: ArtifactState, instruction: str) -> ArtifactState: ...


class VideoPort(Protocol):
    """Remote video generation from a prompt and an optional still."""

    def generate_video(
        self, prompt: str, source: Optional[ArtifactState] = None
    ) -> ArtifactState: ...


class PreferencePort(Protocol):
    """Named JSON-serializable values (palette, settings, credentials)."""

    def get(self, name: str, default: Any = None) -> Any: ...
    def set(self, name: str, value: Any) -> None: ...


class ExportPort(Protocol):
    """Hands a finished artifact to the user (download folder, browser download)."""

    def deliver(self, filename: str, artifact: ArtifactState) -> str: ...  # returns location


class PrintPort(Protocol):
    """Platform print/export facility for an assembled tech-pack page."""

    def print_page(self, composition: PageComposition, filename: str) -> str: ...


class ColorSamplerPort(Protocol):
    """Optional platform color-sampling tool (e.g. the browser EyeDropper)."""

    async def is_available(self) -> bool: ...
    async def pick(self) -> Optional[str]: ...  # None when the user cancels
