
"""Domain package exports for value objects and aggregates."""

from .entities import ArtifactKind, ArtifactState, Point
from .history import HistoryStore
from .naming import make_export_filename
from .operations import (
    CustomPrompt,
    GenerateVideo,
    OperationDescriptor,
    Recolor,
    RemoveBackground,
    build_instruction,
)
from .palette import Palette, normalize_hex
from .processing import Failed, Idle, ProcessingStatus, Requesting

__all__ = [
    "ArtifactKind",
    "ArtifactState",
    "CustomPrompt",
    "Failed",
    "GenerateVideo",
    "HistoryStore",
    "Idle",
    "OperationDescriptor",
    "Palette",
    "Point",
    "ProcessingStatus",
    "Recolor",
    "RemoveBackground",
    "Requesting",
    "build_instruction",
    "make_export_filename",
    "normalize_hex",
]
