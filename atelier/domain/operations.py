from __future__ import annotations

"""Operation descriptors and the instruction text sent to the edit service."""

from dataclasses import dataclass
from typing import Tuple, Union

from .palette import normalize_hex


@dataclass(frozen=True)
class TargetPreset:
    """Garment or scene area a recolor can be aimed at."""

    label: str
    value: str


TARGET_PRESETS: Tuple[TargetPreset, ...] = (
    TargetPreset("VESTIDO", "Dress"),
    TargetPreset("CAMISA", "Shirt"),
    TargetPreset("CALÇA", "Pants"),
    TargetPreset("BOLSA", "Bag"),
    TargetPreset("CABELO", "Hair"),
    TargetPreset("ACESSÓRIO", "Accessory"),
    TargetPreset("PELE", "Skin"),
    TargetPreset("ROSTO", "Face"),
    TargetPreset("FUNDO", "Background"),
)

DEFAULT_TARGET = "Dress"
DEFAULT_VIDEO_PROMPT = "High quality fashion video, 4k cinematic lighting"
REMOVE_BACKGROUND_INSTRUCTION = "Remove background"


@dataclass(frozen=True)
class Recolor:
    target: str
    color_hex: str

    def __post_init__(self) -> None:
        target = str(self.target or "").strip()
        if not target:
            raise ValueError("Recolor requires a target area.")
        object.__setattr__(self, "target", target)
        object.__setattr__(self, "color_hex", normalize_hex(self.color_hex))


@dataclass(frozen=True)
class RemoveBackground:
    pass


@dataclass(frozen=True)
class CustomPrompt:
    text: str

    def __post_init__(self) -> None:
        if not str(self.text or "").strip():
            raise ValueError("Custom prompt must not be empty.")


@dataclass(frozen=True)
class GenerateVideo:
    prompt: str

    def __post_init__(self) -> None:
        if not str(self.prompt or "").strip():
            raise ValueError("Video prompt must not be empty.")


OperationDescriptor = Union[Recolor, RemoveBackground, CustomPrompt, GenerateVideo]


def is_video_operation(descriptor: OperationDescriptor) -> bool:
    return isinstance(descriptor, GenerateVideo)


def build_instruction(descriptor: OperationDescriptor) -> str:
    """Map a descriptor to the instruction text understood by the remote model."""
    if isinstance(descriptor, Recolor):
        return (
            f"Recolor {descriptor.target} to hex {descriptor.color_hex}. "
            "Maintain realistic textures and light. High fashion photography style."
        )
    if isinstance(descriptor, RemoveBackground):
        return REMOVE_BACKGROUND_INSTRUCTION
    if isinstance(descriptor, CustomPrompt):
        return descriptor.text
    if isinstance(descriptor, GenerateVideo):
        return descriptor.prompt
    raise TypeError(f"Unsupported operation descriptor: {descriptor!r}")


def describe(descriptor: OperationDescriptor) -> str:
    """Short label used in logs and status lines."""
    if isinstance(descriptor, Recolor):
        return f"recolor {descriptor.target} {descriptor.color_hex}"
    if isinstance(descriptor, RemoveBackground):
        return "remove background"
    if isinstance(descriptor, CustomPrompt):
        return "custom prompt"
    if isinstance(descriptor, GenerateVideo):
        return "generate video"
    return type(descriptor).__name__


__all__ = [
    "CustomPrompt",
    "DEFAULT_TARGET",
    "DEFAULT_VIDEO_PROMPT",
    "GenerateVideo",
    "OperationDescriptor",
    "Recolor",
    "REMOVE_BACKGROUND_INSTRUCTION",
    "RemoveBackground",
    "TARGET_PRESETS",
    "TargetPreset",
    "build_instruction",
    "describe",
    "is_video_operation",
]
