from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..domain.operations import (
    DEFAULT_TARGET,
    DEFAULT_VIDEO_PROMPT,
    CustomPrompt,
    GenerateVideo,
    OperationDescriptor,
    Recolor,
    RemoveBackground,
)
from ..domain.processing import IDLE, Failed, Idle, ProcessingStatus, Requesting


class ToolMode(str, Enum):
    RECOLOR = "recolor"
    REMOVE_BG = "remove_bg"
    CUSTOM = "custom"
    VIDEO = "video"


@dataclass
class StudioVM:
    """Editor panel state: tool mode, target area and prompts. Pure UI-logic.

    The VM turns the form state into an operation descriptor and projects the
    orchestrator's ``ProcessingStatus`` into what the view renders (spinner,
    status line, error panel). Running the operation is delegated through
    ``on_apply_requested``.
    """

    on_apply_requested: Optional[Callable[[OperationDescriptor], None]] = None
    on_retry_requested: Optional[Callable[[], None]] = None
    on_dismiss_requested: Optional[Callable[[], None]] = None

    mode: ToolMode = ToolMode.RECOLOR
    target: str = DEFAULT_TARGET
    custom_prompt: str = ""
    video_prompt: str = DEFAULT_VIDEO_PROMPT
    status: ProcessingStatus = IDLE
    last_succeeded: bool = False

    # ---- Form state ----
    def set_mode(self, mode: ToolMode | str) -> None:
        self.mode = ToolMode(mode)

    def set_target(self, target: str) -> None:
        self.target = (target or "").strip() or DEFAULT_TARGET

    def set_custom_prompt(self, text: str) -> None:
        self.custom_prompt = text or ""

    def set_video_prompt(self, text: str) -> None:
        self.video_prompt = text or ""

    def build_descriptor(self, color_hex: str) -> OperationDescriptor:
        """Raises ``ValueError`` when the form is incomplete for the current mode."""
        if self.mode is ToolMode.RECOLOR:
            return Recolor(self.target, color_hex)
        if self.mode is ToolMode.REMOVE_BG:
            return RemoveBackground()
        if self.mode is ToolMode.CUSTOM:
            return CustomPrompt(self.custom_prompt.strip())
        return GenerateVideo(self.video_prompt.strip() or DEFAULT_VIDEO_PROMPT)

    # ---- Status projection ----
    def set_status(self, status: ProcessingStatus) -> None:
        self.last_succeeded = isinstance(self.status, Requesting) and isinstance(status, Idle)
        self.status = status

    @property
    def is_loading(self) -> bool:
        return isinstance(self.status, Requesting)

    @property
    def error_message(self) -> Optional[str]:
        if isinstance(self.status, Failed):
            return self.status.message
        return None

    @property
    def status_message(self) -> str:
        if isinstance(self.status, Requesting):
            if isinstance(self.status.descriptor, GenerateVideo):
                return "Generating video..."
            return "Rendering edit..."
        if self.last_succeeded:
            return "Done"
        return ""

    def can_apply(self, has_source: bool) -> bool:
        if self.is_loading:
            return False
        return has_source or self.mode is ToolMode.VIDEO

    # ---- Commands surfaced to View ----
    def cmd_apply(self, color_hex: str) -> OperationDescriptor:
        descriptor = self.build_descriptor(color_hex)
        if self.on_apply_requested:
            self.on_apply_requested(descriptor)
        return descriptor

    def cmd_retry(self) -> None:
        if self.on_retry_requested:
            self.on_retry_requested()

    def cmd_dismiss(self) -> None:
        if self.on_dismiss_requested:
            self.on_dismiss_requested()


__all__ = ["StudioVM", "ToolMode"]
