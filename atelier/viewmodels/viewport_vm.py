from __future__ import annotations

"""Pan/zoom state of the main artifact viewer plus hold-to-compare."""

from dataclasses import dataclass
from typing import Callable, Optional

from ..domain.entities import ORIGIN_POINT, ArtifactState, Point

ZOOM_SENSITIVITY = 0.0015
MIN_SCALE = 0.5
MAX_SCALE = 8.0
PRIMARY_BUTTON = 0


def clamp_scale(value: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, float(value)))


@dataclass(frozen=True)
class ViewportTransform:
    scale: float = 1.0
    translate: Point = ORIGIN_POINT


IDENTITY = ViewportTransform()


@dataclass(frozen=True)
class DragState:
    """Pointer drag lifecycle: idle (``anchor is None``) or dragging from ``anchor``."""

    anchor: Optional[Point] = None

    @property
    def dragging(self) -> bool:
        return self.anchor is not None


NOT_DRAGGING = DragState()


@dataclass
class ViewportVM:
    """Holds the viewer transform. Pure UI-logic, the view only forwards events.

    Release paths (pointer up and pointer leave) both end a drag so the view
    can never get stuck panning after the pointer left the stage.
    """

    on_changed: Optional[Callable[[ViewportTransform], None]] = None

    _transform: ViewportTransform = IDENTITY
    _drag: DragState = NOT_DRAGGING
    _comparing: bool = False

    # ---- Read model ----
    @property
    def transform(self) -> ViewportTransform:
        return self._transform

    @property
    def scale(self) -> float:
        return self._transform.scale

    @property
    def translate(self) -> Point:
        return self._transform.translate

    @property
    def drag(self) -> DragState:
        return self._drag

    @property
    def comparing(self) -> bool:
        return self._comparing

    def css_transform(self) -> str:
        t = self._transform
        return f"translate({t.translate.x:g}px, {t.translate.y:g}px) scale({t.scale:g})"

    # ---- Zoom ----
    def on_wheel(self, delta_y: float) -> float:
        scale = clamp_scale(self._transform.scale - float(delta_y) * ZOOM_SENSITIVITY)
        self._update(ViewportTransform(scale, self._transform.translate))
        return scale

    # ---- Pan ----
    def on_drag_start(self, pos: Point, button: int = PRIMARY_BUTTON) -> bool:
        if button != PRIMARY_BUTTON:
            return False
        self._drag = DragState(anchor=pos - self._transform.translate)
        return True

    def on_drag_move(self, pos: Point) -> bool:
        if not self._drag.dragging:
            return False
        self._update(ViewportTransform(self._transform.scale, pos - self._drag.anchor))
        return True

    def on_drag_end(self) -> None:
        self._drag = NOT_DRAGGING

    def on_drag_cancel(self) -> None:
        """Pointer left the stage."""
        self._drag = NOT_DRAGGING

    def reset(self) -> None:
        self._drag = NOT_DRAGGING
        self._update(IDENTITY)

    # ---- Hold to compare ----
    def press_compare(self) -> None:
        self._comparing = True

    def release_compare(self) -> None:
        self._comparing = False

    def displayed(
        self, current: Optional[ArtifactState], origin: Optional[ArtifactState]
    ) -> Optional[ArtifactState]:
        if self._comparing and origin is not None:
            return origin
        return current

    # ------------------------------------------------------------------
    def _update(self, transform: ViewportTransform) -> None:
        self._transform = transform
        if self.on_changed:
            self.on_changed(transform)


__all__ = [
    "DragState",
    "MAX_SCALE",
    "MIN_SCALE",
    "ViewportTransform",
    "ViewportVM",
    "ZOOM_SENSITIVITY",
    "clamp_scale",
]
