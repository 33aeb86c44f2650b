from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, Dict, Optional, Tuple

from ..domain.entities import ArtifactState, Point
from ..domain.page import (
    DEFAULT_ITEMS,
    ITEM_CAPTIONS,
    ITEM_DETAILS,
    ITEM_GENERATED,
    ITEM_ORIGINAL,
    CanvasItem,
    DetailsBlock,
    PageBand,
    PageComposition,
    PlacedItem,
    clamp_item_scale,
)

SCALE_STEP = 0.1
DEFAULT_TITLE = "Atelier Studio"
DEFAULT_SUBTITLE = "Design Specification & Tech Pack"
DEFAULT_FOOTER = "ATELIER STUDIO AI - Generated Layout"


def _default_items() -> Dict[str, CanvasItem]:
    return {item.id: item for item in DEFAULT_ITEMS}


def _draw_reference() -> int:
    return random.randint(0, 9999)


@dataclass
class CanvasVM:
    """Free-form layout of the tech-pack page. Pure UI-logic.

    Responsibilities
    - Track position/scale of the reference image, the result image and the
      details card; positions are page pixels and are never constrained.
    - One item is dragged at a time; pointer up and pointer leave both
      release it. The last grabbed item stays selected for the resize toolbar.
    - Assemble a ``PageComposition`` and hand it to ``on_print``; rendering
      and output formats belong to the print adapter.
    """

    on_print: Optional[Callable[[PageComposition], None]] = None
    on_changed: Optional[Callable[[], None]] = None
    reference: int = field(default_factory=_draw_reference)
    today: date = field(default_factory=date.today)
    title: str = DEFAULT_TITLE
    subtitle: str = DEFAULT_SUBTITLE
    footer: str = DEFAULT_FOOTER

    _items: Dict[str, CanvasItem] = field(default_factory=_default_items)
    _active_id: Optional[str] = None
    _selected_id: Optional[str] = None
    _anchor: Optional[Point] = None

    # ---- Read model ----
    @property
    def items(self) -> Tuple[CanvasItem, ...]:
        return tuple(self._items.values())

    def item(self, item_id: str) -> CanvasItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise ValueError(f"Unknown canvas item '{item_id}'") from None

    @property
    def active_id(self) -> Optional[str]:
        return self._active_id

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def can_resize_selection(self) -> bool:
        return self._selected_id is not None and self._items[self._selected_id].is_image

    # ---- Drag API (called by View) ----
    def begin_drag(self, item_id: str, pos: Point) -> None:
        item = self.item(item_id)
        self._active_id = item_id
        self._selected_id = item_id
        self._anchor = pos - Point(item.x, item.y)
        self._notify()

    def on_pointer_move(self, pos: Point) -> bool:
        if self._active_id is None or self._anchor is None:
            return False
        target = pos - self._anchor
        self._items[self._active_id] = replace(self._items[self._active_id], x=target.x, y=target.y)
        self._notify()
        return True

    def end_drag(self) -> None:
        self._active_id = None
        self._anchor = None

    def on_pointer_leave(self) -> None:
        self.end_drag()

    # ---- Scale ----
    def adjust_scale(self, item_id: str, delta: float) -> float:
        item = self.item(item_id)
        if not item.is_image:
            raise ValueError(f"Canvas item '{item_id}' cannot be scaled.")
        scale = clamp_item_scale(item.scale + delta)
        self._items[item_id] = replace(item, scale=scale)
        self._notify()
        return scale

    def adjust_active_scale(self, delta: float) -> Optional[float]:
        if not self.can_resize_selection:
            return None
        return self.adjust_scale(self._selected_id, delta)

    def cmd_grow(self) -> Optional[float]:
        return self.adjust_active_scale(SCALE_STEP)

    def cmd_shrink(self) -> Optional[float]:
        return self.adjust_active_scale(-SCALE_STEP)

    def reset_layout(self) -> None:
        self._items = _default_items()
        self._active_id = None
        self._selected_id = None
        self._anchor = None
        self._notify()

    # ---- Composition ----
    def compose(
        self,
        origin: Optional[ArtifactState],
        current: Optional[ArtifactState],
        target: str = "",
        color_hex: str = "",
    ) -> PageComposition:
        artifacts = {ITEM_ORIGINAL: origin, ITEM_GENERATED: current}
        placed = []
        for item in self._items.values():
            if item.id == ITEM_DETAILS:
                placed.append(PlacedItem(item=item))
                continue
            artifact = artifacts.get(item.id)
            if artifact is None or artifact.is_video:
                continue
            placed.append(PlacedItem(item=item, artifact=artifact, caption=ITEM_CAPTIONS.get(item.id, "")))
        return PageComposition(
            items=tuple(placed),
            details=DetailsBlock(target=target, color_hex=color_hex),
            header=PageBand(self.title, self.subtitle, self.today, self.reference),
            footer=PageBand(self.footer),
            active_id=self._active_id,
        )

    def cmd_print(
        self,
        origin: Optional[ArtifactState],
        current: Optional[ArtifactState],
        target: str = "",
        color_hex: str = "",
    ) -> PageComposition:
        composition = self.compose(origin, current, target, color_hex)
        if self.on_print:
            self.on_print(composition)
        return composition

    # ------------------------------------------------------------------
    def _notify(self) -> None:
        if self.on_changed:
            self.on_changed()


__all__ = ["CanvasVM", "SCALE_STEP"]
