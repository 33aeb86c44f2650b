from __future__ import annotations

"""Tech-pack page model: canvas items and the assembled page composition."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

from .entities import ArtifactState

# A4 portrait at 96 dpi (210mm x 297mm).
PAGE_WIDTH_PX = 794
PAGE_HEIGHT_PX = 1123
HEADER_HEIGHT_PX = 96
FOOTER_HEIGHT_PX = 48

# Rendered width of an image card before the item scale is applied.
IMAGE_MAX_WIDTH_PX = 300
DETAILS_WIDTH_PX = 320

MIN_ITEM_SCALE = 0.2
MAX_ITEM_SCALE = 3.0

ITEM_ORIGINAL = "original"
ITEM_GENERATED = "generated"
ITEM_DETAILS = "details"
IMAGE_ITEMS = frozenset({ITEM_ORIGINAL, ITEM_GENERATED})


def clamp_item_scale(value: float) -> float:
    return max(MIN_ITEM_SCALE, min(MAX_ITEM_SCALE, float(value)))


@dataclass(frozen=True)
class CanvasItem:
    """Position and scale of one draggable element on the page."""

    id: str
    x: float
    y: float
    scale: float = 1.0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("CanvasItem requires an id.")
        object.__setattr__(self, "scale", clamp_item_scale(self.scale))

    @property
    def is_image(self) -> bool:
        return self.id in IMAGE_ITEMS


DEFAULT_ITEMS: Tuple[CanvasItem, ...] = (
    CanvasItem(ITEM_ORIGINAL, 50.0, 120.0),
    CanvasItem(ITEM_GENERATED, 400.0, 120.0),
    CanvasItem(ITEM_DETAILS, 50.0, 500.0),
)

ITEM_CAPTIONS = {
    ITEM_ORIGINAL: "Reference",
    ITEM_GENERATED: "AI Sketch / Render",
}


@dataclass(frozen=True)
class DetailsBlock:
    """Specification details printed in the draggable details card."""

    target: str
    color_hex: str
    title: str = "Specification Details"
    notes_placeholder: str = "Add manufacturing notes here..."


@dataclass(frozen=True)
class PageBand:
    """Fixed, non-draggable header or footer band."""

    title: str
    subtitle: str = ""
    date: Optional[date] = None
    reference: Optional[int] = None


@dataclass(frozen=True)
class PlacedItem:
    """A canvas item resolved against its content for rendering."""

    item: CanvasItem
    artifact: Optional[ArtifactState] = None
    caption: str = ""


@dataclass(frozen=True)
class PageComposition:
    """Everything a print/export facility needs to render the page."""

    items: Tuple[PlacedItem, ...]
    details: Optional[DetailsBlock]
    header: PageBand
    footer: PageBand
    width: int = PAGE_WIDTH_PX
    height: int = PAGE_HEIGHT_PX
    header_height: int = HEADER_HEIGHT_PX
    footer_height: int = FOOTER_HEIGHT_PX
    active_id: Optional[str] = field(default=None, compare=False)

    def find(self, item_id: str) -> Optional[PlacedItem]:
        for placed in self.items:
            if placed.item.id == item_id:
                return placed
        return None


__all__ = [
    "CanvasItem",
    "DEFAULT_ITEMS",
    "DETAILS_WIDTH_PX",
    "DetailsBlock",
    "FOOTER_HEIGHT_PX",
    "HEADER_HEIGHT_PX",
    "IMAGE_ITEMS",
    "IMAGE_MAX_WIDTH_PX",
    "ITEM_CAPTIONS",
    "ITEM_DETAILS",
    "ITEM_GENERATED",
    "ITEM_ORIGINAL",
    "MAX_ITEM_SCALE",
    "MIN_ITEM_SCALE",
    "PAGE_HEIGHT_PX",
    "PAGE_WIDTH_PX",
    "PageBand",
    "PageComposition",
    "PlacedItem",
    "clamp_item_scale",
]
