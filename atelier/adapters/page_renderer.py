"""Pillow rendering of tech-pack pages and the PDF print adapter.

The canvas view-model only assembles positions; this module turns a
``PageComposition`` into pixels. Items are pasted at their ``(x, y)`` offset
and scaled around their own top-left corner; anything outside the page is
clipped by the paste. The header and footer bands are drawn first so items
dragged over them stay visible, matching the on-screen stacking.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from atelier.domain.page import (
    DETAILS_WIDTH_PX,
    IMAGE_MAX_WIDTH_PX,
    ITEM_DETAILS,
    ITEM_ORIGINAL,
    DetailsBlock,
    PageComposition,
    PlacedItem,
)
from atelier.domain.palette import hex_to_rgb, is_valid_hex
from atelier.domain.ports import PrintPort

LOGGER = logging.getLogger(__name__)

_BLACK = (0, 0, 0)
_MUTED = (107, 114, 128)
_FAINT = (156, 163, 175)
_BORDER = (229, 231, 235)
_CARD_PADDING = 8
_CAPTION_HEIGHT = 16
_DETAILS_HEIGHT = 230


class PillowPageRenderer:
    """Render a ``PageComposition`` into an RGB Pillow image."""

    def __init__(self, font: Optional[ImageFont.ImageFont] = None) -> None:
        self.font = font or ImageFont.load_default()

    def render(self, composition: PageComposition) -> Image.Image:
        page = Image.new("RGB", (composition.width, composition.height), "white")
        draw = ImageDraw.Draw(page)
        self._draw_header(draw, composition)
        self._draw_footer(draw, composition)
        for placed in composition.items:
            if placed.item.id == ITEM_DETAILS:
                if composition.details is None:
                    continue
                card = self._details_card(composition.details)
            else:
                card = self._image_card(placed)
                if card is None:
                    continue
                card = self._scaled(card, placed.item.scale)
            offset = (int(round(placed.item.x)), int(round(placed.item.y)))
            page.paste(card, offset, card if card.mode == "RGBA" else None)
        return page

    def render_png(self, composition: PageComposition) -> bytes:
        buf = io.BytesIO()
        self.render(composition).save(buf, format="PNG")
        return buf.getvalue()

    # ------------------------------------------------------------------
    def _draw_header(self, draw: ImageDraw.ImageDraw, composition: PageComposition) -> None:
        band = composition.header
        height = composition.header_height
        draw.line([(0, height - 1), (composition.width, height - 1)], fill=_BLACK, width=2)
        draw.text((24, 28), band.title.upper(), fill=_BLACK, font=self.font)
        if band.subtitle:
            draw.text((24, 52), band.subtitle, fill=_MUTED, font=self.font)
        right = composition.width - 24
        if band.date is not None:
            self._text_right(draw, right, 32, f"DATE: {band.date.strftime('%d/%m/%Y')}", _FAINT)
        if band.reference is not None:
            self._text_right(draw, right, 52, f"REF: {band.reference}", _FAINT)

    def _draw_footer(self, draw: ImageDraw.ImageDraw, composition: PageComposition) -> None:
        top = composition.height - composition.footer_height
        draw.line([(0, top), (composition.width, top)], fill=(209, 213, 219), width=1)
        text = composition.footer.title
        width = draw.textlength(text, font=self.font)
        draw.text(((composition.width - width) / 2, top + 18), text, fill=_FAINT, font=self.font)

    def _text_right(self, draw: ImageDraw.ImageDraw, right: int, y: int, text: str, fill) -> None:
        width = draw.textlength(text, font=self.font)
        draw.text((right - width, y), text, fill=fill, font=self.font)

    def _image_card(self, placed: PlacedItem) -> Optional[Image.Image]:
        artifact = placed.artifact
        if artifact is None or artifact.is_video:
            return None
        with Image.open(io.BytesIO(artifact.payload)) as opened:
            image = opened.convert("RGBA")
        if image.width > IMAGE_MAX_WIDTH_PX:
            ratio = IMAGE_MAX_WIDTH_PX / image.width
            image = image.resize(
                (IMAGE_MAX_WIDTH_PX, max(1, int(round(image.height * ratio)))),
                Image.Resampling.LANCZOS,
            )
        background = (243, 244, 246) if placed.item.id == ITEM_ORIGINAL else (255, 255, 255)
        width = image.width + 2 * _CARD_PADDING
        height = image.height + 2 * _CARD_PADDING + _CAPTION_HEIGHT
        card = Image.new("RGB", (width, height), background)
        draw = ImageDraw.Draw(card)
        draw.rectangle([0, 0, width - 1, height - 1], outline=_BORDER)
        caption = placed.caption.upper()
        caption_width = draw.textlength(caption, font=self.font)
        draw.text(((width - caption_width) / 2, _CARD_PADDING), caption, fill=_FAINT, font=self.font)
        card.paste(image, (_CARD_PADDING, _CARD_PADDING + _CAPTION_HEIGHT), image)
        return card

    def _details_card(self, details: DetailsBlock) -> Image.Image:
        card = Image.new("RGB", (DETAILS_WIDTH_PX, _DETAILS_HEIGHT), "white")
        draw = ImageDraw.Draw(card)
        draw.rectangle([0, 0, DETAILS_WIDTH_PX - 1, _DETAILS_HEIGHT - 1], outline=_BLACK, width=2)
        draw.text((16, 14), details.title.upper(), fill=_BLACK, font=self.font)
        draw.line([(16, 34), (DETAILS_WIDTH_PX - 16, 34)], fill=_BLACK, width=1)

        draw.text((16, 46), "TARGET OBJECT", fill=_MUTED, font=self.font)
        draw.text((16, 62), details.target or "N/A", fill=_BLACK, font=self.font)

        column = DETAILS_WIDTH_PX // 2 + 8
        draw.text((column, 46), "COLOR CODE", fill=_MUTED, font=self.font)
        swatch = hex_to_rgb(details.color_hex) if is_valid_hex(details.color_hex) else (255, 255, 255)
        draw.rectangle([column, 62, column + 14, 76], fill=swatch, outline=(209, 213, 219))
        draw.text((column + 22, 62), details.color_hex, fill=_BLACK, font=self.font)

        draw.text((16, 96), "NOTES", fill=_MUTED, font=self.font)
        draw.rectangle([16, 112, DETAILS_WIDTH_PX - 16, _DETAILS_HEIGHT - 16], fill=(249, 250, 251), outline=(209, 213, 219))
        draw.text((24, 120), details.notes_placeholder, fill=_FAINT, font=self.font)
        return card

    @staticmethod
    def _scaled(card: Image.Image, scale: float) -> Image.Image:
        if abs(scale - 1.0) < 1e-9:
            return card
        size = (max(1, int(round(card.width * scale))), max(1, int(round(card.height * scale))))
        return card.resize(size, Image.Resampling.LANCZOS)


class PdfPrintAdapter(PrintPort):
    """Print facility that renders the page to a one-page PDF in the export folder."""

    def __init__(self, root_dir: str = ".", renderer: Optional[PillowPageRenderer] = None) -> None:
        self.root = Path(root_dir).expanduser()
        self.renderer = renderer or PillowPageRenderer()

    def print_page(self, composition: PageComposition, filename: str) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        target = self.root / Path(filename).name
        page = self.renderer.render(composition)
        page.save(target, format="PDF", resolution=96.0)
        LOGGER.info("Tech pack written to %s", target)
        return str(target)


__all__ = ["PdfPrintAdapter", "PillowPageRenderer"]
