from __future__ import annotations

import io
from datetime import date

from PIL import Image

from atelier.adapters.page_renderer import PdfPrintAdapter, PillowPageRenderer
from atelier.domain.entities import ArtifactState
from atelier.domain.page import (
    ITEM_DETAILS,
    ITEM_GENERATED,
    ITEM_ORIGINAL,
    CanvasItem,
    DetailsBlock,
    PageBand,
    PageComposition,
    PlacedItem,
)


def _png(color, size=(40, 40)) -> ArtifactState:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return ArtifactState(buf.getvalue(), "image/png")


def _composition(*items: PlacedItem) -> PageComposition:
    return PageComposition(
        items=tuple(items),
        details=DetailsBlock(target="Dress", color_hex="#ff0000"),
        header=PageBand("Atelier Studio", "Tech Pack", date(2025, 3, 1), 42),
        footer=PageBand("footer"),
    )


def test_render_has_page_size_and_places_image_at_offset() -> None:
    composition = _composition(
        PlacedItem(CanvasItem(ITEM_ORIGINAL, 200, 300), _png((0, 0, 255)), "Reference"),
    )

    page = PillowPageRenderer().render(composition)

    assert page.size == (composition.width, composition.height)
    # padding 8 plus caption 16 puts the image at (208, 324)
    assert page.getpixel((220, 340)) == (0, 0, 255)
    assert page.getpixel((100, 600)) == (255, 255, 255)


def test_scaled_item_covers_larger_area() -> None:
    small = PillowPageRenderer().render(
        _composition(PlacedItem(CanvasItem(ITEM_GENERATED, 100, 200, scale=1.0), _png((0, 128, 0)), "x"))
    )
    large = PillowPageRenderer().render(
        _composition(PlacedItem(CanvasItem(ITEM_GENERATED, 100, 200, scale=2.0), _png((0, 128, 0)), "x"))
    )

    # centre of the doubled image lies outside the unscaled card
    probe = (100 + 56, 200 + 88)
    assert small.getpixel(probe) == (255, 255, 255)
    r, g, b = large.getpixel(probe)
    assert r < 10 and abs(g - 128) < 10 and b < 10


def test_video_artifacts_and_missing_images_are_skipped() -> None:
    composition = _composition(
        PlacedItem(CanvasItem(ITEM_GENERATED, 100, 200), ArtifactState(b"mp4", "video/mp4")),
        PlacedItem(CanvasItem(ITEM_ORIGINAL, 400, 200), None),
    )

    page = PillowPageRenderer().render(composition)

    assert page.getpixel((130, 240)) == (255, 255, 255)
    assert page.getpixel((430, 240)) == (255, 255, 255)


def test_details_card_is_drawn_at_its_position() -> None:
    composition = _composition(PlacedItem(CanvasItem(ITEM_DETAILS, 50, 500)))

    page = PillowPageRenderer().render(composition)

    # outer border of the details card
    assert page.getpixel((50, 600)) == (0, 0, 0)


def test_render_png_produces_png_bytes() -> None:
    data = PillowPageRenderer().render_png(_composition())

    assert data.startswith(b"\x89PNG")


def test_pdf_print_adapter_writes_pdf(tmp_path) -> None:
    adapter = PdfPrintAdapter(str(tmp_path / "out"))

    path = adapter.print_page(_composition(), "atelier_techpack_1.pdf")

    assert path == str(tmp_path / "out" / "atelier_techpack_1.pdf")
    assert (tmp_path / "out" / "atelier_techpack_1.pdf").read_bytes().startswith(b"%PDF")
