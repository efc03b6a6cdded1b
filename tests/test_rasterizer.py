"""
Tests for placing the change bar region on a fixed-size canvas.
"""

import pytest
from PIL import Image, ImageDraw

from changebar_annotator.config import BoundingBox, Settings
from changebar_annotator.errors import RasterizeError
from changebar_annotator.pipeline.geometry import resolve_geometry
from changebar_annotator.pipeline.measurer import trimmed_height
from changebar_annotator.pipeline.rasterizer import (
    iter_change_bar_images,
    place_on_canvas,
    rasterize_pages,
)

DPI = 36
PAGE_HEIGHT = 792.0
GEOMETRY = resolve_geometry(BoundingBox(), DPI, PAGE_HEIGHT)


def _page_render():
    # Letter page at 36 dpi; the crop region sits at x 18..31, y 36..359
    return Image.new("RGB", (306, 396), (255, 255, 255))


class TestPlaceOnCanvas:

    def test_canvas_has_exact_crop_size(self):
        canvas = place_on_canvas(_page_render(), PAGE_HEIGHT, GEOMETRY, DPI)
        assert canvas.size == (GEOMETRY.pixel_width, GEOMETRY.pixel_height)
        assert canvas.mode == "L"

    def test_bar_inside_region(self):
        render = _page_render()
        ImageDraw.Draw(render).rectangle([20, 100, 25, 149], fill=(0, 0, 0))
        canvas = place_on_canvas(render, PAGE_HEIGHT, GEOMETRY, DPI)
        assert canvas.getpixel((2, 64)) == 0
        assert canvas.getpixel((2, 63)) == 255
        assert trimmed_height(canvas) == 50

    def test_marks_outside_region_ignored(self):
        render = _page_render()
        draw = ImageDraw.Draw(render)
        draw.rectangle([100, 100, 200, 149], fill=(0, 0, 0))    # body text
        draw.rectangle([20, 370, 25, 380], fill=(0, 0, 0))      # below y2
        canvas = place_on_canvas(render, PAGE_HEIGHT, GEOMETRY, DPI)
        assert trimmed_height(canvas) == 1

    def test_full_height_rule(self):
        render = _page_render()
        ImageDraw.Draw(render).rectangle([22, 0, 22, 395], fill=(0, 0, 0))
        canvas = place_on_canvas(render, PAGE_HEIGHT, GEOMETRY, DPI)
        assert trimmed_height(canvas) == GEOMETRY.pixel_height


class TestRenderPdf:

    def test_blank_pages_render_blank(self, make_pdf):
        pdf_path = make_pdf(pages=2)
        images = list(iter_change_bar_images(pdf_path, GEOMETRY, DPI))
        assert [page for page, _ in images] == [1, 2]
        for _, image in images:
            assert image.size == (14, 324)
            assert trimmed_height(image) == 1

    def test_unreadable_pdf(self, tmp_path):
        bogus = tmp_path / "bogus.pdf"
        bogus.write_bytes(b"not a pdf")
        state = {"pdf_path": str(bogus), "geometry": GEOMETRY, "settings": Settings()}
        with pytest.raises(RasterizeError):
            rasterize_pages(state)
