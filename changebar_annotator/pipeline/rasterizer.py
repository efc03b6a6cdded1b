"""
Render the change bar region of every page to a grayscale image.

pdfplumber renders the whole page; the crop is done by pasting that render
onto a white canvas of exactly pixel_width x pixel_height, shifted by the
translation offsets. Parts of the region outside the page stay white.
"""

import logging
from collections.abc import Iterator

import pdfplumber
from PIL import Image

from changebar_annotator.errors import RasterizeError
from changebar_annotator.pipeline.geometry import POINTS_PER_INCH
from changebar_annotator.state import CropGeometry

logger = logging.getLogger(__name__)

_WHITE = 255


def _crop_origin(page_height: float, geometry: CropGeometry, dpi: int) -> tuple[int, int]:
    """Top-left corner of the crop region, in pixels of the full-page render."""
    scale = dpi / POINTS_PER_INCH
    left = -geometry.offset_left * scale
    top = (page_height + geometry.offset_bottom) * scale - geometry.pixel_height
    return round(left), round(top)


def place_on_canvas(rendered: Image.Image, page_height: float,
                    geometry: CropGeometry, dpi: int) -> Image.Image:
    """Cut the crop region out of a full-page render, padding with white."""
    canvas = Image.new("L", (geometry.pixel_width, geometry.pixel_height), _WHITE)
    left, top = _crop_origin(page_height, geometry, dpi)
    canvas.paste(rendered.convert("L"), (-left, -top))
    return canvas


def iter_change_bar_images(pdf_path: str, geometry: CropGeometry,
                           dpi: int) -> Iterator[tuple[int, Image.Image]]:
    """Yield (page, image) for every page, page 1-indexed."""
    with pdfplumber.open(pdf_path) as pdf:
        for page_num, page in enumerate(pdf.pages, start=1):
            rendered = page.to_image(resolution=dpi).original
            yield page_num, place_on_canvas(rendered, float(page.height), geometry, dpi)


def rasterize_pages(state: dict) -> dict:
    pdf_path = state["pdf_path"]
    geometry = state["geometry"]
    dpi = state["settings"].dpi

    logger.info("Rendering change bar region of %s at %d dpi", pdf_path, dpi)
    try:
        images = list(iter_change_bar_images(pdf_path, geometry, dpi))
    except Exception as exc:
        raise RasterizeError(f"Rendering failed for {pdf_path}: {exc}") from exc

    logger.info("Rendered %d pages (%dx%d px each)",
                len(images), geometry.pixel_width, geometry.pixel_height)
    return {"images": images}
