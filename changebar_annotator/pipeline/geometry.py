"""
pipeline/geometry.py — change bar crop region in raster and PDF units.

The pixel size is what the rasterizer must produce exactly: the classifier
compares trimmed heights against pixel_height, so floor/ceil matter.
"""

import logging
import math

from changebar_annotator.config import BoundingBox
from changebar_annotator.state import CropGeometry

logger = logging.getLogger(__name__)

POINTS_PER_INCH = 72


def resolve_geometry(bbox: BoundingBox, dpi: int, page_height_pts: float) -> CropGeometry:
    """Crop size in pixels at `dpi`, plus the translation (points) that moves it to the origin."""
    pixel_width = math.ceil((bbox.x2 - bbox.x1) * dpi)
    pixel_height = math.ceil((bbox.y2 - bbox.y1) * dpi)

    # Translation is applied in bottom-up PDF space: shift so y2 (from top) lands at y=0.
    offset_left = -math.floor(bbox.x1 * POINTS_PER_INCH)
    offset_bottom = -math.floor(((page_height_pts / POINTS_PER_INCH) - bbox.y2) * POINTS_PER_INCH)

    return CropGeometry(
        pixel_width=pixel_width,
        pixel_height=pixel_height,
        offset_left=offset_left,
        offset_bottom=offset_bottom,
    )


def compute_geometry(state: dict) -> dict:
    settings = state["settings"]
    geometry = resolve_geometry(settings.bbox, settings.dpi, state["page_height"])
    logger.debug(
        "Crop region %dx%d px at %d dpi, translate (%d, %d) pts",
        geometry.pixel_width, geometry.pixel_height, settings.dpi,
        geometry.offset_left, geometry.offset_bottom,
    )
    return {"geometry": geometry}
