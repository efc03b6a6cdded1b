"""
Marginal-height measurement.

Each change bar image is trimmed to its content bounding box and the trimmed
height is recorded. A blank region collapses to height 1, the same result
ImageMagick's `-trim` reports, so precomputed `-format '%s %h\\n' info:`
output can be fed in instead of rendering.
"""

import logging
import re
from collections.abc import Iterable

from PIL import Image, ImageChops

from changebar_annotator.errors import MeasurementError
from changebar_annotator.state import PageMeasurement

logger = logging.getLogger(__name__)

DEGENERATE_HEIGHT = 1

_LINE_RE = re.compile(r"^\s*(\d+)\s+(\d+)\s*$")
# Harmless ImageMagick warning printed for blank images.
_IGNORED_LINE_RE = re.compile(r"geometry does not contain image")


def trimmed_height(image: Image.Image) -> int:
    """Height of the image after trimming borders that match the top-left pixel."""
    background = Image.new(image.mode, image.size, image.getpixel((0, 0)))
    bbox = ImageChops.difference(image, background).getbbox()
    if bbox is None:
        return DEGENERATE_HEIGHT
    return bbox[3] - bbox[1]


def scene_to_page(scene: int) -> int:
    """ImageMagick scene numbers start at 0, PDF pages at 1."""
    return scene + 1


def parse_measurements(lines: Iterable[str]) -> list[PageMeasurement]:
    """Parse "<scene> <height>" lines. Anything unrecognised is fatal."""
    measurements: list[PageMeasurement] = []
    for lineno, line in enumerate(lines, start=1):
        if not line.strip() or _IGNORED_LINE_RE.search(line):
            continue
        m = _LINE_RE.match(line)
        if not m:
            raise MeasurementError(f"Line {lineno}: expected '<scene> <height>', got {line.strip()!r}")
        measurements.append(PageMeasurement(
            page=scene_to_page(int(m.group(1))),
            height=int(m.group(2)),
        ))
    return measurements


def measure_pages(state: dict) -> dict:
    """Measure rendered images, or read precomputed heights if a file was given."""
    measurements_path = state.get("measurements_path")
    if measurements_path:
        logger.info("Reading change bar heights from %s", measurements_path)
        with open(measurements_path, encoding="utf-8") as fh:
            measurements = parse_measurements(fh)
    else:
        logger.info("Getting change bar heights...")
        measurements = [
            PageMeasurement(page=page, height=trimmed_height(image))
            for page, image in state.get("images", [])
        ]

    page_count = state["page_count"]
    for m in measurements:
        if not 1 <= m["page"] <= page_count:
            raise MeasurementError(
                f"Measurement for page {m['page']} outside document (1-{page_count})"
            )

    pages = [m["page"] for m in measurements]
    if pages != list(range(1, page_count + 1)):
        raise MeasurementError(
            f"Expected one measurement per page 1-{page_count} in order, got pages {pages}"
        )

    logger.debug("Heights: %s", [m["height"] for m in measurements])
    return {"measurements": measurements, "images": []}
