"""
Decide which pages carry a change bar.

A partial-height mark is a change bar. A trimmed height of 1 means the
region was blank; a height equal to the full crop means something fills
the region edge to edge, which is not a change bar either.
"""

import logging

from changebar_annotator.pipeline.measurer import DEGENERATE_HEIGHT
from changebar_annotator.state import PageMeasurement

logger = logging.getLogger(__name__)


def classify_pages(measurements: list[PageMeasurement], full_height: int) -> list[int]:
    """Return changed page numbers, in measurement order."""
    return [
        m["page"] for m in measurements
        if m["height"] != full_height and m["height"] != DEGENERATE_HEIGHT
    ]


def detect_changed_pages(state: dict) -> dict:
    changed = classify_pages(state["measurements"], state["geometry"].pixel_height)
    if changed:
        logger.info("Total changed pages detected: %d", len(changed))
        logger.info("  %s", " ".join(str(p) for p in changed))
    return {"changed_pages": changed}
