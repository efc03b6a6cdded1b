"""CLI entry point: add change bar navigation links and bookmarks to a PDF."""

import argparse
import logging
import sys
import time
from pathlib import Path

from changebar_annotator.config import Settings, load_settings
from changebar_annotator.errors import ChangeBarError
from changebar_annotator.pipeline.loader import load_document
from changebar_annotator.pipeline.geometry import compute_geometry
from changebar_annotator.pipeline.rasterizer import rasterize_pages
from changebar_annotator.pipeline.measurer import measure_pages
from changebar_annotator.pipeline.classifier import detect_changed_pages
from changebar_annotator.pipeline.sectioner import discover_sections
from changebar_annotator.pipeline.layout import layout_annotations
from changebar_annotator.pipeline.merger import merge_annotations

logger = logging.getLogger(__name__)


def run_pipeline(pdf_path: str, output_path: str | None = None,
                 settings: Settings | None = None,
                 measurements_path: str | None = None) -> dict:
    """Run the full annotation pipeline, return final state.

    Stops early, without writing anything, when the PDF was already
    annotated or has no change bars.
    """
    state: dict = {
        "pdf_path": pdf_path,
        "output_path": output_path or pdf_path,
        "settings": settings or Settings(),
        "measurements_path": measurements_path,
        "written": False,
    }

    state.update(load_document(state))
    if state["already_annotated"]:
        logger.info("Keeping existing change bar annotations.")
        return state

    state.update(compute_geometry(state))
    if not measurements_path:
        state.update(rasterize_pages(state))
    state.update(measure_pages(state))
    state.update(detect_changed_pages(state))

    if not state["changed_pages"]:
        logger.info("No change bars found; keeping original PDF.")
        return state

    state.update(discover_sections(state))
    state.update(layout_annotations(state))
    state.update(merge_annotations(state))

    return state


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Add navigation links and bookmarks to a PDF that contains change bars.")
    parser.add_argument("pdf_path", help="PDF file to process")
    parser.add_argument("--output", "-o", default=None,
                        help="Output PDF file to create (default: modify the input in place)")
    parser.add_argument("--bbox", default=None,
                        help="Change bar region x1,x2,y1,y2 in inches from the upper-left corner")
    parser.add_argument("--dpi", default=None, help="Sampling resolution for change bar detection")
    parser.add_argument("--measurements", default=None,
                        help="Read '<scene> <height>' lines from this file instead of rendering")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    pdf_path = Path(args.pdf_path)
    if not pdf_path.is_file():
        logger.error("File not found: %s", pdf_path)
        return 1

    if args.measurements and not Path(args.measurements).is_file():
        logger.error("Measurements file not found: %s", args.measurements)
        return 1

    start = time.time()
    try:
        settings = load_settings(bbox=args.bbox, dpi=args.dpi)
        state = run_pipeline(str(pdf_path), args.output, settings, args.measurements)
    except ChangeBarError as exc:
        logger.error("%s", exc)
        return 1
    except Exception:
        logger.exception("Pipeline failed")
        return 1

    if state["written"]:
        logger.info("Done: %d changed pages in %d sections -> %s (%.1fs)",
                    len(state["changed_pages"]), len(state["sections"]),
                    state["output_path"], time.time() - start)
    return 0


if __name__ == "__main__":
    sys.exit(main())
