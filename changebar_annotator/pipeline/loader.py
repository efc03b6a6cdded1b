"""
Document inspection: page count, page height, and whether a previous run
already added the review outline.
"""

import logging
from pathlib import Path

import pdfplumber
from pypdf import PdfReader

from changebar_annotator.errors import ConfigError
from changebar_annotator.pipeline.layout import OUTLINE_TITLE

logger = logging.getLogger(__name__)


def _has_review_outline(pdf_path: str) -> bool:
    reader = PdfReader(pdf_path)
    for item in reader.outline:
        # Nested lists hold child items; only top-level entries count.
        if isinstance(item, list):
            continue
        if item.title == OUTLINE_TITLE:
            return True
    return False


def load_document(state: dict) -> dict:
    """Read page metadata. The first page's height is used for the whole document."""
    pdf_path = state["pdf_path"]
    path = Path(pdf_path)
    if not path.exists():
        raise FileNotFoundError(f"PDF not found: {pdf_path}")

    try:
        with pdfplumber.open(str(path)) as pdf:
            page_count = len(pdf.pages)
            page_height = float(pdf.pages[0].height) if page_count else 0.0
        already_annotated = _has_review_outline(str(path))
    except Exception as exc:
        raise ConfigError(f"Cannot read PDF {pdf_path}: {exc}") from exc

    if not page_count:
        raise ConfigError(f"PDF has no pages: {pdf_path}")

    logger.info("Loaded %s: %d pages, page height %.1f pts", path.name, page_count, page_height)
    return {
        "page_count": page_count,
        "page_height": page_height,
        "already_annotated": already_annotated,
    }
