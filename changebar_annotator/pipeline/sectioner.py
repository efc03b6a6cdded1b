"""
Group changed pages into sections of consecutive pages and link each
changed page to the next one.
"""

import logging

logger = logging.getLogger(__name__)


def build_sections(changed_pages: list[int]) -> tuple[list[list[int]], dict[int, int]]:
    """Split ascending page numbers into maximal consecutive runs.

    Also returns next_page, mapping every changed page but the last to the
    following changed page, across section boundaries.

    Raises ValueError if the pages are not strictly increasing.
    """
    sections: list[list[int]] = []
    next_page: dict[int, int] = {}

    prev: int | None = None
    for page in changed_pages:
        if prev is not None:
            if page <= prev:
                raise ValueError(f"Changed pages must be strictly increasing: {prev} then {page}")
            next_page[prev] = page
        if prev is None or page != prev + 1:
            sections.append([])
        sections[-1].append(page)
        prev = page

    return sections, next_page


def discover_sections(state: dict) -> dict:
    sections, next_page = build_sections(state["changed_pages"])

    logger.info("Total change sections: %d", len(sections))
    for s in sections:
        logger.info("  %s", " ".join(str(p) for p in s))
    return {"sections": sections, "next_page": next_page}
