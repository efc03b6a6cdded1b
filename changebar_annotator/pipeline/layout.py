"""
pipeline/layout.py — bookmarks and navigation annotations.

Every changed page gets a full-width link along the bottom margin that jumps
to the next changed page, plus a small label whose horizontal position works
as a progress bar: far left on the first change, far right on the last.
No PDF is touched here; the output is an AnnotationPlan for the merger.
"""

import logging
import math

from changebar_annotator.state import (
    AnnotationPlan,
    Color,
    LabelAnnotation,
    LinkAnnotation,
    OutlineEntry,
    Rect,
)

logger = logging.getLogger(__name__)

OUTLINE_TITLE = "CHANGE BAR REVIEWS"

# Annotation box geometry, points
ANN_WIDTH = 120
ANN_HEIGHT = 36
ANN_MARGIN = 3
PAGE_WIDTH = 8.5 * 72

LINK_NEXT = (1.0, 0.25, 0.25)
LINK_FINISHED = (0.25, 1.0, 0.25)
TEXT_EMPHASIS = (0.0, 0.0, 0.0)
TEXT_MUTED = (0.7, 0.7, 0.7)


def annotation_rect(percentage: float | None = None) -> Rect:
    """Label box at `percentage` (0.0 far left, 1.0 far right) of the bottom band.

    With no percentage, the box spans the full page width.
    """
    width = ANN_WIDTH
    if percentage is None:
        width = PAGE_WIDTH - ANN_MARGIN * 2
        percentage = 0.0
    x = ANN_MARGIN + math.floor((PAGE_WIDTH - ANN_MARGIN * 2 - width) * percentage)
    return (x, ANN_MARGIN, int(x + width), ANN_MARGIN + ANN_HEIGHT)


def progress(pages_left: int, total_changed: int) -> float:
    """Fraction of the review done once `pages_left` pages remain.

    With a single changed page there is no interior position; 0.0 is used.
    """
    if total_changed <= 1:
        return 0.0
    return min(1.0, max(0.0, 1.0 - pages_left / (total_changed - 1)))


def section_title(ordinal: int, section: list[int]) -> str:
    if len(section) == 1:
        return f"#{ordinal} - p. {section[0]}"
    return f"#{ordinal} - pp. {section[0]}-{section[-1]}"


def build_outline(sections: list[list[int]]) -> list[OutlineEntry]:
    return [
        OutlineEntry(title=section_title(i, section), page=section[0])
        for i, section in enumerate(sections, start=1)
    ]


def build_annotations(changed_pages: list[int],
                      next_page: dict[int, int]) -> list[LinkAnnotation | LabelAnnotation]:
    """Link and label directives, in page order."""
    if not changed_pages:
        return []

    full_rect = annotation_rect()
    first, last = changed_pages[0], changed_pages[-1]
    total = len(changed_pages)
    annotations: list[LinkAnnotation | LabelAnnotation] = []

    pages_left = total
    if first > 1:
        annotations.append(LinkAnnotation(
            source_page=1, target_page=first, rect=full_rect, color=LINK_NEXT,
        ))
        annotations.append(LabelAnnotation(
            source_page=1,
            rect=annotation_rect(0.0),
            text=f"{pages_left} pages left\n(Go to first change)",
            text_color=TEXT_EMPHASIS,
        ))

    for page in changed_pages:
        pages_left -= 1
        if page == last:
            annotations.append(LinkAnnotation(
                source_page=page, target_page=first, rect=full_rect, color=LINK_FINISHED,
            ))
            annotations.append(LabelAnnotation(
                source_page=page,
                rect=annotation_rect(1.0),
                text="Review finished!\n(go to first change)",
                text_color=TEXT_EMPHASIS,
            ))
            continue

        target = next_page[page]
        annotations.append(LinkAnnotation(
            source_page=page, target_page=target, rect=full_rect, color=LINK_NEXT,
        ))
        text = f"{pages_left} pages left"
        color: Color = TEXT_MUTED
        if target != page + 1:
            text += "\n(Go to next section)"
            color = TEXT_EMPHASIS
        annotations.append(LabelAnnotation(
            source_page=page,
            rect=annotation_rect(progress(pages_left, total)),
            text=text,
            text_color=color,
        ))

    return annotations


def layout_annotations(state: dict) -> dict:
    plan = AnnotationPlan(
        page_height=state["page_height"],
        outline_title=OUTLINE_TITLE,
        outline=tuple(build_outline(state["sections"])),
        annotations=tuple(build_annotations(state["changed_pages"], state["next_page"])),
    )
    logger.info("Planned %d bookmarks and %d annotations",
                len(plan.outline), len(plan.annotations))
    return {"plan": plan}
