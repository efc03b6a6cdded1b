"""
Shared record types for the annotation pipeline.
"""

from dataclasses import dataclass, field
from typing import TypedDict

Rect = tuple[int, int, int, int]           # x1, y1, x2, y2 in PDF points, bottom-up
Color = tuple[float, float, float]         # RGB, 0..1


class PageMeasurement(TypedDict):
    page: int        # 1-indexed
    height: int      # trimmed change bar image height, pixels


@dataclass(frozen=True)
class CropGeometry:
    pixel_width: int
    pixel_height: int
    offset_left: int     # points
    offset_bottom: int   # points


@dataclass(frozen=True)
class OutlineEntry:
    title: str
    page: int


@dataclass(frozen=True)
class LinkAnnotation:
    source_page: int
    target_page: int
    rect: Rect
    color: Color
    border_width: int = 2


@dataclass(frozen=True)
class LabelAnnotation:
    source_page: int
    rect: Rect
    text: str
    text_color: Color
    font: str = "HeBo"
    font_size: int = 11
    border_width: int = 3


@dataclass(frozen=True)
class AnnotationPlan:
    """Everything the merger needs to write; built once, never modified."""
    page_height: float
    outline_title: str
    outline: tuple[OutlineEntry, ...] = field(default_factory=tuple)
    annotations: tuple[LinkAnnotation | LabelAnnotation, ...] = field(default_factory=tuple)
