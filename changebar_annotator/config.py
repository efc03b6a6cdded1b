"""
Run configuration: change bar bounding box and sampling resolution.

Values come from CHANGEBAR_BBOX / CHANGEBAR_DPI (a .env file is honoured),
and can be overridden from the command line.
"""

import os
from dataclasses import dataclass, field, replace

from dotenv import load_dotenv

from changebar_annotator.errors import ConfigError

DEFAULT_DPI = 36


@dataclass(frozen=True)
class BoundingBox:
    """Change bar region in inches, measured from the page's upper-left corner."""
    x1: float = 0.500
    x2: float = 0.875
    y1: float = 1.0
    y2: float = 10.0


@dataclass(frozen=True)
class Settings:
    bbox: BoundingBox = field(default_factory=BoundingBox)
    dpi: int = DEFAULT_DPI


def parse_bbox(raw: str) -> BoundingBox:
    """Parse "x1,x2,y1,y2" (inches) into a validated BoundingBox."""
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 4:
        raise ConfigError(f"Bounding box needs 4 values x1,x2,y1,y2, got {raw!r}")
    try:
        x1, x2, y1, y2 = (float(p) for p in parts)
    except ValueError:
        raise ConfigError(f"Bounding box values must be numbers, got {raw!r}") from None
    bbox = BoundingBox(x1=x1, x2=x2, y1=y1, y2=y2)
    _validate_bbox(bbox)
    return bbox


def parse_dpi(raw: str | int) -> int:
    try:
        dpi = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"DPI must be an integer, got {raw!r}") from None
    if dpi <= 0:
        raise ConfigError(f"DPI must be positive, got {dpi}")
    return dpi


def _validate_bbox(bbox: BoundingBox) -> None:
    if min(bbox.x1, bbox.x2, bbox.y1, bbox.y2) < 0:
        raise ConfigError(f"Bounding box values must be non-negative: {bbox}")
    if bbox.x1 >= bbox.x2 or bbox.y1 >= bbox.y2:
        raise ConfigError(f"Bounding box must satisfy x1 < x2 and y1 < y2: {bbox}")


def load_settings(bbox: str | None = None, dpi: str | int | None = None) -> Settings:
    """Build Settings from explicit overrides, then the environment, then defaults."""
    load_dotenv()

    settings = Settings()

    raw_bbox = bbox if bbox is not None else os.getenv("CHANGEBAR_BBOX")
    if raw_bbox:
        settings = replace(settings, bbox=parse_bbox(raw_bbox))

    raw_dpi = dpi if dpi is not None else os.getenv("CHANGEBAR_DPI")
    if raw_dpi:
        settings = replace(settings, dpi=parse_dpi(raw_dpi))

    return settings
