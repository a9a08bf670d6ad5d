"""
Aspect ratio bucketing and image URL helpers.
"""
from collections import Counter
from typing import Dict, Iterable, List, Tuple

from .browser.models import ImageDimensions, PinImage

UNKNOWN = "unknown"

# Checked in order; the first ratio within TOLERANCE wins
NAMED_RATIOS: List[Tuple[str, float]] = [
    ("Square (1:1)", 1.0),
    ("Standard (4:3)", 4 / 3),
    ("Classic (3:2)", 3 / 2),
    ("Widescreen (16:9)", 16 / 9),
    ("Ultra-wide (21:9)", 21 / 9),
]
TOLERANCE = 0.1

LANDSCAPE = "Landscape"
PORTRAIT = "Portrait"
CUSTOM = "Custom"

# Pinterest serves thumbnails from size-prefixed paths, e.g. /236x/ab/cd/...
THUMBNAIL_SIZES = ("236x", "474x")
FULL_SIZE = "736x"


def classify_aspect_ratio(width: float, height: float) -> str:
    """Bucket width/height into a named aspect ratio category."""
    if not width or not height:
        return UNKNOWN

    ratio = width / height
    for name, target in NAMED_RATIOS:
        if abs(ratio - target) < TOLERANCE:
            return name
    if ratio > 1.5:
        return LANDSCAPE
    if ratio < 0.8:
        return PORTRAIT
    return CUSTOM


def build_dimensions(width: float, height: float) -> ImageDimensions:
    width = int(width or 0)
    height = int(height or 0)
    if not width or not height:
        return ImageDimensions(width=width, height=height)
    return ImageDimensions(
        width=width,
        height=height,
        aspect_ratio=f"{width / height:.2f}",
        category=classify_aspect_ratio(width, height),
    )


def upgrade_image_url(url: str) -> str:
    """Point a thumbnail URL at the 736px rendition."""
    for size in THUMBNAIL_SIZES:
        if size in url:
            url = url.replace(size, FULL_SIZE, 1)
    return url


def aspect_ratio_stats(images: Iterable[PinImage]) -> Dict[str, int]:
    """Count images per aspect category."""
    return dict(Counter(image.dimensions.category for image in images))
