"""Acceptance checks for detected features against a guide or scan area.

Two independent policies are provided:

- Strict containment (``is_inside_guide``): the whole feature must lie inside
  the guide overlay. Used by the guided capture screen, which works in the
  vision pipeline's normalized space.
- Overlap ratio (``is_in_scan_area``): enough of the feature's area must fall
  inside a configured scan area. Used by the raw-frame scanner, which works in
  image pixels.

Both return False instead of raising on unusable geometry, so a bad frame is
simply skipped.
"""

import logging
from typing import Optional

from capture_geometry.config import DEFAULT_OVERLAP_THRESHOLD
from capture_geometry.coordinates import ImageRect, NormalizedRect, Rect, Size, ViewRect

logger = logging.getLogger(__name__)


def clamp_threshold(threshold: float) -> float:
    """Clamp an overlap threshold to [0, 1]."""
    return max(0.0, min(1.0, threshold))


def guide_to_normalized(guide: ViewRect, preview_size: Size, feature: NormalizedRect) -> Optional[NormalizedRect]:
    """Express a view-space guide in the same normalized space as a feature.

    Args:
        guide: Guide overlay rectangle in view points
        preview_size: Size of the preview view the guide is drawn on
        feature: Detected feature whose origin convention the result adopts

    Returns:
        Normalized guide rectangle, or None if the preview size is not positive
    """
    return guide.normalized(preview_size, origin=feature.origin)


def is_inside_guide(feature: NormalizedRect, guide: Optional[ViewRect], preview_size: Size) -> bool:
    """Check whether a detected feature lies completely inside the guide overlay.

    The guide is normalized by the preview size and flipped into the feature's
    origin convention before comparing.

    Args:
        feature: Feature bounding box in normalized coordinates
        guide: Guide overlay in view points, or None when no guide is shown
        preview_size: Size of the preview view

    Returns:
        True if the feature is accepted
    """
    if guide is None:
        return True

    if feature.is_empty:
        return False

    normalized_guide = guide_to_normalized(guide, preview_size, feature)
    if normalized_guide is None:
        logger.debug(f"Cannot normalize guide against preview size {preview_size}")
        return False

    return normalized_guide.contains(feature)


def feature_to_image_rect(feature: NormalizedRect, image_size: Size) -> ImageRect:
    """Convert a normalized detection into top-left image pixel coordinates."""
    return feature.to_pixels(image_size)


def overlap_ratio(feature: Rect, area: Rect) -> float:
    """Fraction [0-1] of the feature's area that falls inside ``area``."""
    return feature.overlap_fraction(area)


def is_in_scan_area(
    feature: ImageRect,
    scan_area: Optional[ImageRect],
    overlap_threshold: float = DEFAULT_OVERLAP_THRESHOLD,
) -> bool:
    """Check whether enough of a feature overlaps the scan area.

    Args:
        feature: Feature bounding box in image pixels
        scan_area: Scan area in image pixels, or None when scanning the whole frame
        overlap_threshold: Minimum accepted overlap fraction (inclusive), clamped to [0, 1]

    Returns:
        True if the feature is accepted
    """
    if scan_area is None:
        return True

    if feature.is_empty:
        return False

    intersection = feature.intersection(scan_area)
    if intersection is None:
        return False

    ratio = intersection.area / feature.area
    logger.debug(f"Barcode overlap: {ratio * 100:.1f}%")
    return ratio >= clamp_threshold(overlap_threshold)
