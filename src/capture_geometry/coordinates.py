"""Rectangle and size types for camera capture geometry.

Three coordinate spaces meet in the capture flow:

- Normalized: fractions [0-1] of the analysed frame, as emitted by the vision
  pipeline. The origin convention is carried explicitly on every rectangle
  because Vision reports bottom-left while views use top-left.
- View: points on the on-screen preview surface (top-left origin).
- Image: pixels of the full-resolution captured photo or video frame (top-left origin).

All types are immutable; every operation returns a new value.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, TypeVar

from capture_geometry.config import CONTAINMENT_TOLERANCE

R = TypeVar("R", bound="Rect")


class OriginConvention(Enum):
    """Where y == 0 sits in a coordinate space."""

    TOP_LEFT = "top_left"
    BOTTOM_LEFT = "bottom_left"


@dataclass(frozen=True)
class Size:
    """Width and height of a view or image."""

    width: float
    height: float

    @property
    def is_valid(self) -> bool:
        """True when both dimensions are finite and positive."""
        return math.isfinite(self.width) and math.isfinite(self.height) and self.width > 0 and self.height > 0

    @property
    def aspect(self) -> float:
        """Width divided by height. Only meaningful when ``is_valid``."""
        return self.width / self.height


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its top-left corner and extent.

    Attributes:
        x: Left edge
        y: Top edge (bottom edge for bottom-left normalized rectangles)
        width: Horizontal extent
        height: Vertical extent
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        """Rectangle area, zero for degenerate rectangles."""
        if self.is_empty:
            return 0.0
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        """True when the rectangle has no positive area."""
        return self.width <= 0 or self.height <= 0

    @property
    def is_finite(self) -> bool:
        """True when no coordinate is NaN or infinite."""
        return all(math.isfinite(value) for value in self.as_tuple())

    def _aligned(self, other: "Rect") -> "Rect":
        """Express ``other`` in this rectangle's coordinate convention."""
        return other

    def contains(self, other: "Rect", tolerance: float = CONTAINMENT_TOLERANCE) -> bool:
        """Check if ``other`` lies completely inside this rectangle.

        Edges are inclusive; ``tolerance`` absorbs floating point noise from
        normalizing view coordinates.

        Args:
            other: Rectangle to test
            tolerance: Slack allowed on every edge

        Returns:
            True if other is completely inside this rectangle
        """
        other = self._aligned(other)
        return (
            other.min_x >= self.min_x - tolerance
            and other.min_y >= self.min_y - tolerance
            and other.max_x <= self.max_x + tolerance
            and other.max_y <= self.max_y + tolerance
        )

    def overlaps(self, other: "Rect") -> bool:
        """Check if the two rectangles share a region of positive area."""
        other = self._aligned(other)
        return not (
            self.max_x <= other.min_x
            or self.min_x >= other.max_x
            or self.max_y <= other.min_y
            or self.min_y >= other.max_y
        )

    def intersection(self: R, other: "Rect") -> Optional[R]:
        """Calculate intersection of this rectangle with another.

        Args:
            other: The rectangle to intersect with

        Returns:
            Intersection in this rectangle's type and convention, or None if no overlap
        """
        if self.is_empty or other.is_empty or not self.overlaps(other):
            return None

        other = self._aligned(other)
        left = max(self.min_x, other.min_x)
        top = max(self.min_y, other.min_y)
        right = min(self.max_x, other.max_x)
        bottom = min(self.max_y, other.max_y)

        return replace(self, x=left, y=top, width=right - left, height=bottom - top)

    def overlap_fraction(self, other: "Rect") -> float:
        """Calculate fraction of this rectangle's area that lies inside another.

        Args:
            other: The rectangle to check overlap with

        Returns:
            Fraction [0-1] of this rectangle's area covered by other
        """
        this_area = self.area
        if this_area == 0:
            return 0.0

        intersection = self.intersection(other)
        if intersection is None:
            return 0.0

        return intersection.area / this_area

    def scaled(self: R, sx: float, sy: float) -> R:
        """Scale position and extent independently on each axis."""
        return replace(self, x=self.x * sx, y=self.y * sy, width=self.width * sx, height=self.height * sy)

    def as_tuple(self) -> tuple[float, float, float, float]:
        """Return (x, y, width, height)."""
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class NormalizedRect(Rect):
    """Rectangle in unit [0-1] space with an explicit origin convention."""

    origin: OriginConvention = OriginConvention.TOP_LEFT

    def _aligned(self, other: Rect) -> Rect:
        if isinstance(other, NormalizedRect):
            return other.to_origin(self.origin)
        return other

    def to_origin(self, origin: OriginConvention) -> "NormalizedRect":
        """Re-express this rectangle with the given origin convention.

        Flipping between top-left and bottom-left mirrors the rectangle about
        the horizontal center line: ``y' = 1 - y - height``.
        """
        if origin == self.origin:
            return self
        return replace(self, y=1.0 - self.y - self.height, origin=origin)

    def to_pixels(self, frame: Size) -> "ImageRect":
        """Convert to top-left pixel coordinates of a frame of the given size.

        Args:
            frame: Frame size in pixels

        Returns:
            ImageRect in top-left pixel coordinates
        """
        top_left = self.to_origin(OriginConvention.TOP_LEFT)
        return ImageRect(
            x=top_left.x * frame.width,
            y=top_left.y * frame.height,
            width=top_left.width * frame.width,
            height=top_left.height * frame.height,
        )

    def clamped(self) -> "NormalizedRect":
        """Clip the rectangle to the unit square."""
        left = min(max(self.x, 0.0), 1.0)
        top = min(max(self.y, 0.0), 1.0)
        right = min(max(self.max_x, 0.0), 1.0)
        bottom = min(max(self.max_y, 0.0), 1.0)
        return replace(self, x=left, y=top, width=max(right - left, 0.0), height=max(bottom - top, 0.0))


@dataclass(frozen=True)
class ViewRect(Rect):
    """Rectangle in preview-surface points (top-left origin)."""

    def normalized(self, view: Size, origin: OriginConvention = OriginConvention.TOP_LEFT) -> Optional[NormalizedRect]:
        """Convert to normalized coordinates relative to the preview view.

        Args:
            view: Preview view size
            origin: Origin convention of the returned rectangle

        Returns:
            NormalizedRect, or None if the view size is not positive
        """
        if not view.is_valid:
            return None

        top_left = NormalizedRect(
            x=self.x / view.width,
            y=self.y / view.height,
            width=self.width / view.width,
            height=self.height / view.height,
        )
        return top_left.to_origin(origin)


@dataclass(frozen=True)
class ImageRect(Rect):
    """Rectangle in source image pixels (top-left origin)."""

    @classmethod
    def full(cls, image: Size) -> "ImageRect":
        """Rectangle covering the whole image."""
        return cls(x=0.0, y=0.0, width=image.width, height=image.height)

    def to_box(self) -> tuple[int, int, int, int]:
        """Round to a Pillow-style (left, top, right, bottom) integer box."""
        return (round(self.min_x), round(self.min_y), round(self.max_x), round(self.max_y))
