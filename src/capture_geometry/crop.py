"""Map an on-screen guide to the pixels of the captured photo.

The live preview shows the camera image with aspect-fill scaling: the image is
scaled uniformly until it covers the whole viewport and the overflow on one
axis is cut off. A guide drawn over the preview therefore corresponds to a
region of the *visible band* of the image, not of the whole image.

Example:
    A 4000x3000 photo previewed in a 1000x2000 view only shows the central
    1500x3000 band (x offset 1250). The guide (400, 800, 200, 400) covers
    normalized (0.4, 0.4, 0.2, 0.2) of that band, i.e. image pixels
    (1850, 1200, 300, 600).

Cropping is a best-effort enhancement: every failure path hands back the
original image instead of raising.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from capture_geometry.coordinates import ImageRect, NormalizedRect, OriginConvention, Size, ViewRect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AspectFillMapping:
    """How an image of ``image_size`` is displayed in a viewport of ``view_size``."""

    image_size: Size
    view_size: Size

    @classmethod
    def between(cls, image_size: Size, view_size: Size) -> Optional["AspectFillMapping"]:
        """Build a mapping, or return None if either size is not positive."""
        if not image_size.is_valid or not view_size.is_valid:
            return None
        return cls(image_size=image_size, view_size=view_size)

    @property
    def visible_region(self) -> ImageRect:
        """Region of the image that is visible in the viewport, in image pixels."""
        image_aspect = self.image_size.aspect
        viewport_aspect = self.view_size.aspect

        if image_aspect > viewport_aspect:
            # Image is wider than the viewport: left and right edges are cut off
            scaled_width = self.image_size.height * viewport_aspect
            x_offset = (self.image_size.width - scaled_width) / 2
            return ImageRect(x=x_offset, y=0.0, width=scaled_width, height=self.image_size.height)

        # Image is taller than (or matches) the viewport: top and bottom are cut off
        scaled_height = self.image_size.width / viewport_aspect
        y_offset = (self.image_size.height - scaled_height) / 2
        return ImageRect(x=0.0, y=y_offset, width=self.image_size.width, height=scaled_height)

    def to_image(self, rect: NormalizedRect) -> ImageRect:
        """Map a viewport-normalized rectangle into image pixels (unclipped)."""
        region = self.visible_region
        top_left = rect.to_origin(OriginConvention.TOP_LEFT)
        return ImageRect(
            x=region.x + top_left.x * region.width,
            y=region.y + top_left.y * region.height,
            width=top_left.width * region.width,
            height=top_left.height * region.height,
        )


def compute_crop_rect(guide: ViewRect, preview_size: Size, image_size: Size) -> Optional[ImageRect]:
    """Compute the image rectangle showing exactly what the user saw inside the guide.

    Args:
        guide: Guide overlay rectangle in view points
        preview_size: Displayed size of the preview view
        image_size: Pixel size of the captured image

    Returns:
        Crop rectangle clipped to the image bounds, or None when no usable crop exists
    """
    normalized = guide.normalized(preview_size)
    if normalized is None or not normalized.is_finite:
        return None

    mapping = AspectFillMapping.between(image_size, preview_size)
    if mapping is None:
        return None

    # Full-viewport guides can overshoot the image by a sub-pixel amount
    return mapping.to_image(normalized).intersection(ImageRect.full(image_size))


def crop_image(image: Image.Image, guide: ViewRect, preview_size: Size) -> Image.Image:
    """Crop a captured photo to the guide, falling back to the original photo.

    Args:
        image: Captured photo
        guide: Guide overlay rectangle in view points
        preview_size: Displayed size of the preview view

    Returns:
        Cropped image, or ``image`` itself when the crop is unavailable
    """
    width, height = image.size
    crop_rect = compute_crop_rect(guide, preview_size, Size(width=width, height=height))
    if crop_rect is None:
        logger.warning(f"Crop unavailable for guide {guide} on preview {preview_size}; using full image")
        return image

    left, top, right, bottom = crop_rect.to_box()
    if right <= left or bottom <= top:
        logger.warning(f"Crop rectangle {crop_rect} rounds to an empty box; using full image")
        return image

    logger.debug(f"Cropping {width}x{height} image to {(left, top, right, bottom)}")
    return image.crop((left, top, right, bottom))
