"""Raw decoded camera frames handed over by the host application.

Frames arrive as a byte buffer plus width, height and a pixel format name.
Only the metadata matters for geometry; the pixels are converted to a Pillow
image for callers that want to inspect or save the frame.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from PIL import Image

from capture_geometry.config import DEFAULT_PIXEL_FORMAT
from capture_geometry.coordinates import Size

logger = logging.getLogger(__name__)


class PixelFormat(Enum):
    """Supported packed 8-bit pixel layouts."""

    BGRA8888 = "bgra8888"
    RGBA8888 = "rgba8888"
    RGB888 = "rgb888"

    @classmethod
    def parse(cls, name: str) -> "PixelFormat":
        """Look up a format by name (case-insensitive), defaulting to BGRA."""
        try:
            return cls(name.lower())
        except ValueError:
            logger.info(f"Unknown pixel format '{name}', assuming {DEFAULT_PIXEL_FORMAT}")
            return cls(DEFAULT_PIXEL_FORMAT)

    @property
    def bytes_per_pixel(self) -> int:
        return 3 if self is PixelFormat.RGB888 else 4

    @property
    def pil_mode(self) -> str:
        """Pillow image mode the buffer decodes to."""
        return "RGB" if self is PixelFormat.RGB888 else "RGBA"

    @property
    def raw_mode(self) -> str:
        """Pillow raw decoder mode describing the byte order in the buffer."""
        return {
            PixelFormat.BGRA8888: "BGRA",
            PixelFormat.RGBA8888: "RGBA",
            PixelFormat.RGB888: "RGB",
        }[self]


@dataclass(frozen=True)
class FrameBuffer:
    """A single decoded frame.

    Attributes:
        data: Packed pixel bytes, row-major with no row padding
        width: Frame width in pixels
        height: Frame height in pixels
        pixel_format: Layout of each pixel in ``data``
    """

    data: bytes
    width: int
    height: int
    pixel_format: PixelFormat = PixelFormat.BGRA8888

    @property
    def size(self) -> Size:
        return Size(width=self.width, height=self.height)

    @property
    def bytes_per_row(self) -> int:
        return self.width * self.pixel_format.bytes_per_pixel

    @property
    def required_bytes(self) -> int:
        """Minimum buffer length for the declared dimensions."""
        return self.bytes_per_row * self.height

    def is_valid(self) -> bool:
        """Check that the dimensions are positive and the buffer is large enough."""
        if self.width <= 0 or self.height <= 0:
            logger.warning(f"Invalid frame dimensions {self.width}x{self.height}")
            return False

        if len(self.data) < self.required_bytes:
            logger.warning(
                f"Insufficient data for image dimensions: got {len(self.data)} bytes, "
                f"need {self.required_bytes} for {self.width}x{self.height} {self.pixel_format.value}"
            )
            return False

        return True

    def to_image(self) -> Optional[Image.Image]:
        """Decode the buffer into a Pillow image, or None if the buffer is invalid."""
        if not self.is_valid():
            return None

        return Image.frombytes(
            self.pixel_format.pil_mode,
            (self.width, self.height),
            bytes(self.data[: self.required_bytes]),
            "raw",
            self.pixel_format.raw_mode,
        )
