"""Guided capture flow: accept barcodes inside the guide, crop photos to it."""

import io
import logging
from collections.abc import Callable, Iterable
from threading import Lock
from typing import Optional

from PIL import Image

from capture_geometry.containment import is_inside_guide
from capture_geometry.coordinates import Size, ViewRect
from capture_geometry.crop import crop_image
from capture_geometry.scanner import Detection
from capture_geometry.session import CaptureResult, CaptureSession

logger = logging.getLogger(__name__)


class GuidedCapture:
    """One capture screen with a guide overlay drawn over an aspect-fill preview.

    Every way of finishing (scanned barcode, shutter photo, gallery pick, manual
    entry) goes through the same ``CaptureSession``, so only the first one wins.
    """

    def __init__(
        self,
        preview_size: Size,
        guide: Optional[ViewRect] = None,
        on_result: Optional[Callable[[CaptureResult], None]] = None,
        photo_format: str = "JPEG",
    ):
        self.preview_size = preview_size
        self.guide = guide
        self.photo_format = photo_format
        self.session = CaptureSession(on_result=on_result)
        self._lock = Lock()
        self._scanning_enabled = True

    @property
    def scanning_enabled(self) -> bool:
        """Whether preview frames are still checked for barcodes."""
        with self._lock:
            enabled = self._scanning_enabled
        return enabled and not self.session.has_sent_result

    @scanning_enabled.setter
    def scanning_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._scanning_enabled = enabled

    def present(self) -> None:
        """Start a new presentation of the capture screen."""
        self.session.reset()
        self.scanning_enabled = True

    def handle_detections(self, detections: Iterable[Detection]) -> Optional[str]:
        """Process the detections of one preview frame.

        Frames arriving while another is still being processed are dropped.

        Returns:
            The accepted barcode if this frame finished the capture, else None
        """
        if not self.scanning_enabled or not self.session.try_begin_frame():
            return None

        try:
            for detection in detections:
                if not detection.payload:
                    continue

                if not is_inside_guide(detection.bounding_box, self.guide, self.preview_size):
                    logger.debug(f"Barcode {detection.payload} outside guide, ignoring")
                    continue

                accepted = self.session.complete(CaptureResult.barcode(detection.payload))
                # Another completion may have won; either way the capture is over
                self.scanning_enabled = False
                return detection.payload if accepted else None

            return None
        finally:
            self.session.end_frame()

    def handle_photo(self, image: Image.Image, crop_to_guide: bool = True) -> bool:
        """Finish the capture with a photo.

        Args:
            image: Captured or picked photo
            crop_to_guide: Crop to the guide (shutter photos); gallery picks pass False

        Returns:
            True if the photo became the capture result
        """
        if self.session.has_sent_result:
            logger.info("Photo received, but result already sent")
            return False

        if crop_to_guide and self.guide is not None:
            image = crop_image(image, self.guide, self.preview_size)

        return self.session.complete(CaptureResult.photo(self._encode(image)))

    def handle_manual_entry(self, barcode: str) -> bool:
        """Finish the capture with a barcode typed in by the user."""
        return self.session.complete(CaptureResult.barcode(barcode))

    def _encode(self, image: Image.Image) -> bytes:
        photo_format = self.photo_format.upper()
        if photo_format in ("JPEG", "JPG"):
            photo_format = "JPEG"
            if image.mode != "RGB":
                image = image.convert("RGB")

        buffer = io.BytesIO()
        image.save(buffer, format=photo_format)
        return buffer.getvalue()
