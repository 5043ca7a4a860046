"""Barcode scanner front-end for raw decoded frames.

The host decodes barcodes itself and passes the detections for each frame in.
The scanner owns the configuration (scan area and overlap threshold), whether
detection is running, and which detection (if any) a frame yields.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from threading import Lock
from typing import Optional

from capture_geometry.config import Settings, get_settings
from capture_geometry.containment import clamp_threshold, feature_to_image_rect, is_in_scan_area
from capture_geometry.coordinates import ImageRect, NormalizedRect, OriginConvention
from capture_geometry.frames import FrameBuffer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Detection:
    """A decoded barcode and where the vision pipeline found it."""

    payload: Optional[str]
    bounding_box: NormalizedRect

    @classmethod
    def from_vision(
        cls,
        payload: Optional[str],
        x: float,
        y: float,
        width: float,
        height: float,
        origin: Optional[OriginConvention] = None,
    ) -> "Detection":
        """Build a detection from a vision bounding box.

        Args:
            payload: Decoded barcode string
            x, y, width, height: Normalized bounding box
            origin: Origin convention of the box (default: configured vision origin)
        """
        if origin is None:
            origin = OriginConvention(get_settings().vision_origin)
        # Boxes at the frame edge can spill slightly past [0, 1]
        box = NormalizedRect(x, y, width, height, origin=origin).clamped()
        return cls(payload=payload, bounding_box=box)


class BarcodeScanner:
    """Filters per-frame detections against an optional scan area."""

    def __init__(
        self,
        on_detection: Optional[Callable[[str, ImageRect], None]] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.on_detection = on_detection
        self._lock = Lock()
        self._detecting = False
        self._scan_area: Optional[ImageRect] = None
        self._overlap_threshold = clamp_threshold(settings.overlap_threshold)

    @property
    def is_detecting(self) -> bool:
        with self._lock:
            return self._detecting

    @property
    def scan_area(self) -> Optional[ImageRect]:
        with self._lock:
            return self._scan_area

    @property
    def overlap_threshold(self) -> float:
        with self._lock:
            return self._overlap_threshold

    def set_scan_area(self, scan_area: Optional[ImageRect]) -> None:
        """Restrict detections to an area of the frame (image pixels); None scans everything."""
        with self._lock:
            self._scan_area = scan_area
        logger.info(f"Scan area set to: {scan_area}")

    def set_overlap_threshold(self, threshold: float) -> None:
        """Set the minimum overlap fraction, clamped to [0, 1]."""
        with self._lock:
            self._overlap_threshold = clamp_threshold(threshold)
        logger.info(f"Overlap threshold set to: {self.overlap_threshold}")

    def start(self) -> None:
        with self._lock:
            self._detecting = True
        logger.info("Detection started")

    def stop(self) -> None:
        with self._lock:
            self._detecting = False
        logger.info("Detection stopped")

    def dispose(self) -> None:
        """Stop detecting and forget the scan area."""
        with self._lock:
            self._detecting = False
            self._scan_area = None
        logger.info("Disposed")

    def process_frame(self, frame: FrameBuffer, detections: Iterable[Detection]) -> Optional[str]:
        """Pick the first acceptable barcode in a frame.

        Args:
            frame: Decoded frame the detections were made on
            detections: Detections in the vision pipeline's normalized coordinates

        Returns:
            Payload of the accepted barcode, or None
        """
        with self._lock:
            detecting = self._detecting
            scan_area = self._scan_area
            threshold = self._overlap_threshold

        if not detecting:
            return None

        if not frame.is_valid():
            return None

        for detection in detections:
            if not detection.payload:
                continue

            box = feature_to_image_rect(detection.bounding_box, frame.size)
            if not is_in_scan_area(box, scan_area, threshold):
                continue

            logger.info(f"Barcode detected: {detection.payload}")
            if self.on_detection is not None:
                self.on_detection(detection.payload, box)
            return detection.payload

        return None
