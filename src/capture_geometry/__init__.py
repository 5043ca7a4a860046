"""Guide-region barcode acceptance and photo crop geometry for camera capture."""

from capture_geometry.capture import GuidedCapture
from capture_geometry.containment import feature_to_image_rect, is_in_scan_area, is_inside_guide, overlap_ratio
from capture_geometry.coordinates import ImageRect, NormalizedRect, OriginConvention, Rect, Size, ViewRect
from capture_geometry.crop import AspectFillMapping, compute_crop_rect, crop_image
from capture_geometry.frames import FrameBuffer, PixelFormat
from capture_geometry.scanner import BarcodeScanner, Detection
from capture_geometry.session import CaptureResult, CaptureSession, ResultKind, SessionState

try:
    from capture_geometry._version import __version__, __version_tuple__
except ImportError:
    __version__ = "0.0.0+unknown"
    __version_tuple__ = (0, 0, 0, "unknown", "unknown")

__all__ = [
    "__version__",
    "__version_tuple__",
    "Rect",
    "Size",
    "NormalizedRect",
    "ViewRect",
    "ImageRect",
    "OriginConvention",
    "is_inside_guide",
    "is_in_scan_area",
    "feature_to_image_rect",
    "overlap_ratio",
    "AspectFillMapping",
    "compute_crop_rect",
    "crop_image",
    "FrameBuffer",
    "PixelFormat",
    "CaptureSession",
    "CaptureResult",
    "ResultKind",
    "SessionState",
    "BarcodeScanner",
    "Detection",
    "GuidedCapture",
]
