"""
One-shot result tracking for a camera capture presentation.

Frame callbacks, photo completions, gallery picks and manual entry can all try
to finish the same presentation, possibly from different threads. The session
lets exactly one of them through.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Optional, Union

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"                  # Waiting for the next frame
    PROCESSING = "processing"      # A frame is being analysed
    RESULT_SENT = "result_sent"    # Finished, further results are rejected


class ResultKind(Enum):
    BARCODE = "barcode"
    PHOTO = "photo"


@dataclass(frozen=True)
class CaptureResult:
    """The single result delivered for a presentation."""

    kind: ResultKind
    value: Union[str, bytes]

    @classmethod
    def barcode(cls, value: str) -> "CaptureResult":
        return cls(kind=ResultKind.BARCODE, value=value)

    @classmethod
    def photo(cls, data: bytes) -> "CaptureResult":
        return cls(kind=ResultKind.PHOTO, value=data)


class CaptureSession:
    """State machine guaranteeing at most one result per presentation."""

    def __init__(self, on_result: Optional[Callable[[CaptureResult], None]] = None):
        self.on_result = on_result
        self._lock = Lock()
        self._state = SessionState.IDLE
        self._result: Optional[CaptureResult] = None

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def result(self) -> Optional[CaptureResult]:
        with self._lock:
            return self._result

    @property
    def has_sent_result(self) -> bool:
        return self.state == SessionState.RESULT_SENT

    def try_begin_frame(self) -> bool:
        """Claim the session for one frame; False if busy or already finished."""
        with self._lock:
            if self._state != SessionState.IDLE:
                return False
            self._state = SessionState.PROCESSING
            return True

    def end_frame(self) -> None:
        """Release the frame claim. A finished session stays finished."""
        with self._lock:
            if self._state == SessionState.PROCESSING:
                self._state = SessionState.IDLE

    def complete(self, result: CaptureResult) -> bool:
        """Deliver the presentation's result.

        Args:
            result: Barcode or photo produced by the capture flow

        Returns:
            True if this call delivered the result, False if one was already sent
        """
        with self._lock:
            if self._state == SessionState.RESULT_SENT:
                logger.info(f"Capture produced a {result.kind.value} result, but result already sent")
                return False
            self._state = SessionState.RESULT_SENT
            self._result = result

        logger.info(f"Capture finished with {result.kind.value} result")
        if self.on_result is not None:
            self.on_result(result)
        return True

    def reset(self) -> None:
        """Start a new presentation."""
        with self._lock:
            self._state = SessionState.IDLE
            self._result = None
