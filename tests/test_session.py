"""Unit tests for the one-shot capture session."""

import threading

import pytest

from capture_geometry.session import CaptureResult, CaptureSession, ResultKind, SessionState


@pytest.mark.unit
class TestCaptureSession:
    def test_starts_idle(self):
        session = CaptureSession()

        assert session.state == SessionState.IDLE
        assert session.result is None
        assert session.has_sent_result is False

    def test_frame_claim_is_exclusive(self):
        session = CaptureSession()

        assert session.try_begin_frame() is True
        assert session.state == SessionState.PROCESSING
        assert session.try_begin_frame() is False

        session.end_frame()

        assert session.state == SessionState.IDLE
        assert session.try_begin_frame() is True

    def test_complete_once(self):
        received = []
        session = CaptureSession(on_result=received.append)

        assert session.complete(CaptureResult.barcode("5449000000996")) is True
        assert session.complete(CaptureResult.barcode("4006381333931")) is False

        assert session.state == SessionState.RESULT_SENT
        assert session.result == CaptureResult(kind=ResultKind.BARCODE, value="5449000000996")
        assert received == [CaptureResult.barcode("5449000000996")]

    def test_complete_while_processing(self):
        session = CaptureSession()
        session.try_begin_frame()

        assert session.complete(CaptureResult.photo(b"jpeg")) is True

        session.end_frame()

        assert session.state == SessionState.RESULT_SENT
        assert session.try_begin_frame() is False

    def test_reset_starts_new_presentation(self):
        session = CaptureSession()
        session.complete(CaptureResult.barcode("123"))

        session.reset()

        assert session.state == SessionState.IDLE
        assert session.result is None
        assert session.complete(CaptureResult.barcode("456")) is True

    def test_concurrent_completion_reports_once(self):
        received = []
        session = CaptureSession(on_result=received.append)
        n_threads = 16
        barrier = threading.Barrier(n_threads)
        outcomes = []
        outcomes_lock = threading.Lock()

        def finish(i: int) -> None:
            barrier.wait()
            delivered = session.complete(CaptureResult.barcode(str(i)))
            with outcomes_lock:
                outcomes.append(delivered)

        threads = [threading.Thread(target=finish, args=(i,)) for i in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count(True) == 1
        assert outcomes.count(False) == n_threads - 1
        assert len(received) == 1
        assert session.result == received[0]

    def test_concurrent_frame_claims(self):
        session = CaptureSession()
        n_threads = 16
        barrier = threading.Barrier(n_threads)
        claims = []
        claims_lock = threading.Lock()

        def claim() -> None:
            barrier.wait()
            claimed = session.try_begin_frame()
            with claims_lock:
                claims.append(claimed)

        threads = [threading.Thread(target=claim) for _ in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert claims.count(True) == 1
