"""Pytest configuration and fixtures for capture_geometry tests."""

import pytest

from capture_geometry.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from cached settings and the caller's environment."""
    for name in ("CAPTURE_GEOMETRY_OVERLAP_THRESHOLD", "CAPTURE_GEOMETRY_VISION_ORIGIN", "CAPTURE_GEOMETRY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
