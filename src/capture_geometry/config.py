"""Configuration for capture geometry.

Constants are global defaults. Runtime settings are loaded from environment
variables (prefix ``CAPTURE_GEOMETRY_``) or a local ``.env`` file.
"""

from functools import lru_cache
from typing import Final, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# Containment Defaults
# =============================================================================

# Fraction of a barcode's area that must fall inside the scan area.
DEFAULT_OVERLAP_THRESHOLD: Final[float] = 0.5

# Slack on every edge for strict containment in normalized space.
CONTAINMENT_TOLERANCE: Final[float] = 1e-9

# Vision reports bounding boxes with a bottom-left origin.
DEFAULT_VISION_ORIGIN: Final[str] = "bottom_left"


# =============================================================================
# Frame Buffers
# =============================================================================

# Pixel format assumed when the caller sends an unrecognised name.
DEFAULT_PIXEL_FORMAT: Final[str] = "bgra8888"


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CAPTURE_GEOMETRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    overlap_threshold: float = Field(default=DEFAULT_OVERLAP_THRESHOLD, ge=0.0, le=1.0)
    vision_origin: Literal["top_left", "bottom_left"] = DEFAULT_VISION_ORIGIN
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
