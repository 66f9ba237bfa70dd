"""Data models for PageSnap."""

from .capture import (
    MAX_COLORS,
    MAX_FONTS,
    BrandSnapshot,
    CaptureProfile,
    NetworkDecision,
    PageMetadata,
    ProfileName,
    ScreenshotResult,
)

__all__ = [
    "MAX_COLORS",
    "MAX_FONTS",
    "BrandSnapshot",
    "CaptureProfile",
    "NetworkDecision",
    "PageMetadata",
    "ProfileName",
    "ScreenshotResult",
]
