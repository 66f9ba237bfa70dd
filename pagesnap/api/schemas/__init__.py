"""API schemas for the PageSnap REST API.

This module exports all Pydantic models used for API request/response validation.
"""

# Request schemas
from .requests import (
    ScreenshotRequest,
    SnapshotRequest,
)

# Response schemas
from .responses import (
    BrandSnapshotResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    # Request schemas
    "ScreenshotRequest",
    "SnapshotRequest",

    # Response schemas
    "BrandSnapshotResponse",
    "ErrorResponse",
    "HealthResponse",
]
