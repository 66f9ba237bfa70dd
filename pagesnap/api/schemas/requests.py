"""API request schemas for the PageSnap REST API.

Bodies may arrive as JSON or as form-encoded fields; both are validated
through these models.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator


class SnapshotRequest(BaseModel):
    """Request schema for a brand snapshot."""

    url: Optional[str] = Field(
        default=None,
        description="Page to capture; a missing scheme defaults to https://",
        examples=["example.com", "https://example.com/pricing"],
    )


class ScreenshotRequest(SnapshotRequest):
    """Request schema for a plain screenshot."""

    format: Optional[str] = Field(
        default=None,
        description="Presentation label; portrait, vertical, phone or mobile select the mobile profile",
        examples=["vertical", "desktop"],
    )

    mobile: Optional[Union[bool, str]] = Field(
        default=None,
        description='Mobile flag; "true", "1" or "yes" select the mobile profile',
        examples=["true"],
    )

    full_page: bool = Field(
        default=False,
        description="Capture the full scrollable document instead of the viewport",
    )

    @field_validator('mobile', mode='before')
    @classmethod
    def coerce_mobile(cls, v):
        """Accept numeric flags such as 1 by treating them as strings."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v
