"""Pydantic models for page capture profiles, decisions and results.

This module defines the data models used by the capture engine, including
render profiles, network filter decisions, extracted page metadata and the
results returned to API and CLI callers.
"""

import base64
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_COLORS = 8
MAX_FONTS = 5


class NetworkDecision(str, Enum):
    """Outcome of classifying an outgoing sub-resource request."""
    ABORT = "abort"
    CONTINUE = "continue"


class ProfileName(str, Enum):
    """Known capture profile names."""
    DESKTOP = "desktop"
    MOBILE = "mobile"
    BRAND = "brand"


class CaptureProfile(BaseModel):
    """How a page is rendered before capture. Immutable once resolved."""

    model_config = ConfigDict(frozen=True)

    name: ProfileName = Field(description="Profile this configuration was resolved to")
    viewport_width: int = Field(gt=0, description="CSS viewport width in pixels")
    viewport_height: int = Field(gt=0, description="CSS viewport height in pixels")
    device_scale_factor: float = Field(
        default=1, gt=0, description="Multiplier between CSS and output pixels"
    )
    is_mobile: bool = Field(default=False, description="Enable mobile emulation")
    has_touch: bool = Field(default=False, description="Enable touch events")
    user_agent: Optional[str] = Field(default=None, description="User-Agent override")
    full_page: bool = Field(
        default=False,
        description="Capture the whole scrollable document instead of the viewport",
    )

    @property
    def output_width(self) -> int:
        """Width of the encoded image in physical pixels."""
        return int(self.viewport_width * self.device_scale_factor)

    @property
    def output_height(self) -> int:
        """Height of the encoded image in physical pixels (viewport captures only)."""
        return int(self.viewport_height * self.device_scale_factor)

    def to_context_options(self) -> dict:
        """Convert to Playwright browser context options."""
        options = {
            'viewport': {'width': self.viewport_width, 'height': self.viewport_height},
            'device_scale_factor': self.device_scale_factor,
            'is_mobile': self.is_mobile,
            'has_touch': self.has_touch,
        }
        if self.user_agent:
            options['user_agent'] = self.user_agent
        return options


def _dedupe(values: List[str], limit: int) -> List[str]:
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
        if len(seen) >= limit:
            break
    return seen


class PageMetadata(BaseModel):
    """Styling and identity metadata harvested from a rendered page."""

    title: str = Field(default="", description="Resolved page title")
    description: str = Field(default="", description="Resolved page description")
    favicon: str = Field(default="", description="Absolute favicon URL")
    colors: List[str] = Field(
        default_factory=list,
        description=f"Distinct computed colors in discovery order (max {MAX_COLORS})",
    )
    fonts: List[str] = Field(
        default_factory=list,
        description=f"Distinct computed font families in discovery order (max {MAX_FONTS})",
    )

    @field_validator('colors')
    @classmethod
    def cap_colors(cls, v):
        return _dedupe(v, MAX_COLORS)

    @field_validator('fonts')
    @classmethod
    def cap_fonts(cls, v):
        return _dedupe(v, MAX_FONTS)


class ScreenshotResult(BaseModel):
    """Encoded screenshot produced by a single capture request."""

    url: str = Field(description="URL that was requested")
    final_url: Optional[str] = Field(default=None, description="URL after redirects")
    profile: CaptureProfile = Field(description="Profile the page was rendered with")
    image: bytes = Field(repr=False, description="PNG-encoded image bytes")
    content_type: str = Field(default="image/png", description="MIME type of image")

    def to_data_uri(self) -> str:
        """Return the image as a base64 data URI."""
        encoded = base64.b64encode(self.image).decode('ascii')
        return f"data:{self.content_type};base64,{encoded}"


class BrandSnapshot(BaseModel):
    """Screenshot plus page metadata, as returned by the brand snapshot variant."""

    url: str = Field(description="URL that was requested")
    screenshot: str = Field(description="PNG image as a base64 data URI")
    title: str = ""
    description: str = ""
    favicon: str = ""
    colors: List[str] = Field(default_factory=list)
    fonts: List[str] = Field(default_factory=list)

    @classmethod
    def from_capture(cls, result: ScreenshotResult, metadata: PageMetadata) -> "BrandSnapshot":
        """Combine a screenshot and its extracted metadata."""
        return cls(
            url=result.url,
            screenshot=result.to_data_uri(),
            **metadata.model_dump(),
        )
