"""API response schemas for the PageSnap REST API."""

from datetime import datetime
from typing import Dict, List, Literal

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    error: str = Field(..., description="Human-readable failure reason")

    class Config:
        """Pydantic configuration with examples for OpenAPI documentation."""
        json_schema_extra = {
            "example": {"error": "No URL provided."}
        }


class BrandSnapshotResponse(BaseModel):
    """Screenshot plus extracted brand metadata."""

    url: str = Field(..., description="Normalized URL that was captured")
    screenshot: str = Field(..., description="PNG image as a data:image/png;base64 URI")
    title: str = Field(default="", description="Page title")
    description: str = Field(default="", description="Page description")
    favicon: str = Field(default="", description="Absolute favicon URL")
    colors: List[str] = Field(default_factory=list, description="Up to 8 distinct computed colors")
    fonts: List[str] = Field(default_factory=list, description="Up to 5 distinct font families")

    class Config:
        """Pydantic configuration with examples for OpenAPI documentation."""
        json_schema_extra = {
            "example": {
                "url": "https://example.com",
                "screenshot": "data:image/png;base64,iVBORw0KGgo...",
                "title": "Example Domain",
                "description": "",
                "favicon": "",
                "colors": ["rgb(240, 240, 242)", "rgb(0, 0, 0)", "rgb(56, 72, 143)"],
                "fonts": ["-apple-system, system-ui, sans-serif"],
            }
        }


class HealthResponse(BaseModel):
    """Service health status."""

    status: Literal['healthy', 'degraded', 'unhealthy'] = Field(..., description="Overall status")
    version: str = Field(..., description="Service version")
    timestamp: datetime = Field(..., description="Time of the check")
    services: Dict[str, str] = Field(default_factory=dict, description="Per-component status")
    uptime_seconds: float = Field(..., description="Seconds since process start")
