"""Browser capture engine for PageSnap.

This module renders web pages to PNG using Playwright and, for brand
snapshots, extracts page metadata.

Main Components:
- Browser Pool: one lazily launched, long-lived browser process
- Page Session: isolated context per request, always closed
- Network Filter: aborts fonts, media and tracking requests
- Profiles: desktop, mobile and brand render profiles
- Navigation: DOM-ready navigation, settle delay and screenshot
- Metadata: title, description, favicon, colors and fonts
- Capture Engine: coordination of the above

Usage:
    from pagesnap.capture import CaptureEngine

    engine = CaptureEngine()
    result = await engine.screenshot("https://example.com", format="vertical")
"""

__all__ = [
    # Main components
    "CaptureEngine",
    "get_capture_engine",
    "BrowserPool",
    "get_browser_pool",
    "PageSession",
    "with_page_session",
    "NetworkFilter",
    "classify_request",

    # Configuration
    "CaptureSettings",
    "CaptureConfigManager",
    "get_config",
    "get_settings",

    # Operations
    "resolve_profile",
    "brand_profile",
    "wants_mobile",
    "navigate_and_settle",
    "capture",
    "extract_metadata",

    # Errors
    "PageSnapError",
    "InvalidInputError",
    "NavigationError",
    "CaptureError",
]

from .browser_pool import BrowserPool, get_browser_pool
from .config import CaptureConfigManager, CaptureSettings, get_config, get_settings
from .engine import CaptureEngine, get_capture_engine
from .errors import CaptureError, InvalidInputError, NavigationError, PageSnapError
from .metadata import extract_metadata
from .navigation import capture, navigate_and_settle
from .network_filter import NetworkFilter, classify_request
from .page_session import PageSession, with_page_session
from .profiles import brand_profile, resolve_profile, wants_mobile
