"""Capture profile resolution.

Maps a request's declared intent (desktop, mobile/vertical, brand snapshot)
to a concrete CaptureProfile. Resolution is pure: the same inputs always
produce the same profile, and every input maps to exactly one profile.
"""

import logging
from typing import Any, Mapping, Optional, Union

from .config import BrowserEngineType, CaptureSettings
from ..models.capture import CaptureProfile, ProfileName

logger = logging.getLogger(__name__)

MOBILE_FORMATS = frozenset({'portrait', 'vertical', 'phone', 'mobile'})
TRUTHY_FLAGS = frozenset({'true', '1', 'yes'})


def _normalize_token(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value).strip().lower()


def wants_mobile(format: Optional[str] = None, mobile: Union[str, bool, None] = None) -> bool:
    """Check whether request fields carry any mobile signal.

    Args:
        format: Presentation label (portrait, vertical, phone, mobile, ...)
        mobile: Explicit mobile flag ("true", "1", "yes" or a bool)

    Returns:
        True if the mobile profile should be used
    """
    return (
        _normalize_token(format) in MOBILE_FORMATS
        or _normalize_token(mobile) in TRUTHY_FLAGS
    )


def supports_mobile_emulation(settings: CaptureSettings) -> bool:
    """Firefox rejects the ``is_mobile`` context option."""
    return settings.engine != BrowserEngineType.FIREFOX


def desktop_profile(settings: CaptureSettings, full_page: bool = False) -> CaptureProfile:
    """Build the desktop profile from settings."""
    return CaptureProfile(
        name=ProfileName.DESKTOP,
        viewport_width=settings.desktop_width,
        viewport_height=settings.desktop_height,
        device_scale_factor=settings.desktop_scale,
        full_page=full_page,
    )


def mobile_profile(
    settings: CaptureSettings,
    device_descriptors: Optional[Mapping[str, Mapping[str, Any]]] = None,
    full_page: bool = False,
) -> CaptureProfile:
    """Build the mobile profile.

    Prefers the configured built-in phone descriptor when one is available,
    falling back to explicit viewport and user-agent settings otherwise.

    The viewport is taken from the descriptor's ``screen`` size; its
    ``viewport`` entry excludes browser chrome. Without a screen size the
    configured mobile dimensions apply.
    """
    is_mobile = supports_mobile_emulation(settings)

    descriptor = None
    if device_descriptors and settings.mobile_device:
        descriptor = device_descriptors.get(settings.mobile_device)

    if descriptor:
        screen = descriptor.get('screen') or {}
        return CaptureProfile(
            name=ProfileName.MOBILE,
            viewport_width=screen.get('width', settings.mobile_width),
            viewport_height=screen.get('height', settings.mobile_height),
            device_scale_factor=descriptor.get('device_scale_factor', settings.mobile_scale),
            is_mobile=is_mobile,
            has_touch=True,
            user_agent=descriptor.get('user_agent') or settings.mobile_user_agent,
            full_page=full_page,
        )

    logger.debug(f"Device descriptor {settings.mobile_device!r} unavailable, using explicit mobile viewport")
    return CaptureProfile(
        name=ProfileName.MOBILE,
        viewport_width=settings.mobile_width,
        viewport_height=settings.mobile_height,
        device_scale_factor=settings.mobile_scale,
        is_mobile=is_mobile,
        has_touch=True,
        user_agent=settings.mobile_user_agent,
        full_page=full_page,
    )


def brand_profile(settings: CaptureSettings) -> CaptureProfile:
    """Build the fixed brand snapshot profile."""
    return CaptureProfile(
        name=ProfileName.BRAND,
        viewport_width=settings.brand_width,
        viewport_height=settings.brand_height,
        device_scale_factor=settings.brand_scale,
    )


def resolve_profile(
    settings: CaptureSettings,
    format: Optional[str] = None,
    mobile: Union[str, bool, None] = None,
    full_page: bool = False,
    device_descriptors: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> CaptureProfile:
    """Resolve the screenshot profile for a request.

    Any mobile signal selects the mobile profile; everything else is desktop.

    Args:
        settings: Capture settings holding profile dimensions
        format: Presentation label from the request
        mobile: Mobile flag from the request
        full_page: Capture the full document height
        device_descriptors: Built-in device descriptors (e.g. playwright.devices)

    Returns:
        Immutable CaptureProfile
    """
    if wants_mobile(format, mobile):
        return mobile_profile(settings, device_descriptors, full_page=full_page)
    return desktop_profile(settings, full_page=full_page)
