"""Main capture engine that coordinates all capture components.

This module provides the CaptureEngine class that resolves a render profile,
opens a page session from the shared browser pool, navigates and settles the
page, captures the screenshot and, for brand snapshots, extracts metadata
before the session is closed.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Callable, Dict, Mapping, Optional, Tuple, Union

from .browser_pool import BrowserPool, get_browser_pool
from .config import CaptureSettings, get_settings
from .errors import InvalidInputError
from .metadata import extract_metadata
from .navigation import capture, navigate_and_settle
from .network_filter import NetworkFilter
from .page_session import PageSession
from .profiles import brand_profile, resolve_profile
from ..models.capture import BrandSnapshot, CaptureProfile, PageMetadata, ScreenshotResult

logger = logging.getLogger(__name__)

ProfileFactory = Callable[[Optional[Mapping[str, Any]]], CaptureProfile]


class CaptureEngine:
    """Runs screenshot and brand snapshot captures against the shared browser."""

    def __init__(
        self,
        settings: Optional[CaptureSettings] = None,
        pool: Optional[BrowserPool] = None,
    ):
        """Initialize capture engine.

        Args:
            settings: Capture settings (uses global settings if None)
            pool: Browser pool (uses the process-wide pool if None)
        """
        self.settings = settings or get_settings()
        self.pool = pool or get_browser_pool()

        limit = self.settings.max_concurrent_sessions
        self._semaphore: Optional[asyncio.Semaphore] = asyncio.Semaphore(limit) if limit else None

        self.stats = {
            'captures_attempted': 0,
            'captures_successful': 0,
            'captures_failed': 0,
            'sessions_opened': 0,
            'sessions_closed': 0,
        }

    async def screenshot(
        self,
        url: str,
        format: Optional[str] = None,
        mobile: Union[str, bool, None] = None,
        full_page: bool = False,
    ) -> ScreenshotResult:
        """Capture a desktop or mobile screenshot.

        Args:
            url: Normalized absolute URL
            format: Presentation label (portrait, vertical, phone, mobile select mobile)
            mobile: Mobile flag ("true", "1", "yes")
            full_page: Capture the full scrollable document

        Returns:
            ScreenshotResult with PNG bytes
        """
        def profile_for(devices):
            return resolve_profile(
                self.settings,
                format=format,
                mobile=mobile,
                full_page=full_page,
                device_descriptors=devices,
            )

        result, _ = await self._run(url, profile_for, with_metadata=False)
        return result

    async def brand_snapshot(self, url: str) -> BrandSnapshot:
        """Capture a screenshot plus page metadata with the brand profile.

        Args:
            url: Normalized absolute URL

        Returns:
            BrandSnapshot with a base64 screenshot and extracted metadata
        """
        result, metadata = await self._run(
            url, lambda devices: brand_profile(self.settings), with_metadata=True
        )
        return BrandSnapshot.from_capture(result, metadata)

    async def _run(
        self,
        url: str,
        profile_for: ProfileFactory,
        with_metadata: bool,
    ) -> Tuple[ScreenshotResult, Optional[PageMetadata]]:
        """Perform one capture inside its own page session."""
        if not url:
            raise InvalidInputError("No URL provided.")

        self.stats['captures_attempted'] += 1
        start_time = time.monotonic()

        try:
            async with self._admission():
                browser = await self.pool.acquire_browser()
                profile = profile_for(self.pool.devices)
                logger.info(f"Capturing {url} (profile={profile.name.value})")

                session = PageSession(
                    browser,
                    profile,
                    timeout_ms=self.settings.navigation_timeout_ms,
                    network_filter=NetworkFilter(
                        self.settings.blocked_resource_types,
                        self.settings.tracking_patterns,
                    ),
                )
                self.stats['sessions_opened'] += 1
                try:
                    async with session as page:
                        final_url = await navigate_and_settle(
                            page,
                            url,
                            self.settings.navigation_timeout_ms,
                            self.settings.settle_delay_ms,
                        )
                        image = await capture(page, profile)
                        metadata = await extract_metadata(page) if with_metadata else None
                finally:
                    self.stats['sessions_closed'] += 1

        except Exception as e:
            self.stats['captures_failed'] += 1
            duration_ms = (time.monotonic() - start_time) * 1000
            logger.error(f"Capture failed for {url} after {duration_ms:.0f}ms: {e}")
            raise

        self.stats['captures_successful'] += 1
        duration_ms = (time.monotonic() - start_time) * 1000
        logger.info(f"Capture completed for {url} in {duration_ms:.0f}ms ({len(image)} bytes)")

        result = ScreenshotResult(url=url, final_url=final_url, profile=profile, image=image)
        return result, metadata

    @asynccontextmanager
    async def _admission(self) -> AsyncGenerator[None, None]:
        """Bound concurrent sessions when a limit is configured."""
        if self._semaphore is None:
            yield
            return
        async with self._semaphore:
            yield

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics.

        Returns:
            Counters plus browser state
        """
        stats = dict(self.stats)
        stats['active_sessions'] = stats['sessions_opened'] - stats['sessions_closed']
        stats['browser_running'] = self.pool.is_running
        return stats

    def __repr__(self) -> str:
        return (
            f"CaptureEngine(attempted={self.stats['captures_attempted']}, "
            f"failed={self.stats['captures_failed']})"
        )


# Global engine instance
_capture_engine: Optional[CaptureEngine] = None


def get_capture_engine() -> CaptureEngine:
    """Get the process-wide capture engine."""
    global _capture_engine
    if _capture_engine is None:
        _capture_engine = CaptureEngine()
    return _capture_engine
