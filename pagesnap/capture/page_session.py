"""Page session lifecycle for a single capture request.

This module provides the PageSession class that opens an isolated browser
context and page configured from a CaptureProfile, attaches the network
filter before any navigation, and closes both on every exit path.
"""

import logging
from typing import Awaitable, Callable, Optional, TypeVar

from playwright.async_api import Browser, BrowserContext, Page

from .network_filter import NetworkFilter
from ..models.capture import CaptureProfile

logger = logging.getLogger(__name__)

T = TypeVar('T')


class PageSession:
    """One isolated browsing context, used for exactly one request."""

    def __init__(
        self,
        browser: Browser,
        profile: CaptureProfile,
        timeout_ms: int = 15000,
        network_filter: Optional[NetworkFilter] = None,
    ):
        """Initialize page session.

        Args:
            browser: Shared browser handle
            profile: Render profile applied to the context
            timeout_ms: Default action and navigation timeout
            network_filter: Filter attached before navigation (default rules if None)
        """
        self.browser = browser
        self.profile = profile
        self.timeout_ms = timeout_ms
        self.network_filter = network_filter or NetworkFilter()
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self.closed = False

    async def open(self) -> Page:
        """Create the context and page and attach the network filter.

        Returns:
            Page ready for navigation
        """
        self.context = await self.browser.new_context(**self.profile.to_context_options())

        # Route on the context so the page's very first request is already filtered
        await self.network_filter.install(self.context)

        self.page = await self.context.new_page()
        self.page.set_default_timeout(self.timeout_ms)
        self.page.set_default_navigation_timeout(self.timeout_ms)

        logger.debug(f"Page session opened (profile={self.profile.name.value})")
        return self.page

    async def close(self) -> None:
        """Close page and context. Failures are logged, never raised."""
        if self.closed:
            return
        self.closed = True

        if self.page is not None:
            try:
                await self.page.close()
            except Exception as e:
                logger.warning(f"Error closing page: {e}")

        if self.context is not None:
            try:
                await self.context.close()
            except Exception as e:
                logger.warning(f"Error closing browser context: {e}")

        logger.debug(f"Page session closed (network={self.network_filter.get_stats()})")

    async def __aenter__(self) -> Page:
        try:
            return await self.open()
        except BaseException:
            await self.close()
            raise

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False

    def __repr__(self) -> str:
        return (
            f"PageSession(profile={self.profile.name.value}, "
            f"timeout={self.timeout_ms}ms, closed={self.closed})"
        )


async def with_page_session(
    browser: Browser,
    profile: CaptureProfile,
    body: Callable[[Page], Awaitable[T]],
    timeout_ms: int = 15000,
    network_filter: Optional[NetworkFilter] = None,
) -> T:
    """Run ``body`` against a fresh page and always close it afterwards.

    Args:
        browser: Shared browser handle
        profile: Render profile
        body: Coroutine function receiving the open page
        timeout_ms: Default timeout for the page
        network_filter: Network filter to attach

    Returns:
        Whatever ``body`` returned
    """
    async with PageSession(browser, profile, timeout_ms, network_filter) as page:
        return await body(page)
