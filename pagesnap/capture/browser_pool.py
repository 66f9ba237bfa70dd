"""Shared browser process for all capture requests.

This module provides the BrowserPool class that owns a single long-lived
Playwright browser. The browser is launched lazily by the first caller;
concurrent callers await the same in-flight launch, and the handle is kept
for the lifetime of the service process.
"""

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

from playwright.async_api import Browser, Playwright, async_playwright

from .config import BrowserEngineType, CaptureSettings, get_settings

logger = logging.getLogger(__name__)


class BrowserPool:
    """Owns the process-wide browser handle."""

    def __init__(self, settings: Optional[CaptureSettings] = None):
        """Initialize browser pool.

        Args:
            settings: Capture settings (uses global settings if None)
        """
        self.settings = settings or get_settings()
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self._launch_task: Optional[asyncio.Future] = None
        self._launch_count = 0

    async def acquire_browser(self) -> Browser:
        """Return the shared browser, launching it on first use.

        Safe under concurrent calls: only one launch is ever in flight. A
        failed launch is reported to every waiter and the next call starts a
        fresh attempt.

        Returns:
            Running Playwright browser

        Raises:
            Exception: Whatever the browser launch raised
        """
        if self.browser is not None:
            return self.browser

        if self._launch_task is None:
            self._launch_task = asyncio.ensure_future(self._launch())

        task = self._launch_task
        try:
            # Shielded so one cancelled waiter does not abort the launch for others
            return await asyncio.shield(task)
        except Exception:
            if self._launch_task is task:
                self._launch_task = None
            raise

    async def _launch(self) -> Browser:
        """Start Playwright and launch the configured browser engine."""
        self._launch_count += 1
        logger.info(
            f"Launching browser (engine={self.settings.engine}, "
            f"headless={self.settings.headless}, attempt={self._launch_count})"
        )

        playwright = await async_playwright().start()
        try:
            if self.settings.engine == BrowserEngineType.FIREFOX:
                browser_type = playwright.firefox
            elif self.settings.engine == BrowserEngineType.WEBKIT:
                browser_type = playwright.webkit
            else:
                browser_type = playwright.chromium

            browser = await browser_type.launch(**self.settings.to_launch_options())

        except Exception as e:
            logger.error(f"Failed to launch browser: {e}")
            try:
                await playwright.stop()
            except Exception as stop_error:
                logger.warning(f"Error stopping Playwright after failed launch: {stop_error}")
            raise

        self.playwright = playwright
        self.browser = browser
        logger.info("Browser launched successfully")
        return browser

    async def shutdown(self) -> None:
        """Close the browser and stop Playwright.

        Only for process exit; capture requests never call this.
        """
        logger.info("Shutting down browser pool")

        if self._launch_task is not None and not self._launch_task.done():
            self._launch_task.cancel()
        self._launch_task = None

        try:
            if self.browser:
                await self.browser.close()
        except Exception as e:
            logger.error(f"Error closing browser: {e}")
        finally:
            self.browser = None

        try:
            if self.playwright:
                await self.playwright.stop()
        except Exception as e:
            logger.error(f"Error stopping Playwright: {e}")
        finally:
            self.playwright = None

    @property
    def devices(self) -> Optional[Mapping[str, Dict[str, Any]]]:
        """Built-in device descriptors, available once the browser is launched."""
        if self.playwright is None:
            return None
        return self.playwright.devices

    @property
    def is_running(self) -> bool:
        """Check if the browser is launched and connected."""
        if self.browser is None:
            return False
        try:
            return self.browser.is_connected()
        except Exception:
            return False

    @property
    def launch_count(self) -> int:
        """Number of launch attempts made so far."""
        return self._launch_count

    def __repr__(self) -> str:
        return (
            f"BrowserPool(engine={self.settings.engine}, "
            f"running={self.is_running}, launches={self._launch_count})"
        )


# Global pool instance
_browser_pool: Optional[BrowserPool] = None


def get_browser_pool() -> BrowserPool:
    """Get the process-wide browser pool."""
    global _browser_pool
    if _browser_pool is None:
        _browser_pool = BrowserPool()
    return _browser_pool


async def shutdown_browser_pool() -> None:
    """Shut down the process-wide pool if one was ever created."""
    global _browser_pool
    if _browser_pool is not None:
        await _browser_pool.shutdown()
        _browser_pool = None
