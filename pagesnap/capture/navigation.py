"""Navigation, settle delay and image capture.

Navigation waits for DOM content loaded rather than network idle: the
above-the-fold visual state is usually complete long before ads, beacons and
long-polling connections go quiet. A fixed settle delay then lets layout and
late critical CSS/JS apply before the pixels are captured.
"""

import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from .errors import CaptureError, NavigationError
from ..models.capture import CaptureProfile

logger = logging.getLogger(__name__)

READY_STATE = "domcontentloaded"


async def navigate_and_settle(
    page: Page,
    url: str,
    navigation_timeout_ms: int,
    settle_delay_ms: int,
) -> Optional[str]:
    """Navigate to ``url`` and wait for the page to settle.

    Args:
        page: Open page with the network filter already attached
        url: Absolute URL to load
        navigation_timeout_ms: Hard limit for reaching DOM content loaded
        settle_delay_ms: Extra delay after DOM content loaded

    Returns:
        Final URL after redirects, if the navigation produced a response

    Raises:
        NavigationError: On timeout or network failure (never retried)
    """
    try:
        response = await page.goto(
            url,
            wait_until=READY_STATE,
            timeout=navigation_timeout_ms,
        )
    except PlaywrightTimeoutError as e:
        logger.warning(f"Navigation timed out after {navigation_timeout_ms}ms: {url}")
        raise NavigationError(url, f"Navigation timeout of {navigation_timeout_ms} ms exceeded") from e
    except PlaywrightError as e:
        logger.warning(f"Navigation failed for {url}: {e.message}")
        raise NavigationError(url, e.message) from e

    if settle_delay_ms > 0:
        await page.wait_for_timeout(settle_delay_ms)

    final_url = response.url if response else None
    logger.debug(f"Navigation settled: {url} -> {final_url}")
    return final_url


async def capture(page: Page, profile: CaptureProfile) -> bytes:
    """Take a lossless PNG screenshot of the viewport (or full page).

    Args:
        page: Settled page
        profile: Profile deciding viewport vs full-page capture

    Returns:
        PNG-encoded image bytes

    Raises:
        CaptureError: If the screenshot fails
    """
    try:
        return await page.screenshot(type="png", full_page=profile.full_page)
    except PlaywrightError as e:
        raise CaptureError(f"Screenshot failed: {e.message}") from e
