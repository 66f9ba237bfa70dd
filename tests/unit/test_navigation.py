"""Unit tests for navigation, settle delay and image capture."""

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pagesnap.capture.errors import CaptureError, NavigationError
from pagesnap.capture.navigation import capture, navigate_and_settle
from pagesnap.models.capture import CaptureProfile, ProfileName

from tests.helpers import FAKE_PNG


class TestNavigateAndSettle:
    """Tests for navigate_and_settle."""

    @pytest.mark.asyncio
    async def test_waits_for_dom_content_loaded(self, mock_page):
        final_url = await navigate_and_settle(mock_page, "https://example.com", 15000, 600)

        assert final_url == "https://example.com/"
        mock_page.goto.assert_awaited_once_with(
            "https://example.com",
            wait_until="domcontentloaded",
            timeout=15000,
        )
        mock_page.wait_for_timeout.assert_awaited_once_with(600)

    @pytest.mark.asyncio
    async def test_zero_settle_delay_skips_wait(self, mock_page):
        await navigate_and_settle(mock_page, "https://example.com", 15000, 0)

        mock_page.wait_for_timeout.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_response_returns_none(self, mock_page):
        mock_page.goto.return_value = None

        assert await navigate_and_settle(mock_page, "https://example.com", 15000, 0) is None

    @pytest.mark.asyncio
    async def test_timeout_raises_navigation_error(self, mock_page):
        mock_page.goto.side_effect = PlaywrightTimeoutError("Timeout 15000ms exceeded.")

        with pytest.raises(NavigationError, match="15000 ms") as exc_info:
            await navigate_and_settle(mock_page, "https://slow.example.com", 15000, 600)

        assert exc_info.value.url == "https://slow.example.com"
        mock_page.wait_for_timeout.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_network_failure_keeps_reason(self, mock_page):
        mock_page.goto.side_effect = PlaywrightError(
            "net::ERR_NAME_NOT_RESOLVED at https://unreachable.invalid/"
        )

        with pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED"):
            await navigate_and_settle(mock_page, "https://unreachable.invalid", 15000, 600)

    @pytest.mark.asyncio
    async def test_navigation_not_retried(self, mock_page):
        mock_page.goto.side_effect = PlaywrightError("net::ERR_CONNECTION_REFUSED")

        with pytest.raises(NavigationError):
            await navigate_and_settle(mock_page, "https://example.com", 15000, 600)

        assert mock_page.goto.await_count == 1


class TestCapture:
    """Tests for capture."""

    @pytest.mark.asyncio
    async def test_viewport_png(self, mock_page, desktop_profile):
        image = await capture(mock_page, desktop_profile)

        assert image == FAKE_PNG
        mock_page.screenshot.assert_awaited_once_with(type="png", full_page=False)

    @pytest.mark.asyncio
    async def test_full_page(self, mock_page):
        profile = CaptureProfile(
            name=ProfileName.DESKTOP,
            viewport_width=1920,
            viewport_height=1080,
            full_page=True,
        )

        await capture(mock_page, profile)

        mock_page.screenshot.assert_awaited_once_with(type="png", full_page=True)

    @pytest.mark.asyncio
    async def test_screenshot_failure(self, mock_page, desktop_profile):
        mock_page.screenshot.side_effect = PlaywrightError("Target closed")

        with pytest.raises(CaptureError, match="Target closed"):
            await capture(mock_page, desktop_profile)
