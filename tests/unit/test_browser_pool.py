"""Unit tests for the browser pool."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pagesnap.capture.browser_pool import BrowserPool
from pagesnap.capture.config import CaptureSettings


class TestBrowserPool:
    """Tests for BrowserPool class."""

    @pytest.fixture
    def mock_playwright(self):
        """Mock Playwright instance."""
        with patch('pagesnap.capture.browser_pool.async_playwright') as mock_pw:
            playwright_mock = AsyncMock()
            async_pw_instance = AsyncMock()
            async_pw_instance.start = AsyncMock(return_value=playwright_mock)
            mock_pw.return_value = async_pw_instance

            browser_mock = AsyncMock()
            browser_mock.is_connected = MagicMock(return_value=True)
            playwright_mock.chromium.launch.return_value = browser_mock
            playwright_mock.firefox.launch.return_value = browser_mock
            playwright_mock.webkit.launch.return_value = browser_mock
            playwright_mock.devices = {"iPhone 14 Pro Max": {"screen": {"width": 430, "height": 932}}}

            yield {
                'async_playwright': mock_pw,
                'playwright': playwright_mock,
                'browser': browser_mock,
            }

    @pytest.fixture
    def pool(self):
        return BrowserPool(CaptureSettings())

    def test_initial_state(self, pool):
        assert pool.browser is None
        assert pool.is_running is False
        assert pool.launch_count == 0
        assert pool.devices is None

    @pytest.mark.asyncio
    async def test_lazy_launch(self, pool, mock_playwright):
        browser = await pool.acquire_browser()

        assert browser is mock_playwright['browser']
        assert pool.is_running is True
        assert pool.launch_count == 1
        assert pool.devices == mock_playwright['playwright'].devices
        mock_playwright['playwright'].chromium.launch.assert_awaited_once_with(
            headless=True,
            args=["--no-sandbox", "--disable-setuid-sandbox"],
        )

    @pytest.mark.asyncio
    async def test_subsequent_calls_reuse_browser(self, pool, mock_playwright):
        first = await pool.acquire_browser()
        second = await pool.acquire_browser()

        assert first is second
        assert pool.launch_count == 1
        mock_playwright['browser'].close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_launch_once(self, pool, mock_playwright):
        gate = asyncio.Event()
        browser = mock_playwright['browser']

        async def slow_launch(**kwargs):
            await gate.wait()
            return browser

        mock_playwright['playwright'].chromium.launch.side_effect = slow_launch

        tasks = [asyncio.create_task(pool.acquire_browser()) for _ in range(5)]
        await asyncio.sleep(0)
        gate.set()
        results = await asyncio.gather(*tasks)

        assert all(result is browser for result in results)
        assert pool.launch_count == 1
        mock_playwright['async_playwright'].assert_called_once()
        mock_playwright['playwright'].chromium.launch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_launch_surfaces_and_allows_retry(self, pool, mock_playwright):
        browser = mock_playwright['browser']
        mock_playwright['playwright'].chromium.launch.side_effect = [
            RuntimeError("Executable doesn't exist"),
            browser,
        ]

        with pytest.raises(RuntimeError, match="Executable doesn't exist"):
            await pool.acquire_browser()

        assert pool.browser is None
        mock_playwright['playwright'].stop.assert_awaited_once()

        assert await pool.acquire_browser() is browser
        assert pool.launch_count == 2

    @pytest.mark.asyncio
    async def test_concurrent_waiters_all_see_failure(self, pool, mock_playwright):
        mock_playwright['playwright'].chromium.launch.side_effect = RuntimeError("boom")

        results = await asyncio.gather(
            pool.acquire_browser(),
            pool.acquire_browser(),
            return_exceptions=True,
        )

        assert all(isinstance(r, RuntimeError) for r in results)
        assert pool.launch_count == 1
        assert pool._launch_task is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("engine", ["chromium", "firefox", "webkit"])
    async def test_engine_selection(self, mock_playwright, engine):
        pool = BrowserPool(CaptureSettings(engine=engine))

        await pool.acquire_browser()

        getattr(mock_playwright['playwright'], engine).launch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shutdown(self, pool, mock_playwright):
        await pool.acquire_browser()

        await pool.shutdown()

        mock_playwright['browser'].close.assert_awaited_once()
        mock_playwright['playwright'].stop.assert_awaited_once()
        assert pool.browser is None
        assert pool.is_running is False

    @pytest.mark.asyncio
    async def test_shutdown_before_launch(self, pool):
        await pool.shutdown()
        assert pool.browser is None
