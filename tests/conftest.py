"""Shared test fixtures and configuration for PageSnap tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from pagesnap.capture.config import CaptureSettings
from pagesnap.models.capture import CaptureProfile, ProfileName

from tests.helpers import FAKE_PNG, SAMPLE_RAW_METADATA


@pytest.fixture
def settings():
    """Capture settings with no settle delay."""
    return CaptureSettings(environment="test", settle_delay_ms=0, navigation_timeout_ms=5000)


@pytest.fixture
def desktop_profile():
    """Desktop capture profile."""
    return CaptureProfile(
        name=ProfileName.DESKTOP,
        viewport_width=1920,
        viewport_height=1080,
        device_scale_factor=3,
    )


@pytest.fixture
def mock_response():
    """Mock Playwright navigation response."""
    response = MagicMock()
    response.url = "https://example.com/"
    return response


@pytest.fixture
def mock_page(mock_response):
    """Mock Playwright page."""
    page = AsyncMock()
    page.set_default_timeout = MagicMock()
    page.set_default_navigation_timeout = MagicMock()
    page.goto.return_value = mock_response
    page.screenshot.return_value = FAKE_PNG
    page.evaluate.return_value = SAMPLE_RAW_METADATA
    return page


@pytest.fixture
def mock_context(mock_page):
    """Mock Playwright browser context."""
    context = AsyncMock()
    context.new_page.return_value = mock_page
    return context


@pytest.fixture
def mock_browser(mock_context):
    """Mock Playwright browser."""
    browser = AsyncMock()
    browser.new_context.return_value = mock_context
    browser.is_connected = MagicMock(return_value=True)
    return browser


@pytest.fixture
def mock_pool(mock_browser):
    """Mock browser pool handing out the mock browser."""
    pool = MagicMock()
    pool.acquire_browser = AsyncMock(return_value=mock_browser)
    pool.devices = None
    pool.is_running = True
    return pool


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
