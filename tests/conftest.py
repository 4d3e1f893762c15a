"""Shared test fixtures for livefeed.

Provides the simulated clock, the recording push transport and safe
settings used across the unit tests.
"""

import pytest

from livefeed.settings import Settings, get_settings
from tests.helpers.clock import ManualScheduler
from tests.mocks import FakeTransport

# =============================================================================
# SETTINGS
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Provide test settings with safe defaults."""
    return Settings(
        environment="testing",
        base_url="http://jobs.test",
        transport="sse",
        retry_delay=0.5,
        poll_interval=1.0,
    )


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Keep get_settings() from leaking environment between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# TIMERS AND TRANSPORT
# =============================================================================


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Simulated clock; advance it explicitly."""
    return ManualScheduler()


@pytest.fixture
def transport() -> FakeTransport:
    """Recording push transport."""
    return FakeTransport()
