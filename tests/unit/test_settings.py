"""Unit tests for Settings and get_settings()."""

import pytest
from pydantic import ValidationError

from livefeed.settings import Settings, get_settings


class TestDefaults:
    def test_timing_defaults(self):
        settings = Settings()

        assert settings.retry_delay == 1.0
        assert settings.poll_interval == 10.0
        assert settings.transport == "sse"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("LIVEFEED_POLL_INTERVAL", "2.5")
        monkeypatch.setenv("LIVEFEED_TRANSPORT", "none")

        settings = Settings()

        assert settings.poll_interval == 2.5
        assert settings.transport == "none"


class TestValidation:
    def test_negative_retry_delay_rejected(self):
        with pytest.raises(ValidationError):
            Settings(retry_delay=-1)

    def test_zero_retry_delay_allowed(self):
        assert Settings(retry_delay=0).retry_delay == 0

    def test_zero_poll_interval_rejected(self):
        with pytest.raises(ValidationError):
            Settings(poll_interval=0)

    def test_unknown_transport_rejected(self):
        with pytest.raises(ValidationError):
            Settings(transport="carrier-pigeon")


class TestResolveUrl:
    def test_relative_path(self):
        settings = Settings(base_url="http://jobs.test/api/")

        assert settings.resolve_url("/jobs/42/events") == "http://jobs.test/api/jobs/42/events"

    def test_absolute_url_unchanged(self):
        settings = Settings(base_url="http://jobs.test")

        assert settings.resolve_url("ws://other.test/ws") == "ws://other.test/ws"


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("LIVEFEED_RETRY_DELAY", "0.25")
        get_settings.cache_clear()

        assert get_settings().retry_delay == 0.25
