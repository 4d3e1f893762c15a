"""Unit tests for the livefeed exception hierarchy."""

from livefeed.exceptions import (
    ConfigurationError,
    LiveFeedError,
    PollError,
    TransportError,
)


class TestLiveFeedError:
    def test_generates_correlation_id(self):
        first = LiveFeedError("a")
        second = LiveFeedError("b")

        assert first.correlation_id
        assert first.correlation_id != second.correlation_id

    def test_keeps_given_correlation_id(self):
        assert LiveFeedError("a", correlation_id="req-1").correlation_id == "req-1"


class TestTransportError:
    def test_carries_url_and_status(self):
        error = TransportError("HTTP 502", "http://jobs.test/events", status_code=502)

        assert str(error) == "HTTP 502"
        assert error.url == "http://jobs.test/events"
        assert error.status_code == 502

    def test_hierarchy(self):
        assert issubclass(PollError, TransportError)
        assert issubclass(TransportError, LiveFeedError)
        assert issubclass(ConfigurationError, LiveFeedError)
