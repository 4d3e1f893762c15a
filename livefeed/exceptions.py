"""livefeed exception hierarchy.

Base exceptions for the live-update layers with correlation ID support.

Transport errors never escape the channel or orchestrator: they are
converted into reconnects and polling fallback.  They exist so that
transports, poll functions and logs speak a common vocabulary.

Usage:
    from livefeed.exceptions import PollError, TransportError

    try:
        await poll()
    except PollError as e:
        logger.warning("Poll failed", extra={"correlation_id": e.correlation_id})
"""

import uuid


class LiveFeedError(Exception):
    """Base exception for all livefeed errors.

    Carries a correlation_id for tracing errors across layers.
    """

    def __init__(self, message: str, *, correlation_id: str | None = None):
        self.correlation_id = correlation_id or str(uuid.uuid4())
        super().__init__(message)


class TransportError(LiveFeedError):
    """Errors from a push or poll transport.

    Raised inside transports when a connection cannot be established
    or is dropped, with the target URL and optional HTTP status.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(message, correlation_id=correlation_id)


class PollError(TransportError):
    """Errors from a single poll attempt."""

    pass


class ConfigurationError(LiveFeedError):
    """Errors from application configuration."""

    pass
