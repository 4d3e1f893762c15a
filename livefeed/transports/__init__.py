"""Push transports for the live-update channel.

Select one with ``build_transport_factory(settings)``; a ``None`` factory
means push delivery is unavailable and consumers fall back to polling.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from livefeed.exceptions import ConfigurationError
from livefeed.transports.base import (
    MessageEvent,
    PushConnection,
    StreamingConnection,
    TransportFactory,
)
from livefeed.transports.sse import SSEConnection
from livefeed.transports.websocket import WebSocketConnection

if TYPE_CHECKING:
    from livefeed.settings import Settings


def build_transport_factory(settings: Settings) -> TransportFactory | None:
    """Map ``settings.transport`` to a connection factory.

    Returns:
        A ``url -> PushConnection`` callable, or None for ``"none"``.

    Raises:
        ConfigurationError: For an unknown transport name.
    """
    if settings.transport == "none":
        return None
    if settings.transport == "sse":
        return partial(SSEConnection, connect_timeout=settings.connect_timeout)
    if settings.transport == "websocket":
        return partial(WebSocketConnection, open_timeout=settings.connect_timeout)
    raise ConfigurationError(f"Unknown push transport: {settings.transport!r}")


__all__ = [
    "MessageEvent",
    "PushConnection",
    "SSEConnection",
    "StreamingConnection",
    "TransportFactory",
    "WebSocketConnection",
    "build_transport_factory",
]
