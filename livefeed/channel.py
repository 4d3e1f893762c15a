"""Reconnecting push channel.

Owns one logical push subscription backed by a sequence of connection
instances.  When an instance errors it is released and, after a fixed
delay, replaced by a new one.  The reconnect is guarded by the
``closed`` flag at fire time, so a ``close()`` that races a pending
reconnect always wins.

State machine::

    CONNECTING --open--> OPEN --error--> ERRORING --retry_delay--> CONNECTING
         \\                 \\               \\
          `-----------------`---------------`--close()--> CLOSED (terminal)

An error while CONNECTING (e.g. the handshake is refused) also moves to
ERRORING.  The delay is constant: there is no attempt cap and no
jitter.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from livefeed.timers import OneShotTimer, default_scheduler
from livefeed.transports.sse import SSEConnection

if TYPE_CHECKING:
    from collections.abc import Callable

    from livefeed.timers import Scheduler
    from livefeed.transports.base import MessageEvent, PushConnection, TransportFactory

logger = logging.getLogger(__name__)

DEFAULT_RETRY_DELAY = 1.0


class ChannelState(StrEnum):
    """Lifecycle of a reconnecting channel."""

    CONNECTING = "connecting"
    OPEN = "open"
    ERRORING = "erroring"
    CLOSED = "closed"


class ReconnectingChannel:
    """Push subscription that reopens itself after failures.

    Usage::

        channel = ReconnectingChannel(
            "http://api.local/jobs/42/events",
            on_message=handle,
            retry_delay=0.5,
            on_open=lambda: print("live"),
            on_error=lambda: print("reconnecting..."),
        )
        ...
        channel.close()

    The first connection attempt starts during construction.  Every
    message from any live connection instance reaches ``on_message``;
    nothing is deduplicated across reconnects.

    Args:
        url: Push endpoint.
        on_message: Called once per received message.
        retry_delay: Seconds between an error and the next attempt.
        on_open: Called on each successful (re)connect.
        on_error: Called on each connection error.
        transport_factory: Builds one connection instance for a URL.
        scheduler: Timer source; defaults to the running event loop.
    """

    def __init__(
        self,
        url: str,
        on_message: Callable[[MessageEvent], Any],
        retry_delay: float = DEFAULT_RETRY_DELAY,
        on_open: Callable[[], Any] | None = None,
        on_error: Callable[[], Any] | None = None,
        *,
        transport_factory: TransportFactory = SSEConnection,
        scheduler: Scheduler | None = None,
    ) -> None:
        if retry_delay < 0:
            raise ValueError(f"retry_delay must be >= 0, got {retry_delay}")
        self._url = url
        self._on_message = on_message
        self._retry_delay = retry_delay
        self._on_open = on_open
        self._on_error = on_error
        self._factory = transport_factory
        self._retry = OneShotTimer(scheduler or default_scheduler())
        self._connection: PushConnection | None = None
        self._state = ChannelState.CONNECTING
        self._closed = False
        self._attempts = 0
        self._connect()

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def attempts(self) -> int:
        """Connection attempts made so far, including the first."""
        return self._attempts

    @property
    def retry_pending(self) -> bool:
        return self._retry.pending

    @property
    def connection(self) -> PushConnection | None:
        """The current connection instance.

        Replaced on every reconnect; do not hold on to it across an error.
        """
        return self._connection

    def close(self) -> None:
        """Permanently stop the channel. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._state = ChannelState.CLOSED
        self._retry.cancel()
        if self._connection is not None:
            self._release(self._connection)
        logger.info("Channel %s closed after %d attempt(s)", self._url, self._attempts)

    def _connect(self) -> None:
        if self._closed:
            return
        self._state = ChannelState.CONNECTING
        self._attempts += 1
        logger.debug("Channel %s connecting (attempt %d)", self._url, self._attempts)
        try:
            connection = self._factory(self._url)
        except Exception as exc:
            logger.warning("Channel %s could not open a connection: %s", self._url, exc)
            self._connection = None
            self._fail()
            return
        connection.on_open = lambda: self._handle_open(connection)
        connection.on_message = lambda message: self._handle_message(connection, message)
        connection.on_error = lambda exc: self._handle_error(connection, exc)
        self._connection = connection

    def _reconnect(self) -> None:
        if self._closed:
            return
        self._connect()

    def _is_current(self, connection: PushConnection) -> bool:
        return not self._closed and connection is self._connection

    def _handle_open(self, connection: PushConnection) -> None:
        if not self._is_current(connection):
            return
        self._state = ChannelState.OPEN
        logger.info("Channel %s open", self._url)
        self._notify(self._on_open)

    def _handle_message(self, connection: PushConnection, message: MessageEvent) -> None:
        if not self._is_current(connection):
            return
        self._notify(self._on_message, message)

    def _handle_error(self, connection: PushConnection, exc: BaseException | None) -> None:
        if not self._is_current(connection) or self._state is ChannelState.ERRORING:
            return
        logger.warning(
            "Channel %s errored (%s), retrying in %.3fs",
            self._url,
            exc or "stream ended",
            self._retry_delay,
        )
        self._release(connection)
        self._fail()

    def _fail(self) -> None:
        self._state = ChannelState.ERRORING
        self._notify(self._on_error)
        # on_error may have closed the channel.
        if self._closed:
            return
        self._retry.schedule(self._retry_delay, self._reconnect)

    def _release(self, connection: PushConnection) -> None:
        connection.on_open = None
        connection.on_message = None
        connection.on_error = None
        try:
            connection.close()
        except Exception:
            logger.exception("Error closing connection to %s", self._url)

    def _notify(self, hook: Callable[..., Any] | None, *args: Any) -> None:
        if hook is None:
            return
        try:
            hook(*args)
        except Exception:
            logger.exception("Error in channel callback for %s", self._url)
