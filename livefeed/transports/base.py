"""Push transport interface.

A push connection behaves like a browser ``EventSource``: it starts
connecting as soon as it is constructed, fires ``on_open`` once the
handshake succeeds, ``on_message`` for every inbound message and
``on_error`` once when the stream fails or ends.  It never reconnects by
itself; that is the channel's job.  After ``close()`` nothing fires.

Handlers are plain attributes so an owner can attach and detach them,
mirroring ``es.onmessage = ...``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageEvent:
    """One message received over a push connection."""

    data: str
    event: str = "message"
    id: str | None = None
    retry: int | None = None

    def json(self) -> Any:
        """Decode ``data`` as JSON.

        Raises:
            json.JSONDecodeError: If the payload is not JSON.
        """
        return json.loads(self.data)


class PushConnection(Protocol):
    on_open: Callable[[], None] | None
    on_message: Callable[[MessageEvent], None] | None
    on_error: Callable[[BaseException | None], None] | None

    def close(self) -> None: ...


TransportFactory = Callable[[str], PushConnection]


class StreamingConnection:
    """Base for transports that consume a stream inside one asyncio task.

    Subclasses implement ``_consume()``, calling ``_emit_open()`` after the
    handshake and ``_emit_message()`` per message.  Returning normally
    counts as the server ending the stream and is reported as an error
    with no exception, like ``EventSource``.
    """

    kind = "stream"

    def __init__(self, url: str) -> None:
        self.url = url
        self.on_open: Callable[[], None] | None = None
        self.on_message: Callable[[MessageEvent], None] | None = None
        self.on_error: Callable[[BaseException | None], None] | None = None
        self._closed = False
        self._task: asyncio.Task[None] = asyncio.get_running_loop().create_task(
            self._run(), name=f"{self.kind}:{url}"
        )

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def task(self) -> asyncio.Task[None]:
        return self._task

    def close(self) -> None:
        """Stop the stream and detach all handlers. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self.on_open = None
        self.on_message = None
        self.on_error = None
        if not self._task.done():
            self._task.cancel()
        logger.debug("%s connection to %s closed", self.kind, self.url)

    async def _consume(self) -> None:
        raise NotImplementedError

    async def _run(self) -> None:
        try:
            await self._consume()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("%s connection to %s failed: %s", self.kind, self.url, exc)
            self._emit_error(exc)
            return
        logger.info("%s connection to %s ended by server", self.kind, self.url)
        self._emit_error(None)

    def _emit_open(self) -> None:
        self._dispatch(self.on_open)

    def _emit_message(self, message: MessageEvent) -> None:
        self._dispatch(self.on_message, message)

    def _emit_error(self, exc: BaseException | None) -> None:
        self._dispatch(self.on_error, exc)

    def _dispatch(self, handler: Callable[..., None] | None, *args: Any) -> None:
        if self._closed or handler is None:
            return
        try:
            handler(*args)
        except Exception:
            logger.exception("Error in %s handler for %s", self.kind, self.url)
