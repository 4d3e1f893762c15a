"""WebSocket transport.

Each inbound text frame is one message (binary frames are decoded as
UTF-8).  A closed socket, clean or not, is reported as an error so the
owning channel reconnects.
"""

from __future__ import annotations

import logging

from websockets.asyncio.client import connect as ws_connect

from livefeed.transports.base import MessageEvent, StreamingConnection

logger = logging.getLogger(__name__)

_OPEN_TIMEOUT = 5.0


class WebSocketConnection(StreamingConnection):
    """One WebSocket connection delivering server-pushed messages."""

    kind = "websocket"

    def __init__(self, url: str, *, open_timeout: float = _OPEN_TIMEOUT) -> None:
        self._open_timeout = open_timeout
        super().__init__(url)

    async def _consume(self) -> None:
        async with ws_connect(self.url, open_timeout=self._open_timeout) as ws:
            self._emit_open()
            async for raw in ws:
                data = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
                self._emit_message(MessageEvent(data=data))
