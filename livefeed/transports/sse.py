"""Server-sent events transport over httpx.

Uses ``httpx-sse`` to parse the ``text/event-stream`` body.  Each SSE
event becomes one ``MessageEvent``; the server closing the stream is
reported as an error so the owning channel reconnects.
"""

from __future__ import annotations

import logging

import httpx
from httpx_sse import aconnect_sse

from livefeed.exceptions import TransportError
from livefeed.transports.base import MessageEvent, StreamingConnection

logger = logging.getLogger(__name__)

_CONNECT_TIMEOUT = 5.0


class SSEConnection(StreamingConnection):
    """One server-sent events connection.

    Usage::

        conn = SSEConnection("http://api.local/jobs/42/events")
        conn.on_message = lambda e: print(e.data)
        ...
        conn.close()

    Args:
        url: Event stream URL.
        client: Shared ``httpx.AsyncClient``; a private client is created
            (and closed) per connection when omitted.
        headers: Extra request headers.
        connect_timeout: Seconds allowed for connecting.  Reads never time
            out since the stream may be idle for long periods.
    """

    kind = "sse"

    def __init__(
        self,
        url: str,
        *,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
        connect_timeout: float = _CONNECT_TIMEOUT,
    ) -> None:
        self._client = client
        self._headers = {"Accept": "text/event-stream", "Cache-Control": "no-cache"}
        self._headers.update(headers or {})
        self._timeout = httpx.Timeout(None, connect=connect_timeout)
        super().__init__(url)

    async def _consume(self) -> None:
        if self._client is not None:
            await self._stream(self._client)
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            await self._stream(client)

    async def _stream(self, client: httpx.AsyncClient) -> None:
        async with aconnect_sse(
            client, "GET", self.url, headers=self._headers, timeout=self._timeout
        ) as event_source:
            response = event_source.response
            if response.is_error:
                raise TransportError(
                    f"HTTP {response.status_code} opening event stream",
                    self.url,
                    status_code=response.status_code,
                )
            content_type = response.headers.get("content-type", "").partition(";")[0]
            if content_type.strip() != "text/event-stream":
                raise TransportError(
                    f"Expected text/event-stream, got {content_type or 'no content type'}",
                    self.url,
                    status_code=response.status_code,
                )
            self._emit_open()
            async for sse in event_source.aiter_sse():
                self._emit_message(
                    MessageEvent(
                        data=sse.data,
                        event=sse.event,
                        id=sse.id or None,
                        retry=sse.retry,
                    )
                )
