"""HTTP poll functions.

Builds the zero-argument coroutine functions that a
``FallbackOrchestrator`` invokes on its polling interval.  A failed poll
raises ``PollError``; the interval logs it and keeps going.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from livefeed.exceptions import PollError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 10.0


def http_poller(
    url: str,
    on_result: Callable[[Any], Any],
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = _DEFAULT_TIMEOUT,
    headers: dict[str, str] | None = None,
) -> Callable[[], Awaitable[None]]:
    """Create a poll function that GETs ``url`` and hands the JSON body on.

    Args:
        url: REST endpoint returning the current state as JSON.
        on_result: Receives the decoded body of each successful poll.
        client: Shared client; a short-lived client is used per poll
            when omitted.
        timeout: Total seconds allowed per poll.
        headers: Extra request headers.

    Returns:
        A coroutine function suitable as ``FallbackOrchestrator(poll=...)``.
    """

    async def poll() -> None:
        if client is not None:
            payload = await _fetch(client, url, headers, timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                payload = await _fetch(own_client, url, headers, timeout)
        on_result(payload)

    return poll


async def _fetch(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str] | None,
    timeout: float,
) -> Any:
    try:
        response = await client.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise PollError(
            f"HTTP {e.response.status_code} polling {url}",
            url,
            status_code=e.response.status_code,
        ) from e
    except httpx.TimeoutException as e:
        raise PollError(f"Timeout after {timeout}s polling {url}", url) from e
    except httpx.HTTPError as e:
        raise PollError(f"Error polling {url}: {e}", url) from e

    try:
        return response.json()
    except ValueError as e:
        raise PollError(f"Invalid JSON from {url}: {e}", url) from e
