"""Push delivery with polling fallback.

Composes a ``ReconnectingChannel`` with an ``IntervalTimer`` poller so
that a consumer always has a delivery path:

- Polling starts immediately, covering the gap while the channel connects.
- A channel ``open`` stops polling; push is authoritative.
- A channel ``error`` restarts polling until the next ``open``.
- Without a push transport, polling runs until ``close()``.

Push messages and poll results feed the same consumer handler and are
not deduplicated, so the handler must tolerate seeing one update twice
around a transition.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from livefeed.channel import DEFAULT_RETRY_DELAY, ReconnectingChannel
from livefeed.settings import get_settings
from livefeed.timers import IntervalTimer, default_scheduler
from livefeed.transports import build_transport_factory
from livefeed.transports.sse import SSEConnection

if TYPE_CHECKING:
    from collections.abc import Callable

    from livefeed.settings import Settings
    from livefeed.timers import Scheduler
    from livefeed.transports.base import MessageEvent, TransportFactory

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0


class FallbackOrchestrator:
    """Keeps updates flowing via push when healthy and polling otherwise.

    Usage::

        async with FallbackOrchestrator(
            "http://api.local/jobs/42/events",
            on_message=handle_event,
            poll=refresh_jobs,
            poll_interval=10.0,
        ) as updates:
            ...

    Args:
        url: Push endpoint.
        on_message: Called once per push message.
        poll: Zero-argument function or coroutine function that fetches
            current state; invoked immediately and then every
            ``poll_interval`` seconds while push is not open.
        poll_interval: Seconds between polls.
        retry_delay: Seconds between a push error and the next attempt.
        transport_factory: Push connection factory, or None when push is
            unavailable (polling only).
        scheduler: Timer source; defaults to the running event loop.
        on_open: Consumer hook, called after polling has been suspended.
        on_error: Consumer hook, called after polling has been resumed.
    """

    def __init__(
        self,
        url: str,
        on_message: Callable[[MessageEvent], Any],
        poll: Callable[[], Any],
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        *,
        transport_factory: TransportFactory | None = SSEConnection,
        scheduler: Scheduler | None = None,
        on_open: Callable[[], Any] | None = None,
        on_error: Callable[[], Any] | None = None,
    ) -> None:
        if retry_delay < 0:
            raise ValueError(f"retry_delay must be >= 0, got {retry_delay}")
        scheduler = scheduler or default_scheduler()
        self._url = url
        self._on_open = on_open
        self._on_error = on_error
        self._closed = False
        self._channel: ReconnectingChannel | None = None
        self._poller = IntervalTimer(poll, poll_interval, scheduler, name=f"poll:{url}")

        self._poller.start()
        if transport_factory is None:
            logger.info(
                "Push unavailable for %s, polling every %.3fs", url, poll_interval
            )
            return

        self._channel = ReconnectingChannel(
            url,
            on_message,
            retry_delay,
            on_open=self._handle_open,
            on_error=self._handle_error,
            transport_factory=transport_factory,
            scheduler=scheduler,
        )

    @property
    def url(self) -> str:
        return self._url

    @property
    def polling(self) -> bool:
        return self._poller.active

    @property
    def push_supported(self) -> bool:
        return self._channel is not None

    @property
    def channel(self) -> ReconnectingChannel | None:
        return self._channel

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop push and polling. Idempotent and safe from any state.

        Polls still in flight are cancelled so nothing is delivered after
        this returns.
        """
        if self._closed:
            return
        self._closed = True
        if self._channel is not None:
            self._channel.close()
        self._poller.stop(cancel_inflight=True)
        logger.info("Live updates for %s closed", self._url)

    async def __aenter__(self) -> FallbackOrchestrator:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def _handle_open(self) -> None:
        if self._closed:
            return
        if self._poller.stop():
            logger.info("Push open for %s, polling suspended", self._url)
        self._notify(self._on_open)

    def _handle_error(self) -> None:
        if self._closed:
            return
        if self._poller.start():
            logger.info("Push lost for %s, polling resumed", self._url)
        self._notify(self._on_error)

    def _notify(self, hook: Callable[[], Any] | None) -> None:
        if hook is None:
            return
        try:
            hook()
        except Exception:
            logger.exception("Error in live-update callback for %s", self._url)


def create_live_updates(
    url: str,
    on_message: Callable[[MessageEvent], Any],
    poll: Callable[[], Any],
    *,
    settings: Settings | None = None,
    **overrides: Any,
) -> FallbackOrchestrator:
    """Build a ``FallbackOrchestrator`` from settings.

    ``url`` is resolved against ``settings.base_url``.  Keyword overrides
    (e.g. ``scheduler=...`` or ``poll_interval=...``) take precedence over
    the settings-derived values.
    """
    settings = settings or get_settings()
    options: dict[str, Any] = {
        "poll_interval": settings.poll_interval,
        "retry_delay": settings.retry_delay,
        "transport_factory": build_transport_factory(settings),
    }
    options.update(overrides)
    return FallbackOrchestrator(settings.resolve_url(url), on_message, poll, **options)
