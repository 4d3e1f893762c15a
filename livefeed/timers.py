"""Timer primitives for the live-update channel.

Both timers own their scheduler handles explicitly so a test can assert
"no pending timer" per instance.  They run on a single event loop and
rely on fire-time guards rather than locks:

- ``OneShotTimer`` backs the reconnect delay of a channel.
- ``IntervalTimer`` backs polling; starting an active timer or stopping
  an inactive one is a no-op, which keeps open/error flapping from
  leaking intervals.

The scheduler is anything with ``call_later(delay, callback, *args)``
returning a cancellable handle.  ``asyncio`` loops qualify and are the
default; tests inject a manual clock.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> Any: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Cancellable: ...


def default_scheduler() -> Scheduler:
    """Return the running event loop.

    Raises:
        RuntimeError: When called outside a running event loop.
    """
    return asyncio.get_running_loop()


class OneShotTimer:
    """A single pending callback that can be replaced or cancelled."""

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._handle: Cancellable | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, delay: float, callback: Callable[[], Any]) -> None:
        """Run ``callback`` once after ``delay`` seconds, replacing any pending run."""
        self.cancel()
        self._handle = self._scheduler.call_later(delay, self._fire, callback)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, callback: Callable[[], Any]) -> None:
        self._handle = None
        callback()


class IntervalTimer:
    """Fixed-cadence repeating callback with idempotent start/stop.

    Ticks are spaced ``interval`` seconds apart on the scheduler clock:
    the next tick is scheduled before the callback runs, so a slow
    callback never delays the cadence.  Callbacks may be plain functions
    or coroutine functions; coroutines run as tasks and are tracked until
    they settle.

    Failures are logged and never stop the interval.
    """

    def __init__(
        self,
        callback: Callable[[], Any],
        interval: float,
        scheduler: Scheduler,
        *,
        name: str = "interval",
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._callback = callback
        self._interval = interval
        self._scheduler = scheduler
        self._name = name
        self._handle: Cancellable | None = None
        self._generation = 0
        self._active = False
        self._inflight: set[asyncio.Future[Any]] = set()

    @property
    def active(self) -> bool:
        return self._active

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def inflight(self) -> int:
        """Number of awaitables from earlier ticks that have not settled."""
        return len(self._inflight)

    def start(self, *, immediate: bool = True) -> bool:
        """Start ticking; returns False if already active."""
        if self._active:
            return False
        self._active = True
        self._generation += 1
        logger.debug("%s: started (every %.3fs)", self._name, self._interval)
        self._schedule(self._generation)
        if immediate:
            self._invoke()
        return True

    def stop(self, *, cancel_inflight: bool = False) -> bool:
        """Stop ticking; returns False if already inactive.

        Args:
            cancel_inflight: Also cancel awaitables still running from
                earlier ticks.
        """
        if cancel_inflight:
            for future in list(self._inflight):
                future.cancel()
        if not self._active:
            return False
        self._active = False
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        logger.debug("%s: stopped", self._name)
        return True

    def _schedule(self, generation: int) -> None:
        self._handle = self._scheduler.call_later(self._interval, self._tick, generation)

    def _tick(self, generation: int) -> None:
        # A handle from an earlier start/stop cycle must not fire.
        if not self._active or generation != self._generation:
            return
        self._schedule(generation)
        self._invoke()

    def _invoke(self) -> None:
        try:
            result = self._callback()
        except Exception:
            logger.exception("%s: callback failed", self._name)
            return
        if inspect.isawaitable(result):
            future = asyncio.ensure_future(result)
            self._inflight.add(future)
            future.add_done_callback(self._settled)

    def _settled(self, future: asyncio.Future[Any]) -> None:
        self._inflight.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.warning("%s: callback failed: %s", self._name, exc, exc_info=exc)
