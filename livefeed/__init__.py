"""livefeed: resilient live updates over push with polling fallback.

Usage::

    from livefeed import FallbackOrchestrator, http_poller

    updates = FallbackOrchestrator(
        "http://api.local/jobs/42/events",
        on_message=lambda event: print(event.data),
        poll=http_poller("http://api.local/jobs/org-1", print),
    )
    ...
    updates.close()
"""

from livefeed.channel import ChannelState, ReconnectingChannel
from livefeed.exceptions import ConfigurationError, LiveFeedError, PollError, TransportError
from livefeed.orchestrator import FallbackOrchestrator, create_live_updates
from livefeed.polling import http_poller
from livefeed.transports import MessageEvent

__version__ = "0.1.0"

__all__ = [
    "ChannelState",
    "ConfigurationError",
    "FallbackOrchestrator",
    "LiveFeedError",
    "MessageEvent",
    "PollError",
    "ReconnectingChannel",
    "TransportError",
    "__version__",
    "create_live_updates",
    "http_poller",
]
