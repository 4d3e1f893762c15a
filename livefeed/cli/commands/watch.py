"""Watch command: follow live updates for a resource."""

import asyncio
import contextlib
import json
import logging
from typing import TYPE_CHECKING, Annotated, Any, Optional

import typer
from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel

from livefeed.cli.utils import console

if TYPE_CHECKING:
    from livefeed.settings import Settings

logger = logging.getLogger(__name__)

# Job states after which no further updates arrive.
TERMINAL_STATUSES = frozenset({"completed", "failed"})


def watch(
    url: Annotated[
        str,
        typer.Argument(help="Push endpoint, absolute or relative to LIVEFEED_BASE_URL"),
    ],
    poll_url: Annotated[
        Optional[str],  # noqa: UP007
        typer.Option("--poll-url", "-p", help="REST endpoint polled while push is down"),
    ] = None,
    poll_interval: Annotated[
        Optional[float],  # noqa: UP007
        typer.Option("--poll-interval", "-i", help="Seconds between polls"),
    ] = None,
    retry_delay: Annotated[
        Optional[float],  # noqa: UP007
        typer.Option("--retry-delay", "-r", help="Seconds before reconnecting"),
    ] = None,
    transport: Annotated[
        Optional[str],  # noqa: UP007
        typer.Option("--transport", "-t", help="Push transport: sse, websocket or none"),
    ] = None,
    until_terminal: Annotated[
        bool,
        typer.Option("--until-terminal", help="Exit once a job reaches completed or failed"),
    ] = False,
    duration: Annotated[
        Optional[float],  # noqa: UP007
        typer.Option("--duration", "-d", help="Stop after this many seconds"),
    ] = None,
) -> None:
    """Follow live updates, falling back to polling when push is down.

    Examples:
        livefeed watch /jobs/42/events --poll-url /jobs/org-1
        livefeed watch ws://localhost:8080/ws --transport websocket
        livefeed watch /jobs/42/events --until-terminal
    """
    from livefeed.settings import Settings

    overrides = {
        key: value
        for key, value in {
            "poll_interval": poll_interval,
            "retry_delay": retry_delay,
            "transport": transport,
        }.items()
        if value is not None
    }
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        console.print(f"[red]Invalid option: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    try:
        asyncio.run(_watch(settings, url, poll_url, until_terminal, duration))
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")


async def _watch(
    settings: "Settings",
    url: str,
    poll_url: str | None,
    until_terminal: bool,
    duration: float | None,
) -> None:
    """Run live updates until a terminal status, timeout or interrupt."""
    from livefeed.orchestrator import create_live_updates
    from livefeed.polling import http_poller

    done = asyncio.Event()

    def show(source: str, payload: Any) -> None:
        text = payload if isinstance(payload, str) else json.dumps(payload)
        style = "cyan" if source == "push" else "magenta"
        console.print(f"[{style}]{source:>4}[/{style}] {escape(text)}")
        if until_terminal and extract_status(payload) in TERMINAL_STATUSES:
            done.set()

    if poll_url:
        poll = http_poller(
            settings.resolve_url(poll_url),
            lambda payload: show("poll", payload),
            timeout=settings.http_timeout,
        )
    else:
        poll = _no_poll

    console.print(
        Panel(
            f"[bold]{escape(settings.resolve_url(url))}[/bold]\n"
            f"transport: {settings.transport}  poll: {settings.poll_interval}s  "
            f"retry: {settings.retry_delay}s",
            title="Watching",
            border_style="blue",
        )
    )

    updates = create_live_updates(
        url,
        lambda event: show("push", event.data),
        poll,
        settings=settings,
        on_open=lambda: console.print("[green]live[/green]"),
        on_error=lambda: console.print("[yellow]reconnecting...[/yellow]"),
    )
    try:
        if duration is None:
            await done.wait()
        else:
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(done.wait(), timeout=duration)
    finally:
        updates.close()


def _no_poll() -> None:
    logger.debug("No poll endpoint configured")


def extract_status(payload: Any) -> str | None:
    """Pull a job status out of a push or poll payload.

    Accepts a bare status string (``"completed"``), a JSON object with a
    ``status`` field, or the JSON text of one.
    """
    if isinstance(payload, str):
        try:
            decoded = json.loads(payload)
        except ValueError:
            return payload.strip() or None
        if isinstance(decoded, str):
            return decoded
        payload = decoded
    if isinstance(payload, dict):
        status = payload.get("status")
        return status if isinstance(status, str) else None
    return None
