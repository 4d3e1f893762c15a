"""CLI entry point and base commands.

Provides the main CLI application with commands for:
- watch: Follow live updates for a resource
- config: Show effective settings
- version: Show version information
"""

from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from livefeed.cli.commands.watch import watch
from livefeed.cli.utils import console
from livefeed.logging_config import configure_logging

app = typer.Typer(
    name="livefeed",
    help="Resilient live updates: server push with polling fallback",
    add_completion=False,
    no_args_is_help=True,
)

app.command()(watch)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before any command runs."""
    configure_logging("DEBUG" if verbose else None)


@app.command()
def config() -> None:
    """Show the effective configuration."""
    from livefeed.settings import get_settings

    settings = get_settings()

    table = Table(title="Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for name, value in settings.model_dump().items():
        table.add_row(name, str(value))

    console.print(table)


@app.command()
def version() -> None:
    """Show livefeed version information."""
    from livefeed import __version__

    console.print(
        Panel(
            f"[bold]livefeed[/bold] v{__version__}\n"
            "Server push with polling fallback",
            title="Version",
            border_style="blue",
        )
    )


if __name__ == "__main__":
    app()
