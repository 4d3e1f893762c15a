"""CLI application setup using Typer.

Provides the command-line interface for watching live updates.
"""

from livefeed.cli.main import app

__all__ = ["app"]
