"""
Shared utilities for the meilikit CLI.

Common functionality used across multiple CLI commands.
"""

import asyncio
import sys
from typing import TYPE_CHECKING

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from meilikit.client import Client
from meilikit.errors import MeilikitError
from meilikit.settings import client_settings

if TYPE_CHECKING:
    from meilikit.index import Index  # noqa: F401
    from meilikit.settings import ClientSettings  # noqa: F401


__all__ = ["console", "state", "create_client", "run_with_client", "index_table"]


# Shared console instance for all CLI commands
console = Console()


# Configure loguru to use rich's console for proper output coordination
logger.remove()
logger.add(
    RichHandler(
        console=console,
        rich_tracebacks=True,
        markup=True,
        show_time=False,
        show_level=False,
        show_path=False,
    ),
    format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {module}:{function}:{line} - {message}",
    level="INFO",
)


# Settings resolved by the top-level callback (global --url/--api-key options)
state = {"settings": client_settings}  # type: dict[str, ClientSettings]


def create_client():
    # type: () -> Client
    """
    Create a client from the current CLI settings.

    :return: Client instance (caller is responsible for closing it)
    """
    return Client.from_settings(state["settings"])


def run_with_client(func, *args):
    # type: (...) -> object
    """
    Run an async operation with a fresh client and report domain errors.

    Errors raised by meilikit are printed with their error code and terminate
    the command with exit code 1.

    :param func: Coroutine function called as ``func(client, *args)``
    :param args: Extra positional arguments for ``func``
    :return: Result of ``func``
    """

    async def runner():
        client = create_client()
        try:
            return await func(client, *args)
        finally:
            await client.aclose()

    try:
        return asyncio.run(runner())
    except MeilikitError as e:
        console.print(f"[red]Error ({e.code}): {e.message}[/red]")
        sys.exit(1)


def index_table(indexes, title="Indexes"):
    # type: (list[Index], str) -> Table
    """
    Render index handles as a rich table.

    :param indexes: Index handles to render
    :param title: Table title
    :return: Table ready for printing
    """
    table = Table(title=title)
    table.add_column("UID", style="cyan")
    table.add_column("Primary Key", style="magenta")
    table.add_column("Created", style="white")
    table.add_column("Updated", style="white")

    for index in indexes:
        table.add_row(
            index.uid,
            index.primary_key or "-",
            index.created_at.isoformat() if index.created_at else "-",
            index.updated_at.isoformat() if index.updated_at else "-",
        )
    return table
