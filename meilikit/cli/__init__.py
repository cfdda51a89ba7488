"""
meilikit CLI.

Command-line interface for managing indexes on a Meilisearch-compatible server.
"""

import typer

import meilikit
from meilikit.cli import common
from meilikit.cli.common import console
from meilikit.cli.index import app as index_app
from meilikit.settings import client_settings

__all__ = ["app", "main"]


app = typer.Typer(
    name="meilikit",
    help="Index lifecycle CLI for Meilisearch-compatible servers",
    no_args_is_help=True,
)

app.add_typer(index_app, name="index")


@app.callback()
def configure(
    url: str | None = typer.Option(None, "--url", help="Server URL (default: MEILIKIT_URL)"),
    api_key: str | None = typer.Option(None, "--api-key", help="API key (default: MEILIKIT_API_KEY)"),
):
    # type: (...) -> None
    """Apply global connection options."""
    update = {}
    if url is not None:
        update["url"] = url
    if api_key is not None:
        update["api_key"] = api_key
    common.state["settings"] = client_settings.override(update)


@app.command()
def version():
    # type: () -> None
    """Show version information."""
    console.print(f"meilikit version {meilikit.__version__}")


def main():
    # type: () -> None
    """CLI entry point."""
    app()
