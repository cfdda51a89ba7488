"""
Index management CLI commands.

Provides commands for creating, inspecting, updating and deleting indexes on the
configured search service.
"""

import typer

from meilikit.cli.common import console, index_table, run_with_client


__all__ = ["app"]


app = typer.Typer(help="Manage indexes", no_args_is_help=True)


@app.command(name="create")
def create_command(
    uid: str,
    primary_key: str | None = typer.Option(None, "--primary-key", "-p", help="Primary key of the index"),
):
    # type: (...) -> None
    """
    Create a new index.

    Examples:

        meilikit index create movies

        meilikit index create movies --primary-key movieId
    """

    async def create(client):
        return await client.create_index(uid, primary_key)

    index = run_with_client(create)
    console.print(f"[green]Created index '{index.uid}'[/green]")
    console.print(index_table([index], title="Created Index"))


@app.command(name="get")
def get_command(uid: str):
    # type: (...) -> None
    """
    Show a single index.

    Example:

        meilikit index get movies
    """

    async def get(client):
        return await client.get_index(uid)

    index = run_with_client(get)
    console.print(index_table([index], title="Index"))


@app.command(name="list")
def list_command(
    offset: int | None = typer.Option(None, "--offset", help="Number of indexes to skip"),
    limit: int | None = typer.Option(None, "--limit", help="Maximum number of indexes to list"),
):
    # type: (...) -> None
    """
    List indexes on the server.

    Example:

        meilikit index list --limit 50
    """

    async def list_all(client):
        return await client.get_all_indexes(offset=offset, limit=limit)

    indexes = run_with_client(list_all)
    if not indexes:
        console.print("[yellow]No indexes found[/yellow]")
        return
    console.print(index_table(indexes))


@app.command(name="update")
def update_command(uid: str, primary_key: str):
    # type: (...) -> None
    """
    Change the primary key of an index.

    Example:

        meilikit index update movies movieId
    """

    async def update(client):
        return await client.index(uid).update(primary_key)

    index = run_with_client(update)
    console.print(f"[green]Updated index '{index.uid}'[/green]")
    console.print(index_table([index], title="Updated Index"))


@app.command(name="stats")
def stats_command(uid: str):
    # type: (...) -> None
    """
    Show document statistics of an index.

    Example:

        meilikit index stats movies
    """

    async def stats(client):
        return await client.index(uid).get_stats()

    result = run_with_client(stats)
    console.print(f"Documents: {result.number_of_documents}")
    console.print(f"Indexing: {'yes' if result.is_indexing else 'no'}")
    for field, count in sorted(result.field_distribution.items()):
        console.print(f"  {field}: {count}")


@app.command(name="delete")
def delete_command(
    uid: str,
    if_exists: bool = typer.Option(False, "--if-exists", help="Do not fail if the index doesn't exist"),
):
    # type: (...) -> None
    """
    Delete an index and all its documents.

    Examples:

        meilikit index delete movies

        meilikit index delete movies --if-exists
    """
    if if_exists:

        async def delete_if_exists(client):
            return await client.delete_index_if_exists(uid)

        if run_with_client(delete_if_exists):
            console.print(f"[green]Deleted index '{uid}'[/green]")
        else:
            console.print(f"[yellow]Index '{uid}' does not exist[/yellow]")
        return

    async def delete(client):
        await client.delete_index(uid)

    run_with_client(delete)
    console.print(f"[green]Deleted index '{uid}'[/green]")
