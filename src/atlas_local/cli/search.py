"""Search index commands: search indexes create/list/delete/describe."""

from typing import Any, Awaitable, Callable, Optional

import typer
from pydantic import BaseModel

from atlas_local.cli.runner import run_command
from atlas_local.commands.search.create import (
    CreateSearchIndex,
    IndexDefinitionFile,
    IndexDefinitionFlags,
)
from atlas_local.commands.search.delete import DeleteSearchIndex
from atlas_local.commands.search.describe import DescribeSearchIndex
from atlas_local.commands.search.list import ListSearchIndexes
from atlas_local.interaction import ConsoleInteraction
from atlas_local.mongodb import SearchIndexClient, get_mongodb_client

search_app = typer.Typer(help="Manage search for local deployments.", no_args_is_help=True)
indexes_app = typer.Typer(help="Manage local search indexes.", no_args_is_help=True)
search_app.add_typer(indexes_app, name="indexes")

DEPLOYMENT_NAME = typer.Option(..., "--deploymentName", help="Name of the deployment.")
USERNAME = typer.Option(None, "--username", help="Username for authenticating to MongoDB.")
PASSWORD = typer.Option(None, "--password", help="Password for authenticating to MongoDB.")


def _check_credentials(username: str | None, password: str | None) -> None:
    if (username is None) != (password is None):
        raise typer.BadParameter("--username and --password must be used together")


async def _with_client(
    deployment_name: str,
    username: str | None,
    password: str | None,
    run: Callable[[Any], Awaitable[BaseModel]],
) -> BaseModel:
    """Create a client for the deployment, run the command, close the client."""
    client = await get_mongodb_client(deployment_name, username, password)
    try:
        return await run(client)
    finally:
        if isinstance(client, SearchIndexClient):
            await client.close()


@indexes_app.command("create")
def create(
    ctx: typer.Context,
    index_name: Optional[str] = typer.Argument(None, help="Name of the index."),
    deployment_name: str = DEPLOYMENT_NAME,
    database_name: Optional[str] = typer.Option(None, "--db", help="Name of the database."),
    collection: Optional[str] = typer.Option(None, "--collection", help="Name of the collection."),
    file: Optional[str] = typer.Option(
        None, "--file", help="JSON index configuration file to use."
    ),
    watch: bool = typer.Option(
        False, "--watch", "-w", help="Wait until the index is ready."
    ),
    username: Optional[str] = USERNAME,
    password: Optional[str] = PASSWORD,
) -> None:
    """Create a search index."""
    _check_credentials(username, password)
    if file is not None and any(v is not None for v in (index_name, database_name, collection)):
        raise typer.BadParameter("--file cannot be combined with an index name, --db or --collection")

    source = (
        IndexDefinitionFile(path=file)
        if file is not None
        else IndexDefinitionFlags(
            index_name=index_name, database_name=database_name, collection_name=collection
        )
    )

    async def _run(client):
        return await CreateSearchIndex(
            definition_source=source,
            mongodb_client=client,
            interaction=ConsoleInteraction(),
            watch=watch,
        ).execute()

    run_command(ctx, lambda: _with_client(deployment_name, username, password, _run))


@indexes_app.command("list")
def list_indexes(
    ctx: typer.Context,
    deployment_name: str = DEPLOYMENT_NAME,
    database_name: Optional[str] = typer.Option(None, "--db", help="Name of the database."),
    collection: Optional[str] = typer.Option(None, "--collection", help="Name of the collection."),
    username: Optional[str] = USERNAME,
    password: Optional[str] = PASSWORD,
) -> None:
    """List the search indexes of a collection."""
    _check_credentials(username, password)

    async def _run(client):
        return await ListSearchIndexes(
            mongodb_client=client,
            interaction=ConsoleInteraction(),
            database_name=database_name,
            collection_name=collection,
        ).execute()

    run_command(ctx, lambda: _with_client(deployment_name, username, password, _run))


@indexes_app.command("delete")
def delete(
    ctx: typer.Context,
    index_name: Optional[str] = typer.Argument(None, help="Name of the index."),
    deployment_name: str = DEPLOYMENT_NAME,
    database_name: Optional[str] = typer.Option(None, "--db", help="Name of the database."),
    collection: Optional[str] = typer.Option(None, "--collection", help="Name of the collection."),
    force: bool = typer.Option(False, "--force", help="Skip the confirmation prompt."),
    username: Optional[str] = USERNAME,
    password: Optional[str] = PASSWORD,
) -> None:
    """Delete a search index."""
    _check_credentials(username, password)

    async def _run(client):
        return await DeleteSearchIndex(
            mongodb_client=client,
            interaction=ConsoleInteraction(),
            database_name=database_name,
            collection_name=collection,
            index_name=index_name,
            force=force,
        ).execute()

    run_command(ctx, lambda: _with_client(deployment_name, username, password, _run))


@indexes_app.command("describe")
def describe(
    ctx: typer.Context,
    index_id: Optional[str] = typer.Argument(None, help="ID of the index."),
    deployment_name: str = DEPLOYMENT_NAME,
    username: Optional[str] = USERNAME,
    password: Optional[str] = PASSWORD,
) -> None:
    """Describe a search index."""
    _check_credentials(username, password)

    async def _run(client):
        return await DescribeSearchIndex(
            mongodb_client=client,
            interaction=ConsoleInteraction(),
            index_id=index_id,
        ).execute()

    run_command(ctx, lambda: _with_client(deployment_name, username, password, _run))
