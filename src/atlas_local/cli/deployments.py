"""Deployment commands: setup, start, stop, delete, list, logs, connect."""

from pathlib import Path
from typing import Optional

import typer

from atlas_local.cli.runner import fail, get_state, run_command
from atlas_local.commands.connect import Connect
from atlas_local.commands.connectors import ConnectWith
from atlas_local.commands.delete import Delete
from atlas_local.commands.list import List
from atlas_local.commands.logs import Logs
from atlas_local.commands.setup import Setup, resolve_mdb_version
from atlas_local.commands.start import Start
from atlas_local.commands.stop import Stop
from atlas_local.config import DEFAULT_HEALTH_TIMEOUT
from atlas_local.docker.client import DockerDeploymentClient
from atlas_local.exceptions import ConfigError
from atlas_local.interaction import ConsoleInteraction

DEPLOYMENT_NAME = typer.Argument(..., help="Name of the deployment.")


def setup(
    ctx: typer.Context,
    deployment_name: Optional[str] = typer.Argument(None, help="Name of the deployment."),
    mdb_version: Optional[str] = typer.Option(
        None, "--mdbVersion", help="Major MongoDB version (latest, 7, 8, 8.0, ...)."
    ),
    voyage_api_key: Optional[str] = typer.Option(
        None, "--voyageApiKey", help="Voyage AI API key for automated embeddings."
    ),
    port: Optional[int] = typer.Option(
        None, "--port", min=1, max=65535, help="Host port, auto-assigned if omitted."
    ),
    bind_ip_all: bool = typer.Option(
        False, "--bindIpAll", help="Publish the port on every interface, not just localhost."
    ),
    initdb: Optional[Path] = typer.Option(
        None,
        "--initdb",
        exists=True,
        file_okay=False,
        resolve_path=True,
        help="Directory with scripts run on first start.",
    ),
    force: bool = typer.Option(False, "--force", help="Skip every prompt and use defaults."),
    load_sample_data: Optional[bool] = typer.Option(
        None, "--loadSampleData/--no-loadSampleData", help="Load the sample datasets."
    ),
    username: Optional[str] = typer.Option(None, "--username", help="Root username."),
    password: Optional[str] = typer.Option(None, "--password", help="Root password."),
    image: Optional[str] = typer.Option(None, "--image", help="Image to use instead of the default."),
    skip_pull_image: bool = typer.Option(
        False, "--skipPullImage", help="Use the local image without pulling it."
    ),
    connect_with: Optional[ConnectWith] = typer.Option(
        None, "--connectWith", help="How to connect once the deployment is ready."
    ),
) -> None:
    """Create a local deployment."""
    state = get_state(ctx)
    try:
        version = resolve_mdb_version(state.settings.use_preview, mdb_version)
    except ConfigError as e:
        raise fail(e.reason)

    async def _inner():
        return await Setup(
            deployment_management=DockerDeploymentClient(),
            interaction=ConsoleInteraction(),
            deployment_name=deployment_name,
            mdb_version=version,
            voyage_api_key=voyage_api_key or state.settings.voyage_api_key,
            port=port,
            bind_ip_all=bind_ip_all,
            initdb=str(initdb) if initdb else None,
            force=force,
            load_sample_data=load_sample_data,
            username=username,
            password=password,
            image=image,
            skip_pull_image=skip_pull_image,
            connect_with=connect_with,
        ).execute()

    run_command(ctx, _inner)


def start(
    ctx: typer.Context,
    deployment_name: str = DEPLOYMENT_NAME,
    wait_for_healthy: bool = typer.Option(
        True, "--waitForHealthy/--no-waitForHealthy", help="Wait until the deployment is healthy."
    ),
    wait_for_healthy_timeout: float = typer.Option(
        DEFAULT_HEALTH_TIMEOUT, "--waitForHealthyTimeout", help="Seconds to wait for health."
    ),
) -> None:
    """Start a deployment."""

    async def _inner():
        return await Start(
            deployment_name=deployment_name,
            deployment_management=DockerDeploymentClient(),
            interaction=ConsoleInteraction(),
            wait_for_healthy=wait_for_healthy,
            wait_for_healthy_timeout=wait_for_healthy_timeout,
        ).execute()

    run_command(ctx, _inner)


def stop(ctx: typer.Context, deployment_name: str = DEPLOYMENT_NAME) -> None:
    """Stop a deployment."""

    async def _inner():
        return await Stop(
            deployment_name=deployment_name,
            deployment_management=DockerDeploymentClient(),
            interaction=ConsoleInteraction(),
        ).execute()

    run_command(ctx, _inner)


def delete(
    ctx: typer.Context,
    deployment_name: str = typer.Argument(..., help="Name of the deployment to delete."),
    force: bool = typer.Option(False, "--force", help="Skip the confirmation prompt."),
) -> None:
    """
    Delete a deployment.

    Deleting a deployment also deletes its data volumes.
    """

    async def _inner():
        return await Delete(
            deployment_name=deployment_name,
            deployment_deleter=DockerDeploymentClient(),
            interaction=ConsoleInteraction(),
            force=force,
        ).execute()

    run_command(ctx, _inner)


def list_deployments(ctx: typer.Context) -> None:
    """List all local deployments."""

    async def _inner():
        return await List(deployment_lister=DockerDeploymentClient()).execute()

    run_command(ctx, _inner)


def logs(ctx: typer.Context, deployment_name: str = DEPLOYMENT_NAME) -> None:
    """Print the logs of a deployment."""

    async def _inner():
        return await Logs(
            deployment_name=deployment_name, logs_getter=DockerDeploymentClient()
        ).execute()

    run_command(ctx, _inner)


def connect(
    ctx: typer.Context,
    deployment_name: str = DEPLOYMENT_NAME,
    connect_with: ConnectWith = typer.Option(
        ..., "--connectWith", help="Tool to open, or connectionString to print it."
    ),
) -> None:
    """Connect to a deployment, starting it first if needed."""

    async def _inner():
        return await Connect(
            deployment_name=deployment_name,
            connect_with=connect_with,
            deployment_management=DockerDeploymentClient(),
            interaction=ConsoleInteraction(),
        ).execute()

    run_command(ctx, _inner)
