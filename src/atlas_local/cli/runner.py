"""Shared plumbing for CLI commands.

CliState carries the global options; run_command executes a command
coroutine, prints its result and maps fatal errors to exit codes.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable

import typer
from pydantic import BaseModel
from python_on_whales.exceptions import DockerException
from rich.console import Console

from atlas_local.commands.connectors import ConnectorExitError
from atlas_local.config import Settings
from atlas_local.exceptions import AtlasLocalError
from atlas_local.formatting import Format, format_result

console = Console()
err_console = Console(stderr=True)


@dataclass
class CliState:
    """Global options, stored on the typer context."""

    format: Format = Format.TEXT
    settings: Settings = field(default_factory=Settings)


def get_state(ctx: typer.Context) -> CliState:
    return ctx.obj if isinstance(ctx.obj, CliState) else CliState()


def fail(message: str) -> typer.Exit:
    """Print an error and return the Exit to raise."""
    err_console.print(f"[red]Error:[/red] {message}", highlight=False, soft_wrap=True)
    return typer.Exit(1)


def exit_status(returncode: int) -> int:
    """Shell exit status for a child return code; -N (killed by signal N) maps to 128 + N."""
    return 128 - returncode if returncode < 0 else returncode


def run_command(ctx: typer.Context, execute: Callable[[], Awaitable[BaseModel]]) -> None:
    """
    Run a command and print its result.

    Failed and canceled results are printed like any other result and exit
    with status 0. Fatal errors exit with status 1, and a connector tool's
    non-zero exit code is passed through.
    """
    state = get_state(ctx)
    try:
        result = asyncio.run(execute())
    except ConnectorExitError as e:
        raise typer.Exit(exit_status(e.exit_code))
    except (AtlasLocalError, DockerException) as e:
        raise fail(str(e))

    console.print(
        format_result(result, state.format), markup=False, highlight=False, soft_wrap=True
    )
