"""atlas-local CLI - manage local MongoDB Atlas deployments."""

import typer

from atlas_local.cli import deployments
from atlas_local.cli.runner import CliState, fail
from atlas_local.cli.search import search_app
from atlas_local.config import Settings
from atlas_local.exceptions import ConfigError
from atlas_local.formatting import Format
from atlas_local.log import setup_logging

app = typer.Typer(
    name="atlas-local",
    help="Manage local deployments",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    output: Format = typer.Option(Format.TEXT, "--output", "-o", help="Output format."),
    debug: bool = typer.Option(False, "--debug", "-D", hidden=True, help="Enable debug logging."),
) -> None:
    """
    Manage local deployments.

    ATLAS_LOCAL_LOG sets the log level; with ATLAS_LOCAL_LOG_ALL set, logs
    from every library are shown.
    """
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        raise fail(str(e))

    setup_logging(settings, debug=debug)
    ctx.obj = CliState(format=output, settings=settings)


# Add commands
app.command("setup")(deployments.setup)
app.command("start")(deployments.start)
app.command("stop")(deployments.stop)
app.command("delete")(deployments.delete)
app.command("rm", hidden=True)(deployments.delete)
app.command("list")(deployments.list_deployments)
app.command("ls", hidden=True)(deployments.list_deployments)
app.command("logs")(deployments.logs)
app.command("connect")(deployments.connect)

# Add command groups
app.add_typer(search_app, name="search")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
