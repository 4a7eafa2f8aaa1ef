"""Logging setup for the CLI.

Logs go to stderr through rich so stdout stays reserved for command output.
By default only the atlas_local logger tree is enabled.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from atlas_local.config import Settings

PACKAGE_LOGGER = "atlas_local"


def setup_logging(settings: Settings, debug: bool = False) -> None:
    """Configure logging from settings.

    Args:
        settings: Environment settings (level and scope).
        debug: Force DEBUG level for the package loggers only.
    """
    level_name = "debug" if debug else settings.log_level
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=debug,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    root.handlers = [handler]

    if settings.log_all and not debug:
        root.setLevel(level)
        logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)
    else:
        # Other libraries stay quiet unless explicitly enabled
        root.setLevel(logging.WARNING)
        logging.getLogger(PACKAGE_LOGGER).setLevel(level)
