"""Run a connector's executable in the foreground."""

import asyncio
import logging

from atlas_local.exceptions import AtlasLocalError

logger = logging.getLogger(__name__)


class ConnectorExitError(AtlasLocalError):
    """
    A launched tool exited with a non-zero code.

    Attributes:
        program: Executable that was run
        exit_code: Its exit code
    """

    def __init__(self, program: str, exit_code: int) -> None:
        self.program = program
        self.exit_code = exit_code
        super().__init__(f"{program} exited with code {exit_code}")


async def run_inherited(program: str, *args: str) -> None:
    """
    Run a program with this process's stdio and environment.

    Raises:
        ConnectorExitError: If the program exits with a non-zero code.
    """
    logger.debug("launching %s %s", program, " ".join(args))
    process = await asyncio.create_subprocess_exec(program, *args)
    returncode = await process.wait()
    if returncode != 0:
        raise ConnectorExitError(program, returncode)
