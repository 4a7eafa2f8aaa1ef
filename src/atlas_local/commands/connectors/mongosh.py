"""mongosh connector."""

import shutil

from atlas_local.commands.connectors.process import run_inherited
from atlas_local.exceptions import CommandError


class Mongosh:
    def is_available(self) -> bool:
        return shutil.which("mongosh") is not None

    async def launch(self, deployment_name: str, connection_string: str) -> None:
        program = shutil.which("mongosh")
        if program is None:
            raise CommandError("launching mongosh", "mongosh is not installed")
        await run_inherited(program, connection_string)
