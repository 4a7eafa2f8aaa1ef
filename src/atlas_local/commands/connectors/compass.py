"""MongoDB Compass connector."""

import os
import shutil
import sys

from atlas_local.commands.connectors.process import run_inherited
from atlas_local.exceptions import CommandError

MACOS_COMPASS = "/Applications/MongoDB Compass.app/Contents/MacOS/MongoDB Compass"
LINUX_COMPASS = "/usr/bin/mongodb-compass"
WINDOWS_COMPASS = "MongoDBCompass.exe"


def find_compass(platform: str = sys.platform) -> str | None:
    """Path of the Compass executable on this platform, None if missing."""
    if platform == "darwin":
        return MACOS_COMPASS if os.path.exists(MACOS_COMPASS) else None
    if platform.startswith("win"):
        return shutil.which(WINDOWS_COMPASS)
    return LINUX_COMPASS if os.path.exists(LINUX_COMPASS) else None


class Compass:
    def is_available(self) -> bool:
        return find_compass() is not None

    async def launch(self, deployment_name: str, connection_string: str) -> None:
        program = find_compass()
        if program is None:
            raise CommandError("launching Compass", "MongoDB Compass is not installed")
        await run_inherited(program, connection_string)
