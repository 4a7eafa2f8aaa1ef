"""VS Code connector, through the MongoDB for VS Code extension's deeplink."""

import shutil
from urllib.parse import quote, urlencode

from atlas_local.commands.connectors.process import run_inherited
from atlas_local.exceptions import CommandError

DEEPLINK_BASE = "vscode://mongodb.mongodb-vscode/connectWithURI"


def deeplink(deployment_name: str, connection_string: str) -> str:
    """Build the extension URI that adds and opens a connection."""
    query = urlencode(
        {
            "connectionString": connection_string,
            "name": f"{deployment_name} (Local)",
            "reuseExisting": "true",
            "utm_source": "atlas-local-cli",
        },
        quote_via=quote,
    )
    return f"{DEEPLINK_BASE}?{query}"


class VsCode:
    def is_available(self) -> bool:
        return shutil.which("code") is not None

    async def launch(self, deployment_name: str, connection_string: str) -> None:
        program = shutil.which("code")
        if program is None:
            raise CommandError("launching VS Code", "VS Code is not installed")
        await run_inherited(program, "--open-url", deeplink(deployment_name, connection_string))
