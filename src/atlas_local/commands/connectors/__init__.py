"""
Desktop tool connectors.

A connector checks whether a tool is installed and launches it against a
deployment. Launched tools inherit this process's standard streams and
environment; a non-zero exit raises ConnectorExitError with the tool's exit
code so the CLI can exit with it.
"""

from enum import Enum
from typing import Protocol, runtime_checkable

from atlas_local.commands.connectors.compass import Compass
from atlas_local.commands.connectors.mongosh import Mongosh
from atlas_local.commands.connectors.process import ConnectorExitError
from atlas_local.commands.connectors.vscode import VsCode


class ConnectWith(str, Enum):
    """How to connect to a deployment."""

    COMPASS = "compass"
    MONGOSH = "mongosh"
    VSCODE = "vscode"
    CONNECTION_STRING = "connectionString"
    """Only print the connection string."""

    @property
    def tool_name(self) -> str:
        """Name used in "... is not installed" messages."""
        return {
            ConnectWith.COMPASS: "Compass",
            ConnectWith.MONGOSH: "Mongosh",
            ConnectWith.VSCODE: "VsCode",
            ConnectWith.CONNECTION_STRING: "Connection string",
        }[self]

    @property
    def label(self) -> str:
        """Human-readable name shown in selections and results."""
        return {
            ConnectWith.COMPASS: "Compass",
            ConnectWith.MONGOSH: "mongosh",
            ConnectWith.VSCODE: "VS Code",
            ConnectWith.CONNECTION_STRING: "Connection string",
        }[self]


@runtime_checkable
class Connector(Protocol):
    def is_available(self) -> bool:
        """True when the tool is installed."""
        ...

    async def launch(self, deployment_name: str, connection_string: str) -> None:
        """
        Open the tool connected to the deployment and wait for it to exit.

        Raises:
            ConnectorExitError: If the tool exits with a non-zero code.
        """
        ...


class Connectors:
    """The desktop tools available to connect and setup."""

    def __init__(
        self,
        compass: Connector | None = None,
        mongosh: Connector | None = None,
        vscode: Connector | None = None,
    ):
        self.compass = compass or Compass()
        self.mongosh = mongosh or Mongosh()
        self.vscode = vscode or VsCode()

    def get(self, connect_with: ConnectWith) -> Connector:
        """
        Connector for a tool.

        Raises:
            ValueError: For CONNECTION_STRING, which launches nothing.
        """
        if connect_with is ConnectWith.COMPASS:
            return self.compass
        if connect_with is ConnectWith.MONGOSH:
            return self.mongosh
        if connect_with is ConnectWith.VSCODE:
            return self.vscode
        raise ValueError(f"no connector for {connect_with.value}")


__all__ = [
    "Compass",
    "ConnectWith",
    "Connector",
    "ConnectorExitError",
    "Connectors",
    "Mongosh",
    "VsCode",
]
