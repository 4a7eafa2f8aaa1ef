"""List command."""

from dataclasses import dataclass

from pydantic import RootModel

from atlas_local.dependencies import DeploymentLister
from atlas_local.models import ListedDeployment
from atlas_local.table import Table

DEPLOYMENTS_TABLE = (
    Table[ListedDeployment]()
    .add_column("NAME", lambda row: row.name)
    .add_column("MDB VER", lambda row: row.mongo_db_version)
    .add_column("STATE", lambda row: row.state)
)


class ListResult(RootModel[list[ListedDeployment]]):
    """Every local deployment; JSON output is a plain array."""

    def __str__(self) -> str:
        return DEPLOYMENTS_TABLE.render(self.root)


@dataclass
class List:
    deployment_lister: DeploymentLister

    async def execute(self) -> ListResult:
        deployments = await self.deployment_lister.list_deployments()
        return ListResult([ListedDeployment.from_deployment(d) for d in deployments])
