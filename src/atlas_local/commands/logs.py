"""Logs command."""

from dataclasses import dataclass

from pydantic import RootModel

from atlas_local.dependencies import LogsGetter
from atlas_local.exceptions import AtlasLocalError, CommandError
from atlas_local.models import LogsOptions


class LogsResult(RootModel[list[str]]):
    """Log lines of a deployment, stdout and stderr combined."""

    def __str__(self) -> str:
        return "\n".join(self.root)


@dataclass
class Logs:
    deployment_name: str
    logs_getter: LogsGetter

    async def execute(self) -> LogsResult:
        try:
            lines = await self.logs_getter.get_logs(
                self.deployment_name, LogsOptions(stdout=True, stderr=True)
            )
        except AtlasLocalError as e:
            raise CommandError("retrieving deployment logs", e) from e
        return LogsResult([line.rstrip() for line in lines])
