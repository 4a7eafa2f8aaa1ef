"""Stop command."""

import logging
from dataclasses import dataclass
from typing import Annotated, Literal, Protocol, Union

from pydantic import BaseModel, Field

from atlas_local.commands.lifecycle import LifecycleAction, stop_transition
from atlas_local.dependencies import DeploymentGetter, DeploymentStopper
from atlas_local.exceptions import CommandError, ContainerInspectError, IntoDeploymentError
from atlas_local.interaction import SpinnerInteraction

logger = logging.getLogger(__name__)


class StopDeploymentManagement(DeploymentGetter, DeploymentStopper, Protocol):
    """Engine capabilities needed by Stop."""


class StopStopped(BaseModel):
    outcome: Literal["stopped"] = "stopped"
    deployment_name: str

    def __str__(self) -> str:
        return f"Deployment '{self.deployment_name}' stopped"


class StopFailed(BaseModel):
    outcome: Literal["failed"] = "failed"
    deployment_name: str
    error: str

    def __str__(self) -> str:
        return f"Stopping deployment '{self.deployment_name}' failed: {self.error}"


StopResult = Annotated[Union[StopStopped, StopFailed], Field(discriminator="outcome")]


@dataclass
class Stop:
    """Stop a running, restarting or paused deployment."""

    deployment_name: str
    deployment_management: StopDeploymentManagement
    interaction: SpinnerInteraction

    async def execute(self) -> StopResult:
        with self.interaction.start_spinner("Stopping deployment..."):
            try:
                deployment = await self.deployment_management.get_deployment(self.deployment_name)
            except ContainerInspectError as e:
                return StopFailed(deployment_name=self.deployment_name, error=str(e))
            except IntoDeploymentError as e:
                raise CommandError("Failed to get deployment, into deployment error", e) from e

            transition = stop_transition(deployment.state)
            if transition.error is not None:
                return StopFailed(deployment_name=self.deployment_name, error=transition.error)

            if transition.action is LifecycleAction.STOP:
                await self.deployment_management.stop(self.deployment_name)
            else:
                logger.debug("deployment is %s, already stopped", deployment.state)

        return StopStopped(deployment_name=self.deployment_name)
