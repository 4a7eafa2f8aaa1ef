"""Connect command: start the deployment if needed, then open a tool on it."""

import logging
from dataclasses import dataclass, field
from typing import Annotated, Literal, Protocol, Union

from pydantic import BaseModel, Field

from atlas_local.config import DEFAULT_HEALTH_TIMEOUT
from atlas_local.commands.connectors import ConnectWith, Connectors
from atlas_local.commands.lifecycle import LifecycleAction, start_transition
from atlas_local.commands.start import TIMED_OUT_ERROR, UNHEALTHY_ERROR
from atlas_local.dependencies import (
    ConnectionStringGetter,
    DeploymentGetter,
    DeploymentStarter,
    DeploymentUnpauser,
    HealthWaiter,
)
from atlas_local.exceptions import (
    AtlasLocalError,
    CommandError,
    ContainerInspectError,
    IntoDeploymentError,
    UnhealthyDeploymentError,
    WatchTimeoutError,
)
from atlas_local.interaction import MultiStepSpinnerInteraction, MultiStepSpinnerOutcome
from atlas_local.models import Deployment, WatchOptions

logger = logging.getLogger(__name__)

WAIT_FOR_HEALTHY_STEP = "Waiting for deployment to become healthy..."


class ConnectDeploymentManagement(
    DeploymentGetter,
    DeploymentStarter,
    DeploymentUnpauser,
    HealthWaiter,
    ConnectionStringGetter,
    Protocol,
):
    """Engine capabilities needed by Connect."""


class ConnectSuccess(BaseModel):
    outcome: Literal["success"] = "success"
    deployment_name: str
    connection_string: str | None = None

    def __str__(self) -> str:
        if self.connection_string is not None:
            return f"The connection string for the deployment is: {self.connection_string}"
        return "Finished successfully connecting to deployment"


class ConnectFailed(BaseModel):
    outcome: Literal["failed"] = "failed"
    deployment_name: str
    error: str

    def __str__(self) -> str:
        return f"Failed to connect to deployment: {self.error}"


ConnectResult = Annotated[Union[ConnectSuccess, ConnectFailed], Field(discriminator="outcome")]


@dataclass
class Connect:
    """
    Connect to a deployment.

    A stopped or paused deployment is started (or unpaused) and waited on
    first. With ConnectWith.CONNECTION_STRING the connection string is
    returned and no tool is looked up.
    """

    deployment_name: str
    connect_with: ConnectWith
    deployment_management: ConnectDeploymentManagement
    interaction: MultiStepSpinnerInteraction
    connectors: Connectors = field(default_factory=Connectors)
    wait_for_healthy_timeout: float = DEFAULT_HEALTH_TIMEOUT

    async def execute(self) -> ConnectResult:
        try:
            deployment = await self.deployment_management.get_deployment(self.deployment_name)
        except ContainerInspectError:
            return self._failed(f"Container {self.deployment_name} does not exist")
        except IntoDeploymentError as e:
            raise CommandError("Failed to get deployment, into deployment error", e) from e

        failed = await self._start_deployment_if_needed(deployment)
        if failed is not None:
            return failed

        try:
            connection_string = await self.deployment_management.get_connection_string(
                deployment.container_id
            )
        except AtlasLocalError as e:
            raise CommandError("getting connection string", e) from e

        if self.connect_with is ConnectWith.CONNECTION_STRING:
            return ConnectSuccess(
                deployment_name=self.deployment_name, connection_string=connection_string
            )

        connector = self.connectors.get(self.connect_with)
        if not connector.is_available():
            return self._failed(f"{self.connect_with.tool_name} is not installed")

        await connector.launch(self.deployment_name, connection_string)
        return ConnectSuccess(deployment_name=self.deployment_name)

    async def _start_deployment_if_needed(self, deployment: Deployment) -> ConnectFailed | None:
        transition = start_transition(deployment.state)
        if transition.error is not None:
            return self._failed(transition.error)
        if transition.action is LifecycleAction.NONE:
            return None

        unpausing = transition.action is LifecycleAction.UNPAUSE
        first_step = "Unpausing deployment..." if unpausing else "Starting deployment..."

        with self.interaction.start_multi_step_spinner([first_step, WAIT_FOR_HEALTHY_STEP]) as spinner:
            try:
                if unpausing:
                    await self.deployment_management.unpause(self.deployment_name)
                else:
                    await self.deployment_management.start(self.deployment_name)
            except AtlasLocalError as e:
                spinner.set_step_outcome(0, MultiStepSpinnerOutcome.FAILURE)
                spinner.set_step_outcome(1, MultiStepSpinnerOutcome.SKIPPED)
                raise CommandError("starting deployment", e) from e
            spinner.set_step_outcome(0, MultiStepSpinnerOutcome.SUCCESS)

            try:
                await self.deployment_management.wait_for_healthy_deployment(
                    self.deployment_name,
                    WatchOptions(
                        timeout=self.wait_for_healthy_timeout,
                        allow_unhealthy_initial_state=unpausing,
                    ),
                )
            except WatchTimeoutError:
                spinner.set_step_outcome(1, MultiStepSpinnerOutcome.FAILURE)
                return self._failed(TIMED_OUT_ERROR)
            except UnhealthyDeploymentError:
                spinner.set_step_outcome(1, MultiStepSpinnerOutcome.FAILURE)
                return self._failed(UNHEALTHY_ERROR)
            except AtlasLocalError as e:
                spinner.set_step_outcome(1, MultiStepSpinnerOutcome.FAILURE)
                raise CommandError("Failed to wait for healthy deployment", e) from e
            spinner.set_step_outcome(1, MultiStepSpinnerOutcome.SUCCESS)

        return None

    def _failed(self, error: str) -> ConnectFailed:
        return ConnectFailed(deployment_name=self.deployment_name, error=error)
