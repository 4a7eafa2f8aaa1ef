"""Start command: bring a deployment to running, optionally waiting for health."""

import logging
from dataclasses import dataclass
from typing import Annotated, Literal, Protocol, Union

from pydantic import BaseModel, Field

from atlas_local.config import DEFAULT_HEALTH_TIMEOUT
from atlas_local.commands.lifecycle import (
    LifecycleAction,
    allow_unhealthy_initial_state,
    start_transition,
)
from atlas_local.dependencies import (
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
from atlas_local.interaction import SpinnerInteraction
from atlas_local.models import WatchOptions

logger = logging.getLogger(__name__)

TIMED_OUT_ERROR = "Waiting for deployment to become healthy timed out"
UNHEALTHY_ERROR = "Deployment became unhealthy"


class StartDeploymentManagement(
    DeploymentGetter, DeploymentStarter, DeploymentUnpauser, HealthWaiter, Protocol
):
    """Engine capabilities needed by Start."""


class StartStarted(BaseModel):
    outcome: Literal["started"] = "started"
    deployment_name: str

    def __str__(self) -> str:
        return f"Deployment '{self.deployment_name}' started"


class StartFailed(BaseModel):
    outcome: Literal["failed"] = "failed"
    deployment_name: str
    error: str

    def __str__(self) -> str:
        return f"Starting deployment '{self.deployment_name}' failed: {self.error}"


StartResult = Annotated[Union[StartStarted, StartFailed], Field(discriminator="outcome")]


@dataclass
class Start:
    """
    Start a deployment.

    Created and exited deployments are started, paused ones unpaused, and
    running or restarting ones left alone. With wait_for_healthy, the
    command then blocks until the health check passes or the timeout
    elapses.
    """

    deployment_name: str
    deployment_management: StartDeploymentManagement
    interaction: SpinnerInteraction
    wait_for_healthy: bool = True
    wait_for_healthy_timeout: float = DEFAULT_HEALTH_TIMEOUT

    async def execute(self) -> StartResult:
        logger.debug(
            "starting deployment '%s' (wait_for_healthy=%s)",
            self.deployment_name,
            self.wait_for_healthy,
        )

        with self.interaction.start_spinner("Starting deployment..."):
            try:
                deployment = await self.deployment_management.get_deployment(self.deployment_name)
            except ContainerInspectError as e:
                return StartFailed(deployment_name=self.deployment_name, error=str(e))
            except IntoDeploymentError as e:
                raise CommandError("Failed to get deployment, into deployment error", e) from e

            transition = start_transition(deployment.state)
            if transition.error is not None:
                logger.debug("deployment is %s, cannot start", deployment.state)
                return StartFailed(deployment_name=self.deployment_name, error=transition.error)

            if transition.action is LifecycleAction.START:
                await self.deployment_management.start(self.deployment_name)
            elif transition.action is LifecycleAction.UNPAUSE:
                await self.deployment_management.unpause(self.deployment_name)
            else:
                logger.debug("deployment is %s, nothing to do", deployment.state)

        if not self.wait_for_healthy:
            logger.info("deployment started, not waiting for it to become healthy")
            return StartStarted(deployment_name=self.deployment_name)

        with self.interaction.start_spinner("Waiting for deployment to become healthy..."):
            options = WatchOptions(
                timeout=self.wait_for_healthy_timeout,
                allow_unhealthy_initial_state=allow_unhealthy_initial_state(deployment.state),
            )
            try:
                await self.deployment_management.wait_for_healthy_deployment(
                    self.deployment_name, options
                )
            except WatchTimeoutError:
                return StartFailed(deployment_name=self.deployment_name, error=TIMED_OUT_ERROR)
            except UnhealthyDeploymentError:
                return StartFailed(deployment_name=self.deployment_name, error=UNHEALTHY_ERROR)
            except AtlasLocalError as e:
                raise CommandError("Failed to wait for healthy deployment", e) from e

        return StartStarted(deployment_name=self.deployment_name)
