"""
Progress handle for the deployment creation pipeline.

CreateDeploymentProgress owns five one-shot futures: one outcome per
pipeline stage (pull image, create container, start container, wait until
healthy) and the final deployment-or-error resolution. The producer (the
pipeline task) resolves them; the consumer (the setup command) awaits them.

Stage outcomes are resolved strictly in pipeline order. The final
resolution is independent: it may be awaited before, after or between the
stage outcomes.
"""

import asyncio
import logging
from enum import Enum, IntEnum

from atlas_local.exceptions import CreateDeploymentError, ReceiveDeploymentError
from atlas_local.models import Deployment

logger = logging.getLogger(__name__)


class CreateDeploymentStep(IntEnum):
    """Pipeline stages, in execution order."""

    PULL_IMAGE = 0
    CREATE_CONTAINER = 1
    START_CONTAINER = 2
    WAIT_FOR_HEALTHY = 3


class CreateDeploymentStepOutcome(str, Enum):
    """Outcome of a single pipeline stage."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILURE = "failure"


class CreateDeploymentProgress:
    """
    In-flight deployment creation.

    Must be constructed inside a running event loop.

    Attributes:
        task: The pipeline task producing the outcomes, if any.
    """

    def __init__(self) -> None:
        loop = asyncio.get_running_loop()
        self._steps: list[asyncio.Future[CreateDeploymentStepOutcome]] = [
            loop.create_future() for _ in CreateDeploymentStep
        ]
        self._deployment: asyncio.Future[Deployment] = loop.create_future()
        self._next_step: CreateDeploymentStep | None = CreateDeploymentStep.PULL_IMAGE
        self.task: asyncio.Task | None = None

    # --- producer side -----------------------------------------------------

    def set_step_outcome(
        self, step: CreateDeploymentStep, outcome: CreateDeploymentStepOutcome
    ) -> None:
        """
        Resolve a stage outcome.

        Raises:
            RuntimeError: If the stage is resolved out of pipeline order.
        """
        if step != self._next_step:
            raise RuntimeError(
                f"stage {step.name} resolved out of order, expected {self._next_step!r}"
            )
        logger.debug("create deployment stage %s: %s", step.name, outcome.value)
        self._steps[step].set_result(outcome)
        if step < CreateDeploymentStep.WAIT_FOR_HEALTHY:
            self._next_step = CreateDeploymentStep(step + 1)
        else:
            self._next_step = None

    def fail_step(self, step: CreateDeploymentStep) -> None:
        """Mark a stage as failed and every later stage as skipped."""
        self.set_step_outcome(step, CreateDeploymentStepOutcome.FAILURE)
        for later in CreateDeploymentStep:
            if later > step:
                self.set_step_outcome(later, CreateDeploymentStepOutcome.SKIPPED)

    def set_deployment(self, deployment: Deployment) -> None:
        self._deployment.set_result(deployment)

    def set_error(self, error: CreateDeploymentError) -> None:
        self._deployment.set_exception(error)

    def abandon(self) -> None:
        """Drop every unresolved future; consumers see ReceiveDeploymentError."""
        for future in (*self._steps, self._deployment):
            if not future.done():
                future.cancel()

    # --- consumer side -----------------------------------------------------

    async def _receive(self, future: asyncio.Future):
        await asyncio.wait([future])
        if future.cancelled():
            raise ReceiveDeploymentError()
        return future.result()

    async def wait_for_step_outcome(self, step: CreateDeploymentStep) -> CreateDeploymentStepOutcome:
        """
        Wait for a stage outcome.

        Raises:
            ReceiveDeploymentError: If the producer abandoned the pipeline.
        """
        return await self._receive(self._steps[step])

    async def wait_for_pull_image_outcome(self) -> CreateDeploymentStepOutcome:
        return await self.wait_for_step_outcome(CreateDeploymentStep.PULL_IMAGE)

    async def wait_for_create_container_outcome(self) -> CreateDeploymentStepOutcome:
        return await self.wait_for_step_outcome(CreateDeploymentStep.CREATE_CONTAINER)

    async def wait_for_start_container_outcome(self) -> CreateDeploymentStepOutcome:
        return await self.wait_for_step_outcome(CreateDeploymentStep.START_CONTAINER)

    async def wait_for_healthy_outcome(self) -> CreateDeploymentStepOutcome:
        return await self.wait_for_step_outcome(CreateDeploymentStep.WAIT_FOR_HEALTHY)

    async def wait_for_deployment_outcome(self) -> Deployment:
        """
        Wait for the final resolution.

        Raises:
            CreateDeploymentError: Business failure of the creation.
            ReceiveDeploymentError: If the producer abandoned the pipeline.
        """
        return await self._receive(self._deployment)
