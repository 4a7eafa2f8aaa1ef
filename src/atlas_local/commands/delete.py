"""Delete command: remove a deployment and all of its data."""

import logging
from dataclasses import dataclass
from typing import Annotated, Literal, Protocol, Union

from pydantic import BaseModel, Field

from atlas_local.dependencies import DeploymentDeleter
from atlas_local.exceptions import (
    ContainerRemoveError,
    ContainerStopError,
    DeploymentLookupError,
)
from atlas_local.interaction import (
    ConfirmationPrompt,
    ConfirmationPromptOptions,
    ConfirmationPromptResult,
    SpinnerInteraction,
)

logger = logging.getLogger(__name__)

DELETE_WARNING = (
    "This operation will delete the deployment, and all of its data. "
    "This action cannot be undone."
)


class DeleteInteraction(ConfirmationPrompt, SpinnerInteraction, Protocol):
    """Interaction capabilities needed by Delete."""


class DeleteDeleted(BaseModel):
    outcome: Literal["deleted"] = "deleted"
    deployment_name: str

    def __str__(self) -> str:
        return f"Deployment '{self.deployment_name}' deleted"


class DeleteCanceled(BaseModel):
    outcome: Literal["canceled"] = "canceled"
    deployment_name: str

    def __str__(self) -> str:
        return "Deployment not deleted"


class DeleteFailed(BaseModel):
    outcome: Literal["failed"] = "failed"
    deployment_name: str
    error: str

    def __str__(self) -> str:
        return f"Deleting deployment '{self.deployment_name}' failed: {self.error}"


DeleteResult = Annotated[
    Union[DeleteDeleted, DeleteCanceled, DeleteFailed], Field(discriminator="outcome")
]


@dataclass
class Delete:
    """
    Delete a deployment.

    Asks for confirmation unless force is set; declining or canceling the
    prompt leaves the deployment untouched.
    """

    deployment_name: str
    deployment_deleter: DeploymentDeleter
    interaction: DeleteInteraction
    force: bool = False

    async def execute(self) -> DeleteResult:
        if not self.force:
            answer = self.interaction.confirm(
                ConfirmationPromptOptions(
                    message=f"Are you sure you want to terminate '{self.deployment_name}'?",
                    help_message=DELETE_WARNING,
                    default=False,
                )
            )
            if answer is not ConfirmationPromptResult.YES:
                logger.debug("delete not confirmed (%s)", answer.value)
                return DeleteCanceled(deployment_name=self.deployment_name)

        with self.interaction.start_spinner("Deleting deployment..."):
            try:
                await self.deployment_deleter.delete_deployment(self.deployment_name)
            except DeploymentLookupError as e:
                return self._failed(f"deployment not found: {e}")
            except ContainerStopError as e:
                return self._failed(f"failed to stop the container: {e}")
            except ContainerRemoveError as e:
                return self._failed(f"failed to delete the container: {e}")

        return DeleteDeleted(deployment_name=self.deployment_name)

    def _failed(self, error: str) -> DeleteFailed:
        return DeleteFailed(deployment_name=self.deployment_name, error=error)
