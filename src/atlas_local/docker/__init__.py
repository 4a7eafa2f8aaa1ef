"""Docker engine adapter and deployment creation progress."""

from atlas_local.docker.client import DockerDeploymentClient
from atlas_local.docker.progress import (
    CreateDeploymentProgress,
    CreateDeploymentStep,
    CreateDeploymentStepOutcome,
)

__all__ = [
    "CreateDeploymentProgress",
    "CreateDeploymentStep",
    "CreateDeploymentStepOutcome",
    "DockerDeploymentClient",
]
