"""
Container engine capabilities.

Every Protocol here covers one engine operation. DockerDeploymentClient in
atlas_local.docker.client implements all of them.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from atlas_local.models import CreateDeploymentOptions, Deployment, LogsOptions, WatchOptions

if TYPE_CHECKING:
    from atlas_local.docker.progress import CreateDeploymentProgress


@runtime_checkable
class DeploymentGetter(Protocol):
    """Look up a single deployment."""

    async def get_deployment(self, name: str) -> Deployment:
        """
        Get a deployment by name or container id.

        Raises:
            ContainerInspectError: If the container cannot be inspected.
            IntoDeploymentError: If the container is not a local deployment.
        """
        ...


@runtime_checkable
class DeploymentLister(Protocol):
    """List every local deployment."""

    async def list_deployments(self) -> list[Deployment]: ...


@runtime_checkable
class DeploymentCreator(Protocol):
    """Create a deployment through the multi-stage pipeline."""

    def create_deployment(self, options: CreateDeploymentOptions) -> "CreateDeploymentProgress":
        """
        Start creating a deployment.

        Returns immediately with a progress handle; the pipeline runs as a
        task on the current event loop.
        """
        ...


@runtime_checkable
class DeploymentStarter(Protocol):
    async def start(self, name: str) -> None: ...


@runtime_checkable
class DeploymentStopper(Protocol):
    async def stop(self, name: str) -> None: ...


@runtime_checkable
class DeploymentPauser(Protocol):
    async def pause(self, name: str) -> None: ...


@runtime_checkable
class DeploymentUnpauser(Protocol):
    async def unpause(self, name: str) -> None: ...


@runtime_checkable
class DeploymentDeleter(Protocol):
    async def delete_deployment(self, name: str) -> None:
        """
        Stop (if needed) and remove a deployment with its volumes.

        Raises:
            DeleteDeploymentError: Subclass naming the failing step.
        """
        ...


@runtime_checkable
class HealthWaiter(Protocol):
    """Wait until a deployment reports healthy."""

    async def wait_for_healthy_deployment(self, name: str, options: WatchOptions) -> None:
        """
        Block until the deployment's health check passes.

        Raises:
            WatchTimeoutError: If options.timeout elapses first.
            UnhealthyDeploymentError: If the deployment reports unhealthy.
        """
        ...


@runtime_checkable
class ConnectionStringGetter(Protocol):
    async def get_connection_string(self, name: str) -> str: ...


@runtime_checkable
class LogsGetter(Protocol):
    async def get_logs(self, name: str, options: LogsOptions) -> list[str]: ...
