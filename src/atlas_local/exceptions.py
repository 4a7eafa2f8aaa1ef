"""
Exception classes for fatal conditions.

Expected, user-facing outcomes (deployment not found, user canceled, index
build failed) are never raised: commands return them as result variants.
The exceptions below cover everything else:

- ConfigError: invalid environment configuration
- CommandError: a fatal error wrapped with the operation being attempted
- GetDeploymentError: looking up a deployment failed (inspect or conversion)
- WatchDeploymentError: waiting for a healthy deployment failed
- CreateDeploymentError: the creation pipeline failed or was abandoned
- DeleteDeploymentError: deleting a deployment failed
- DeploymentEngineError: any other container engine call failed
- MongoClientError: no database client could be built for a deployment
- SearchIndexError: a search index driver call failed

Per project patterns:
- Store context data in attributes for error handling
- Include descriptive message with relevant details
"""


class AtlasLocalError(Exception):
    """Base class for all atlas-local errors."""


class ConfigError(AtlasLocalError):
    """
    Raised when an environment variable holds an invalid value.

    Attributes:
        name: Environment variable or flag name
        reason: What is wrong with it
    """

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"{name}: {reason}")


class CommandError(AtlasLocalError):
    """
    Raised when a command hits a fatal error.

    Attributes:
        context: The operation being attempted (e.g. "retrieving deployment logs")
        cause: The underlying error
    """

    def __init__(self, context: str, cause: BaseException | str) -> None:
        self.context = context
        self.cause = cause
        super().__init__(f"{context}: {cause}")


# --- deployment lookup -----------------------------------------------------


class GetDeploymentError(AtlasLocalError):
    """
    Raised when a deployment cannot be looked up.

    Attributes:
        deployment_name: Name or container id that was looked up
        reason: Underlying cause
    """

    def __init__(self, deployment_name: str, reason: str) -> None:
        self.deployment_name = deployment_name
        self.reason = reason
        super().__init__(reason)


class ContainerInspectError(GetDeploymentError):
    """The container could not be inspected (usually: it does not exist)."""


class IntoDeploymentError(GetDeploymentError):
    """The container exists but is not a valid local Atlas deployment."""


# --- health wait -----------------------------------------------------------


class WatchDeploymentError(AtlasLocalError):
    """
    Raised when waiting for a healthy deployment fails.

    Attributes:
        deployment_name: Deployment being watched
    """

    def __init__(self, deployment_name: str, message: str) -> None:
        self.deployment_name = deployment_name
        super().__init__(message)


class WatchTimeoutError(WatchDeploymentError):
    """
    The deployment did not become healthy within the timeout.

    Attributes:
        timeout: Timeout in seconds
    """

    def __init__(self, deployment_name: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            deployment_name,
            f"deployment '{deployment_name}' did not become healthy within {timeout:g}s",
        )


class UnhealthyDeploymentError(WatchDeploymentError):
    """The deployment reported an unhealthy status."""

    def __init__(self, deployment_name: str) -> None:
        super().__init__(deployment_name, f"deployment '{deployment_name}' is unhealthy")


# --- creation --------------------------------------------------------------


class CreateDeploymentError(AtlasLocalError):
    """
    Raised (or delivered through a progress handle) when creation fails.

    Attributes:
        deployment_name: Name of the deployment, if one was known
        reason: Underlying cause
    """

    def __init__(self, deployment_name: str | None, reason: str) -> None:
        self.deployment_name = deployment_name
        self.reason = reason
        super().__init__(reason)


class ReceiveDeploymentError(CreateDeploymentError):
    """The final deployment value was never delivered by the pipeline."""

    def __init__(self, deployment_name: str | None = None) -> None:
        super().__init__(
            deployment_name,
            "the deployment creation pipeline ended without delivering a result",
        )


class ImagePullError(CreateDeploymentError):
    """Pulling the MongoDB image failed."""


class DeploymentNameInUseError(CreateDeploymentError):
    """A container with the requested name already exists."""

    def __init__(self, deployment_name: str) -> None:
        super().__init__(
            deployment_name,
            f"a deployment named '{deployment_name}' already exists",
        )


class ContainerCreateError(CreateDeploymentError):
    """Creating the container failed."""


class ContainerStartError(CreateDeploymentError):
    """Starting the freshly created container failed."""


class HealthCheckError(CreateDeploymentError):
    """The freshly created deployment did not become healthy."""


# --- deletion --------------------------------------------------------------


class DeleteDeploymentError(AtlasLocalError):
    """
    Raised when deleting a deployment fails.

    Attributes:
        deployment_name: Deployment being deleted
        reason: Underlying cause
    """

    def __init__(self, deployment_name: str, reason: str) -> None:
        self.deployment_name = deployment_name
        self.reason = reason
        super().__init__(reason)


class DeploymentLookupError(DeleteDeploymentError):
    """The deployment to delete could not be found."""


class ContainerStopError(DeleteDeploymentError):
    """The container could not be stopped before removal."""


class ContainerRemoveError(DeleteDeploymentError):
    """The container could not be removed."""


# --- other engine calls ----------------------------------------------------


class DeploymentEngineError(AtlasLocalError):
    """
    Raised when a container engine call fails.

    Attributes:
        operation: What was being done (e.g. "starting", "retrieving logs of")
        deployment_name: Deployment involved
        reason: Underlying cause
    """

    def __init__(self, operation: str, deployment_name: str, reason: str) -> None:
        self.operation = operation
        self.deployment_name = deployment_name
        self.reason = reason
        super().__init__(f"{operation} deployment '{deployment_name}' failed: {reason}")


# --- database client -------------------------------------------------------


class MongoClientError(AtlasLocalError):
    """
    A database client could not be created for a local deployment.

    Commands receive this as a value (not raised) and report it as a
    failed result.

    Attributes:
        reason: Underlying cause
    """

    prefix = "Failed to create mongodb client"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"{self.prefix}: {reason}")


class ConnectingToDockerError(MongoClientError):
    """The docker daemon could not be reached."""

    prefix = "Failed to connect to docker"


class GettingConnectionStringError(MongoClientError):
    """The deployment's connection string could not be determined."""

    prefix = "Failed to get connection string for local deployment"


class CreatingMongoClientError(MongoClientError):
    """The driver rejected the connection string or options."""


class SearchIndexError(AtlasLocalError):
    """
    Raised when a search index driver call fails.

    The message is the server's error message where one is available.
    """
