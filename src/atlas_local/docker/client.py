"""Docker engine adapter for local deployments.

Implements every deployment capability with python-on-whales. All methods use
run_in_executor so the blocking docker CLI calls never stall the event loop
(and with it the spinners).

Containers belonging to this tool carry the label
``mongodb-atlas-local=container``; the server version comes from the image's
``version`` label and the creation settings from the container environment.
"""

import asyncio
import logging
import random
from typing import Any
from urllib.parse import quote_plus

from pydantic import ValidationError
from python_on_whales import docker
from python_on_whales.exceptions import DockerException, NoSuchContainer

from atlas_local.config import DEFAULT_IMAGE
from atlas_local.docker.progress import (
    CreateDeploymentProgress,
    CreateDeploymentStep,
    CreateDeploymentStepOutcome,
)
from atlas_local.exceptions import (
    ContainerCreateError,
    ContainerInspectError,
    ContainerRemoveError,
    ContainerStartError,
    ContainerStopError,
    CreateDeploymentError,
    DeploymentEngineError,
    DeploymentLookupError,
    DeploymentNameInUseError,
    GetDeploymentError,
    HealthCheckError,
    ImagePullError,
    IntoDeploymentError,
    UnhealthyDeploymentError,
    WatchDeploymentError,
    WatchTimeoutError,
)
from atlas_local.models import (
    BindingType,
    CreateDeploymentOptions,
    Deployment,
    LogsOptions,
    PortBinding,
    State,
    WatchOptions,
)

logger = logging.getLogger(__name__)

LOCAL_DEPLOYMENT_LABEL = "mongodb-atlas-local"
LOCAL_DEPLOYMENT_LABEL_VALUE = "container"
MONGODB_PORT = "27017/tcp"
SEED_DIRECTORY = "/docker-entrypoint-initdb.d"

# Seconds between two health checks
HEALTH_POLL_INTERVAL = 0.5


def _env_dict(env: list[str] | None) -> dict[str, str]:
    pairs = (item.split("=", 1) for item in env or [] if "=" in item)
    return {key: value for key, value in pairs}


def _host_port(container: Any) -> PortBinding | None:
    ports = container.network_settings.ports or {}
    bindings = ports.get(MONGODB_PORT) or []
    if not bindings:
        return None
    binding = bindings[0]
    host_ip = getattr(binding, "host_ip", None) or ""
    host_port = getattr(binding, "host_port", None)
    return PortBinding(
        binding_type=BindingType.LOOPBACK if host_ip.startswith("127.") else BindingType.ANY_INTERFACE,
        port=int(host_port) if host_port else None,
    )


def into_deployment(container: Any) -> Deployment:
    """Convert an inspected python-on-whales container into a Deployment.

    Raises:
        IntoDeploymentError: If the container is not a local deployment.
    """
    name = (container.name or "").lstrip("/")
    labels = container.config.labels or {}
    if labels.get(LOCAL_DEPLOYMENT_LABEL) != LOCAL_DEPLOYMENT_LABEL_VALUE:
        raise IntoDeploymentError(name or container.id, "container is not a local Atlas deployment")

    env = _env_dict(container.config.env)
    try:
        return Deployment(
            container_id=container.id,
            name=name or None,
            mongodb_version=labels.get("version", ""),
            state=State.from_docker(container.state.status),
            port_bindings=_host_port(container),
            mongodb_type=labels.get("mongodb-type", "community"),
            creation_source=labels.get("creation-source"),
            local_seed_location=next(
                (
                    mount.source
                    for mount in container.mounts or []
                    if mount.destination == SEED_DIRECTORY
                ),
                None,
            ),
            mongodb_initdb_database=env.get("MONGODB_INITDB_DATABASE"),
            mongodb_initdb_root_username=env.get("MONGODB_INITDB_ROOT_USERNAME"),
            mongodb_initdb_root_password=env.get("MONGODB_INITDB_ROOT_PASSWORD"),
            mongodb_load_sample_data=(
                env["MONGODB_LOAD_SAMPLE_DATA"].lower() == "true"
                if "MONGODB_LOAD_SAMPLE_DATA" in env
                else None
            ),
            voyage_api_key=env.get("VOYAGE_API_KEY"),
            do_not_track=env.get("DO_NOT_TRACK") in ("1", "true"),
        )
    except (ValidationError, ValueError) as e:
        raise IntoDeploymentError(name or container.id, str(e)) from e


def generate_deployment_name() -> str:
    return f"local{random.randint(1000, 9999)}"


class DockerDeploymentClient:
    """Container engine client for local deployments.

    Implements async wrappers for every deployment capability.
    """

    def __init__(self, docker_client: Any = None):
        """Initialize with a python-on-whales client (the default docker one)."""
        self._docker = docker_client or docker

    async def _run(self, fn, *args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: fn(*args, **kwargs))

    async def ping(self) -> None:
        """Check that the docker daemon answers.

        Raises:
            DockerException: If it does not.
        """
        await self._run(self._docker.system.info)

    async def get_deployment(self, name: str) -> Deployment:
        """Inspect a container and convert it.

        Raises:
            ContainerInspectError: If the container cannot be inspected.
            IntoDeploymentError: If it is not a local deployment.
        """
        try:
            container = await self._run(self._docker.container.inspect, name)
        except NoSuchContainer as e:
            raise ContainerInspectError(name, f"container '{name}' does not exist") from e
        except DockerException as e:
            raise ContainerInspectError(name, f"inspecting container '{name}': {e}") from e
        return into_deployment(container)

    async def list_deployments(self) -> list[Deployment]:
        containers = await self._run(
            self._docker.container.list,
            all=True,
            filters={"label": f"{LOCAL_DEPLOYMENT_LABEL}={LOCAL_DEPLOYMENT_LABEL_VALUE}"},
        )

        deployments = []
        for container in containers:
            try:
                deployments.append(into_deployment(container))
            except IntoDeploymentError as e:
                logger.warning("skipping container %s: %s", container.id, e)
        return deployments

    async def start(self, name: str) -> None:
        await self._engine_call("starting", name, self._docker.container.start, name)

    async def stop(self, name: str) -> None:
        await self._engine_call("stopping", name, self._docker.container.stop, name)

    async def pause(self, name: str) -> None:
        await self._engine_call("pausing", name, self._docker.container.pause, name)

    async def unpause(self, name: str) -> None:
        await self._engine_call("unpausing", name, self._docker.container.unpause, name)

    async def _engine_call(self, operation: str, name: str, fn, *args, **kwargs):
        logger.debug("%s deployment '%s'", operation, name)
        try:
            return await self._run(fn, *args, **kwargs)
        except DockerException as e:
            raise DeploymentEngineError(operation, name, str(e)) from e

    async def delete_deployment(self, name: str) -> None:
        """Stop and remove a deployment with its anonymous volumes.

        Raises:
            DeploymentLookupError: If the deployment cannot be found.
            ContainerStopError: If stopping fails.
            ContainerRemoveError: If removal fails.
        """
        try:
            deployment = await self.get_deployment(name)
        except GetDeploymentError as e:
            raise DeploymentLookupError(name, str(e)) from e

        if deployment.state in (State.RUNNING, State.RESTARTING, State.PAUSED):
            try:
                await self._run(self._docker.container.stop, name)
            except DockerException as e:
                raise ContainerStopError(name, str(e)) from e

        try:
            await self._run(self._docker.container.remove, name, volumes=True)
        except DockerException as e:
            raise ContainerRemoveError(name, str(e)) from e

    async def wait_for_healthy_deployment(self, name: str, options: WatchOptions) -> None:
        """Poll the container health check until it reports healthy.

        An "unhealthy" report is tolerated until the first "starting" or
        "healthy" one when options.allow_unhealthy_initial_state is set,
        since a container that was just unpaused reports its stale status.

        Raises:
            WatchTimeoutError: If options.timeout elapses first.
            UnhealthyDeploymentError: If the deployment reports unhealthy.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + options.timeout
        tolerate_unhealthy = options.allow_unhealthy_initial_state

        while True:
            try:
                container = await self._run(self._docker.container.inspect, name)
            except DockerException as e:
                raise DeploymentEngineError("inspecting", name, str(e)) from e

            health = container.state.health
            status = health.status if health is not None else None
            logger.debug("deployment '%s' health: %s", name, status)

            if status == "healthy" or (status is None and container.state.running):
                return
            if status == "unhealthy" and not tolerate_unhealthy:
                raise UnhealthyDeploymentError(name)
            if status == "starting":
                tolerate_unhealthy = False

            if loop.time() >= deadline:
                raise WatchTimeoutError(name, options.timeout)
            await asyncio.sleep(HEALTH_POLL_INTERVAL)

    async def get_connection_string(self, name: str) -> str:
        try:
            container = await self._run(self._docker.container.inspect, name)
        except DockerException as e:
            raise DeploymentEngineError("inspecting", name, str(e)) from e

        binding = _host_port(container)
        if binding is None or binding.port is None:
            raise DeploymentEngineError(
                "getting the connection string of", name, "MongoDB port is not published"
            )

        env = _env_dict(container.config.env)
        credentials = ""
        username = env.get("MONGODB_INITDB_ROOT_USERNAME")
        if username:
            password = env.get("MONGODB_INITDB_ROOT_PASSWORD", "")
            credentials = f"{quote_plus(username)}:{quote_plus(password)}@"
        return f"mongodb://{credentials}127.0.0.1:{binding.port}/?directConnection=true"

    async def get_logs(self, name: str, options: LogsOptions) -> list[str]:
        def _blocking_logs():
            lines = []
            for source, chunk in self._docker.container.logs(name, tail=options.tail, stream=True):
                if (source == "stdout" and options.stdout) or (source == "stderr" and options.stderr):
                    lines.extend(chunk.decode("utf-8", errors="replace").splitlines())
            return lines

        try:
            return await self._run(_blocking_logs)
        except DockerException as e:
            raise DeploymentEngineError("retrieving logs of", name, str(e)) from e

    def create_deployment(self, options: CreateDeploymentOptions) -> CreateDeploymentProgress:
        """Schedule the creation pipeline and return its progress handle."""
        progress = CreateDeploymentProgress()
        progress.task = asyncio.create_task(self._run_create_pipeline(options, progress))
        return progress

    async def _run_create_pipeline(
        self, options: CreateDeploymentOptions, progress: CreateDeploymentProgress
    ) -> None:
        name = options.name or generate_deployment_name()
        try:
            deployment = await self._create_pipeline(name, options, progress)
        except CreateDeploymentError as e:
            progress.set_error(e)
        except Exception:
            logger.exception("deployment creation pipeline crashed")
            progress.abandon()
        else:
            progress.set_deployment(deployment)

    async def _create_pipeline(
        self, name: str, options: CreateDeploymentOptions, progress: CreateDeploymentProgress
    ) -> Deployment:
        version = str(options.mongodb_version) if options.mongodb_version else "latest"
        image = f"{options.image or DEFAULT_IMAGE}:{version}"

        if options.skip_pull_image:
            progress.set_step_outcome(CreateDeploymentStep.PULL_IMAGE, CreateDeploymentStepOutcome.SKIPPED)
        else:
            logger.debug("pulling image %s", image)
            try:
                await self._run(self._docker.image.pull, image, quiet=True)
            except DockerException as e:
                progress.fail_step(CreateDeploymentStep.PULL_IMAGE)
                raise ImagePullError(name, f"failed to pull image '{image}': {e}") from e
            progress.set_step_outcome(CreateDeploymentStep.PULL_IMAGE, CreateDeploymentStepOutcome.SUCCESS)

        try:
            exists = await self._run(self._docker.container.exists, name)
            if exists:
                raise DeploymentNameInUseError(name)
            await self._run(self._docker.container.create, image, **self._create_kwargs(name, options))
        except DeploymentNameInUseError:
            progress.fail_step(CreateDeploymentStep.CREATE_CONTAINER)
            raise
        except DockerException as e:
            progress.fail_step(CreateDeploymentStep.CREATE_CONTAINER)
            raise ContainerCreateError(name, f"failed to create container: {e}") from e
        progress.set_step_outcome(CreateDeploymentStep.CREATE_CONTAINER, CreateDeploymentStepOutcome.SUCCESS)

        try:
            await self._run(self._docker.container.start, name)
        except DockerException as e:
            progress.fail_step(CreateDeploymentStep.START_CONTAINER)
            raise ContainerStartError(name, f"failed to start container: {e}") from e
        progress.set_step_outcome(CreateDeploymentStep.START_CONTAINER, CreateDeploymentStepOutcome.SUCCESS)

        if options.wait_until_healthy:
            try:
                await self.wait_for_healthy_deployment(
                    name, WatchOptions(timeout=options.wait_until_healthy_timeout)
                )
            except (WatchDeploymentError, DeploymentEngineError) as e:
                progress.fail_step(CreateDeploymentStep.WAIT_FOR_HEALTHY)
                raise HealthCheckError(name, str(e)) from e
            progress.set_step_outcome(CreateDeploymentStep.WAIT_FOR_HEALTHY, CreateDeploymentStepOutcome.SUCCESS)
        else:
            progress.set_step_outcome(CreateDeploymentStep.WAIT_FOR_HEALTHY, CreateDeploymentStepOutcome.SKIPPED)

        try:
            return await self.get_deployment(name)
        except GetDeploymentError as e:
            raise CreateDeploymentError(name, str(e)) from e

    def _create_kwargs(self, name: str, options: CreateDeploymentOptions) -> dict[str, Any]:
        envs = {"TOOL": "ATLASCLI"}
        if options.do_not_track:
            envs["DO_NOT_TRACK"] = "1"
        if options.mongodb_initdb_root_username:
            envs["MONGODB_INITDB_ROOT_USERNAME"] = options.mongodb_initdb_root_username
        if options.mongodb_initdb_root_password:
            envs["MONGODB_INITDB_ROOT_PASSWORD"] = options.mongodb_initdb_root_password
        if options.load_sample_data:
            envs["MONGODB_LOAD_SAMPLE_DATA"] = "true"
        if options.voyage_api_key:
            envs["VOYAGE_API_KEY"] = options.voyage_api_key

        binding = options.port_binding or PortBinding(binding_type=BindingType.LOOPBACK)
        host = f"{binding.host_ip}:{binding.port or ''}"

        kwargs: dict[str, Any] = {
            "name": name,
            "labels": {
                LOCAL_DEPLOYMENT_LABEL: LOCAL_DEPLOYMENT_LABEL_VALUE,
                "creation-source": options.creation_source.value,
            },
            "envs": envs,
            "publish": [(host, 27017)],
        }
        if options.local_seed_location:
            kwargs["volumes"] = [(options.local_seed_location, SEED_DIRECTORY)]
        return kwargs
