"""
Setup command: create a deployment and optionally connect to it.

The flow is:
1. Unless --force, ask how to set up (defaults / custom / cancel) and, for
   custom settings, prompt for any field not given as a flag.
2. Start the creation pipeline and report its four stages (pull image,
   create container, start container, wait until healthy) on a multi-step
   spinner, in pipeline order.
3. Await the final deployment. A typed creation error becomes a failed
   result; a pipeline that never delivers one is fatal.
4. Connect with the chosen tool, print the connection string, or skip.
"""

import logging
from dataclasses import dataclass, field
from typing import Annotated, Literal, Protocol, Union

from pydantic import BaseModel, Field

from atlas_local.commands.connectors import ConnectWith, Connectors
from atlas_local.commands.validators import (
    AUTO_ASSIGN_PORT,
    DeploymentNameValidator,
    MdbVersionValidator,
    PortValidator,
    YesNoValidator,
    yes_no_to_bool,
)
from atlas_local.dependencies import ConnectionStringGetter, DeploymentCreator
from atlas_local.docker.progress import CreateDeploymentProgress, CreateDeploymentStepOutcome
from atlas_local.exceptions import (
    AtlasLocalError,
    CommandError,
    ConfigError,
    CreateDeploymentError,
    ReceiveDeploymentError,
)
from atlas_local.interaction import (
    InputPrompt,
    InputPromptOptions,
    InputValidator,
    MultiStepSpinnerInteraction,
    MultiStepSpinnerOutcome,
    SelectPrompt,
    SelectPromptOptions,
)
from atlas_local.models import (
    BindingType,
    CreateDeploymentOptions,
    CreationSource,
    Deployment,
    MongoDBVersion,
    PortBinding,
)

logger = logging.getLogger(__name__)

CANCELED_ERROR = "User canceled the setup"

SETUP_TYPE_MESSAGE = "How do you want to set up your local Atlas deployment?"
SETUP_TYPE_DEFAULT = "With default settings"
SETUP_TYPE_CUSTOM = "With custom settings"
SETUP_TYPE_CANCEL = "Cancel setup"

CONNECT_MESSAGE = "How do you want to connect to your local Atlas deployment?"
CONNECT_SKIP = "Skip"
CONNECT_OPTIONS = {
    ConnectWith.COMPASS.label: ConnectWith.COMPASS,
    ConnectWith.MONGOSH.label: ConnectWith.MONGOSH,
    ConnectWith.VSCODE.label: ConnectWith.VSCODE,
    ConnectWith.CONNECTION_STRING.label: ConnectWith.CONNECTION_STRING,
}

SETUP_STEPS = [
    "Pulling the latest version of the MongoDB image...",
    "Creating the deployment...",
    "Starting the deployment...",
    "Waiting for the deployment to be healthy...",
]

_STEP_OUTCOMES = {
    CreateDeploymentStepOutcome.SUCCESS: MultiStepSpinnerOutcome.SUCCESS,
    CreateDeploymentStepOutcome.SKIPPED: MultiStepSpinnerOutcome.SKIPPED,
    CreateDeploymentStepOutcome.FAILURE: MultiStepSpinnerOutcome.FAILURE,
}


def resolve_mdb_version(use_preview: bool | None, mdb_version: str | None) -> MongoDBVersion | None:
    """
    Combine --mdbVersion with MONGODB_ATLAS_LOCAL_PREVIEW.

    Raises:
        ConfigError: If both ask for a version, or the flag is not a version.
    """
    if use_preview and mdb_version is not None:
        raise ConfigError(
            "MONGODB_ATLAS_LOCAL_PREVIEW",
            "MONGODB_ATLAS_LOCAL_PREVIEW=true cannot be used together with the --mdbVersion flag",
        )
    if use_preview:
        return MongoDBVersion(tag=MongoDBVersion.PREVIEW)
    if mdb_version is None:
        return None
    try:
        return MongoDBVersion.parse(mdb_version)
    except ValueError as e:
        raise ConfigError("--mdbVersion", str(e)) from e


class SetupDeploymentManagement(DeploymentCreator, ConnectionStringGetter, Protocol):
    """Engine capabilities needed by Setup."""


class SetupInteraction(InputPrompt, SelectPrompt, MultiStepSpinnerInteraction, Protocol):
    """Interaction capabilities needed by Setup."""


class SetupConnected(BaseModel):
    connect_outcome: Literal["connected"] = "connected"
    method: str

    def __str__(self) -> str:
        return f"Connected via: {self.method}"


class SetupConnectionString(BaseModel):
    connect_outcome: Literal["connection_string"] = "connection_string"
    connection_string: str

    def __str__(self) -> str:
        return f"Connection string: {self.connection_string}"


class SetupConnectionSkipped(BaseModel):
    connect_outcome: Literal["skipped"] = "skipped"

    def __str__(self) -> str:
        return "Connection: skipped"


class SetupConnectionFailed(BaseModel):
    connect_outcome: Literal["failed"] = "failed"
    error: str

    def __str__(self) -> str:
        return f"Connection failed: {self.error}"


SetupConnectResult = Annotated[
    Union[SetupConnected, SetupConnectionString, SetupConnectionSkipped, SetupConnectionFailed],
    Field(discriminator="connect_outcome"),
]


class SetupSuccess(BaseModel):
    outcome: Literal["setup"] = "setup"
    deployment_name: str
    mongodb_version: str
    port: int
    load_sample_data: bool
    connect_result: SetupConnectResult | None = None

    def __str__(self) -> str:
        lines = [
            f"Successfully setup deployment '{self.deployment_name}'",
            f"MongoDB version: {self.mongodb_version}",
            f"Port: {self.port}",
            f"Load sample data: {str(self.load_sample_data).lower()}",
        ]
        if self.connect_result is not None:
            lines.append(str(self.connect_result))
        return "\n".join(lines)


class SetupFailed(BaseModel):
    outcome: Literal["failed"] = "failed"
    deployment_name: str | None = None
    error: str

    def __str__(self) -> str:
        if self.deployment_name is None:
            return f"Setting up deployment failed: {self.error}"
        return f"Setting up deployment '{self.deployment_name}' failed: {self.error}"


SetupResult = Annotated[Union[SetupSuccess, SetupFailed], Field(discriminator="outcome")]


@dataclass
class Setup:
    """
    Create a local deployment.

    Fields left as None are either prompted for (custom settings) or left to
    the engine's defaults. Prompting updates the fields in place.
    """

    deployment_management: SetupDeploymentManagement
    interaction: SetupInteraction
    deployment_name: str | None = None
    mdb_version: MongoDBVersion | None = None
    voyage_api_key: str | None = None
    port: int | None = None
    bind_ip_all: bool = False
    initdb: str | None = None
    force: bool = False
    load_sample_data: bool | None = None
    username: str | None = None
    password: str | None = None
    image: str | None = None
    skip_pull_image: bool = False
    connect_with: ConnectWith | None = None
    connectors: Connectors = field(default_factory=Connectors)

    async def execute(self) -> SetupResult:
        if not self.force:
            failed = self._prompt_settings()
            if failed is not None:
                return failed

        options = self.create_deployment_options()
        logger.debug("creating deployment with %s", options)
        progress = self.deployment_management.create_deployment(options)

        await self._report_progress(progress)

        try:
            deployment = await progress.wait_for_deployment_outcome()
        except ReceiveDeploymentError as e:
            raise CommandError("receiving deployment outcome", e) from e
        except CreateDeploymentError as e:
            return SetupFailed(deployment_name=self.deployment_name, error=str(e))

        deployment_name = deployment.name or "unknown"
        connect_result = await self._prompt_and_connect(deployment, deployment_name)

        return SetupSuccess(
            deployment_name=deployment_name,
            mongodb_version=deployment.mongodb_version,
            port=(deployment.port_bindings.port or 0) if deployment.port_bindings else 0,
            load_sample_data=bool(deployment.mongodb_load_sample_data),
            connect_result=connect_result,
        )

    def create_deployment_options(self) -> CreateDeploymentOptions:
        binding_type = BindingType.ANY_INTERFACE if self.bind_ip_all else BindingType.LOOPBACK
        return CreateDeploymentOptions(
            name=self.deployment_name,
            creation_source=CreationSource.ATLAS_LOCAL,
            wait_until_healthy=True,
            local_seed_location=self.initdb,
            mongodb_initdb_root_username=self.username,
            mongodb_initdb_root_password=self.password,
            load_sample_data=self.load_sample_data,
            mongodb_version=self.mdb_version,
            port_binding=PortBinding(binding_type=binding_type, port=self.port),
            image=self.image,
            skip_pull_image=self.skip_pull_image,
            voyage_api_key=self.voyage_api_key,
        )

    async def _report_progress(self, progress: CreateDeploymentProgress) -> None:
        stages = [
            progress.wait_for_pull_image_outcome,
            progress.wait_for_create_container_outcome,
            progress.wait_for_start_container_outcome,
            progress.wait_for_healthy_outcome,
        ]
        with self.interaction.start_multi_step_spinner(SETUP_STEPS) as spinner:
            for index, wait_for_stage in enumerate(stages):
                try:
                    outcome = await wait_for_stage()
                except ReceiveDeploymentError as e:
                    raise CommandError("receiving deployment outcome", e) from e
                spinner.set_step_outcome(index, _STEP_OUTCOMES[outcome])

    # --- pre-flight prompts ------------------------------------------------

    def _canceled(self) -> SetupFailed:
        return SetupFailed(deployment_name=self.deployment_name, error=CANCELED_ERROR)

    def _prompt_settings(self) -> SetupFailed | None:
        answer = self.interaction.select(
            SelectPromptOptions(
                message=SETUP_TYPE_MESSAGE,
                options=[SETUP_TYPE_DEFAULT, SETUP_TYPE_CUSTOM, SETUP_TYPE_CANCEL],
            )
        )
        if answer.canceled or answer.value not in (SETUP_TYPE_DEFAULT, SETUP_TYPE_CUSTOM):
            return self._canceled()

        if answer.value == SETUP_TYPE_DEFAULT:
            logger.debug("using default settings")
            return None

        # Sample data is not part of this check: it has a usable default
        if self.deployment_name is None or self.mdb_version is None or self.port is None:
            return self._prompt_custom_settings()
        return None

    def _prompt_field(
        self,
        message: str,
        default: str | None,
        current: str | None,
        validator: InputValidator,
    ) -> str | SetupFailed:
        """Prompt for one field; an already known value is the final answer."""
        result = self.interaction.input(
            InputPromptOptions(
                message=message,
                default=default,
                validator=validator,
                final_answer=current,
            )
        )
        if result.canceled:
            return self._canceled()

        error = validator.validate(result.value)
        if error is not None:
            return SetupFailed(deployment_name=self.deployment_name, error=error)
        return result.value

    def _prompt_custom_settings(self) -> SetupFailed | None:
        name = self._prompt_field(
            "Deployment Name?", None, self.deployment_name, DeploymentNameValidator()
        )
        if isinstance(name, SetupFailed):
            return name
        self.deployment_name = name or None

        version = self._prompt_field(
            "Major MongoDB Version?",
            MongoDBVersion.LATEST,
            str(self.mdb_version) if self.mdb_version is not None else None,
            MdbVersionValidator(),
        )
        if isinstance(version, SetupFailed):
            return version
        self.mdb_version = MongoDBVersion.parse(version)

        port = self._prompt_field(
            "Port?",
            AUTO_ASSIGN_PORT,
            str(self.port) if self.port is not None else None,
            PortValidator(),
        )
        if isinstance(port, SetupFailed):
            return port
        if port not in ("", AUTO_ASSIGN_PORT):
            self.port = int(port)

        sample_data = self._prompt_field(
            "Would you like to load sample data? (y/N)",
            "n",
            None if self.load_sample_data is None else ("y" if self.load_sample_data else "n"),
            YesNoValidator(),
        )
        if isinstance(sample_data, SetupFailed):
            return sample_data
        self.load_sample_data = yes_no_to_bool(sample_data, False)

        return None

    # --- connection ----------------------------------------------------------

    async def _prompt_and_connect(
        self, deployment: Deployment, deployment_name: str
    ) -> SetupConnectResult:
        connect_with = self.connect_with
        if connect_with is None:
            if self.force:
                return SetupConnectionSkipped()

            answer = self.interaction.select(
                SelectPromptOptions(
                    message=CONNECT_MESSAGE,
                    options=[*CONNECT_OPTIONS, CONNECT_SKIP],
                )
            )
            if answer.canceled or answer.value not in CONNECT_OPTIONS:
                return SetupConnectionSkipped()
            connect_with = CONNECT_OPTIONS[answer.value]

        try:
            connection_string = await self.deployment_management.get_connection_string(
                deployment.container_id
            )
        except AtlasLocalError as e:
            raise CommandError("getting connection string", e) from e

        if connect_with is ConnectWith.CONNECTION_STRING:
            return SetupConnectionString(connection_string=connection_string)

        connector = self.connectors.get(connect_with)
        if not connector.is_available():
            return SetupConnectionFailed(error=f"{connect_with.label} is not installed")

        await connector.launch(deployment_name, connection_string)
        return SetupConnected(method=connect_with.label)
