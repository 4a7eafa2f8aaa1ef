"""Tests for the Setup command."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from atlas_local.commands.connectors import ConnectWith, Connectors
from atlas_local.commands.setup import (
    CANCELED_ERROR,
    CONNECT_MESSAGE,
    SETUP_STEPS,
    SETUP_TYPE_CANCEL,
    SETUP_TYPE_CUSTOM,
    SETUP_TYPE_DEFAULT,
    Setup,
    SetupConnected,
    SetupConnectionFailed,
    SetupConnectionSkipped,
    SetupConnectionString,
    SetupFailed,
    SetupSuccess,
    resolve_mdb_version,
)
from atlas_local.docker.progress import (
    CreateDeploymentProgress,
    CreateDeploymentStep,
    CreateDeploymentStepOutcome,
)
from atlas_local.exceptions import CommandError, ConfigError, ImagePullError
from atlas_local.interaction import MultiStepSpinnerOutcome
from atlas_local.models import BindingType, MongoDBVersion, PortBinding

from conftest import FakeInteraction, make_deployment

CONNECTION_STRING = "mongodb://127.0.0.1:27017/?directConnection=true"
SUCCESS = CreateDeploymentStepOutcome.SUCCESS


def created_deployment():
    return make_deployment(
        name="local1234",
        port_bindings=PortBinding(binding_type=BindingType.LOOPBACK, port=27017),
        mongodb_load_sample_data=True,
    )


def resolved_progress(deployment=None, outcomes=(SUCCESS,) * 4):
    """A progress handle whose pipeline already finished."""
    progress = CreateDeploymentProgress()
    for step, outcome in zip(CreateDeploymentStep, outcomes):
        progress.set_step_outcome(step, outcome)
    progress.set_deployment(deployment or created_deployment())
    return progress


def setup_command(deployment_management, interaction, **kwargs):
    return Setup(deployment_management=deployment_management, interaction=interaction, **kwargs)


def created_options(deployment_management):
    return deployment_management.create_deployment.call_args.args[0]


class TestSetupPrompts:
    """Tests for the pre-flight prompts."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", [None, SETUP_TYPE_CANCEL])
    async def test_cancel_setup_type(self, deployment_management, answer):
        """Canceling the setup type prompt creates nothing."""
        deployment_management.create_deployment = MagicMock()
        interaction = FakeInteraction(selects=[answer])

        result = await setup_command(deployment_management, interaction).execute()

        assert result == SetupFailed(error=CANCELED_ERROR)
        assert str(result) == f"Setting up deployment failed: {CANCELED_ERROR}"
        deployment_management.create_deployment.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("canceled_at", [1, 2, 3])
    async def test_cancel_custom_field_keeps_name(self, deployment_management, canceled_at):
        """Canceling any field keeps the name given so far."""
        deployment_management.create_deployment = MagicMock()
        answers = ["8", "", "n"]
        answers[canceled_at - 1] = None
        interaction = FakeInteraction(selects=[SETUP_TYPE_CUSTOM], inputs=answers)

        result = await setup_command(
            deployment_management, interaction, deployment_name="dev"
        ).execute()

        assert result == SetupFailed(deployment_name="dev", error=CANCELED_ERROR)
        deployment_management.create_deployment.assert_not_called()

    @pytest.mark.asyncio
    async def test_cancel_name_field(self, deployment_management):
        """Canceling the name prompt leaves the name unset."""
        deployment_management.create_deployment = MagicMock()
        interaction = FakeInteraction(selects=[SETUP_TYPE_CUSTOM], inputs=[None])

        result = await setup_command(deployment_management, interaction).execute()

        assert result == SetupFailed(error=CANCELED_ERROR)

    @pytest.mark.asyncio
    async def test_custom_settings(self, deployment_management):
        """Custom answers flow into the creation options."""
        deployment_management.create_deployment = MagicMock(return_value=resolved_progress())
        interaction = FakeInteraction(
            selects=[SETUP_TYPE_CUSTOM, "Skip"], inputs=["my-dep", "8", "", "y"]
        )

        result = await setup_command(deployment_management, interaction).execute()

        assert isinstance(result, SetupSuccess)
        options = created_options(deployment_management)
        assert options.name == "my-dep"
        assert options.mongodb_version == MongoDBVersion(major=8)
        assert options.port_binding == PortBinding(binding_type=BindingType.LOOPBACK, port=None)
        assert options.load_sample_data is True
        assert [p.message for p in interaction.input_prompts] == [
            "Deployment Name?",
            "Major MongoDB Version?",
            "Port?",
            "Would you like to load sample data? (y/N)",
        ]

    @pytest.mark.asyncio
    async def test_known_fields_are_final_answers(self, deployment_management):
        """Flags given up front are shown as final answers."""
        deployment_management.create_deployment = MagicMock(return_value=resolved_progress())
        interaction = FakeInteraction(selects=[SETUP_TYPE_CUSTOM, "Skip"], inputs=["n"])

        await setup_command(
            deployment_management,
            interaction,
            deployment_name="dev",
            mdb_version=MongoDBVersion(major=8, minor=0),
            port=27018,
        ).execute()

        # every field known: no prompts besides the setup type
        assert interaction.input_prompts == []
        options = created_options(deployment_management)
        assert options.port_binding.port == 27018

    @pytest.mark.asyncio
    async def test_partially_known_fields(self, deployment_management):
        """Known fields skip waiting for input."""
        deployment_management.create_deployment = MagicMock(return_value=resolved_progress())
        interaction = FakeInteraction(
            selects=[SETUP_TYPE_CUSTOM, "Skip"], inputs=["8", "27019", "n"]
        )

        await setup_command(deployment_management, interaction, deployment_name="dev").execute()

        assert interaction.input_prompts[0].final_answer == "dev"
        options = created_options(deployment_management)
        assert options.name == "dev"
        assert options.port_binding.port == 27019
        assert options.load_sample_data is False

    @pytest.mark.asyncio
    async def test_invalid_known_version(self, deployment_management):
        """A pre-supplied version below 7 fails with the validator message."""
        deployment_management.create_deployment = MagicMock()
        interaction = FakeInteraction(selects=[SETUP_TYPE_CUSTOM], inputs=["dev"])

        result = await setup_command(
            deployment_management, interaction, mdb_version=MongoDBVersion(major=6)
        ).execute()

        assert result == SetupFailed(
            deployment_name="dev", error="The lowest supported MongoDB version is 7"
        )
        deployment_management.create_deployment.assert_not_called()

    @pytest.mark.asyncio
    async def test_force_skips_prompts(self, deployment_management):
        """force creates with defaults and skips connecting."""
        deployment_management.create_deployment = MagicMock(return_value=resolved_progress())
        interaction = FakeInteraction()

        result = await setup_command(deployment_management, interaction, force=True).execute()

        assert result.connect_result == SetupConnectionSkipped()
        assert interaction.select_prompts == []
        assert interaction.input_prompts == []
        options = created_options(deployment_management)
        assert options.name is None
        assert options.wait_until_healthy is True

    @pytest.mark.asyncio
    async def test_bind_ip_all(self, deployment_management):
        """bind_ip_all publishes on every interface."""
        deployment_management.create_deployment = MagicMock(return_value=resolved_progress())

        await setup_command(
            deployment_management, FakeInteraction(), force=True, bind_ip_all=True
        ).execute()

        assert created_options(deployment_management).port_binding.host_ip == "0.0.0.0"


class TestSetupProgress:
    """Tests for creation progress reporting."""

    @pytest.mark.asyncio
    async def test_success(self, deployment_management):
        """Each stage is reported in order and the deployment summarized."""
        deployment_management.create_deployment = MagicMock(return_value=resolved_progress())
        interaction = FakeInteraction(selects=[SETUP_TYPE_DEFAULT, "Skip"])

        result = await setup_command(deployment_management, interaction).execute()

        assert result == SetupSuccess(
            deployment_name="local1234",
            mongodb_version="8.2.2",
            port=27017,
            load_sample_data=True,
            connect_result=SetupConnectionSkipped(),
        )
        spinner = interaction.multi_step_spinners[0]
        assert [step.label for step in spinner.steps] == SETUP_STEPS
        assert all(step.outcome is MultiStepSpinnerOutcome.SUCCESS for step in spinner.steps)
        assert spinner.closed

    @pytest.mark.asyncio
    async def test_stages_resolved_while_running(self, deployment_management):
        """Stages resolved one at a time are reported as they arrive."""
        progress = CreateDeploymentProgress()
        deployment_management.create_deployment = MagicMock(return_value=progress)
        interaction = FakeInteraction()

        async def produce():
            for step in CreateDeploymentStep:
                # only resolve a stage once the previous one is on screen
                while (
                    not interaction.multi_step_spinners
                    or interaction.multi_step_spinners[0].current_step != step
                ):
                    await asyncio.sleep(0)
                progress.set_step_outcome(step, SUCCESS)
            progress.set_deployment(created_deployment())

        _, result = await asyncio.wait_for(
            asyncio.gather(
                produce(),
                setup_command(deployment_management, interaction, force=True).execute(),
            ),
            timeout=5,
        )

        assert isinstance(result, SetupSuccess)
        assert interaction.multi_step_spinners[0].current_step is None

    @pytest.mark.asyncio
    async def test_skipped_pull(self, deployment_management):
        """A skipped pull shows as skipped."""
        progress = resolved_progress(
            outcomes=(CreateDeploymentStepOutcome.SKIPPED, SUCCESS, SUCCESS, SUCCESS)
        )
        deployment_management.create_deployment = MagicMock(return_value=progress)
        interaction = FakeInteraction()

        await setup_command(
            deployment_management, interaction, force=True, skip_pull_image=True
        ).execute()

        assert interaction.multi_step_spinners[0].steps[0].outcome is MultiStepSpinnerOutcome.SKIPPED

    @pytest.mark.asyncio
    async def test_creation_error_is_failed_result(self, deployment_management):
        """A typed creation error becomes a Failed result."""
        progress = CreateDeploymentProgress()
        progress.fail_step(CreateDeploymentStep.PULL_IMAGE)
        progress.set_error(ImagePullError(None, "failed to pull image: no network"))
        deployment_management.create_deployment = MagicMock(return_value=progress)
        interaction = FakeInteraction()

        result = await setup_command(
            deployment_management, interaction, force=True, deployment_name="dev"
        ).execute()

        assert result == SetupFailed(deployment_name="dev", error="failed to pull image: no network")
        assert [step.outcome for step in interaction.multi_step_spinners[0].steps] == [
            MultiStepSpinnerOutcome.FAILURE,
            MultiStepSpinnerOutcome.SKIPPED,
            MultiStepSpinnerOutcome.SKIPPED,
            MultiStepSpinnerOutcome.SKIPPED,
        ]

    @pytest.mark.asyncio
    async def test_abandoned_pipeline_is_fatal(self, deployment_management):
        """A pipeline that never delivers an outcome is fatal."""
        progress = CreateDeploymentProgress()
        progress.set_step_outcome(CreateDeploymentStep.PULL_IMAGE, SUCCESS)
        progress.abandon()
        deployment_management.create_deployment = MagicMock(return_value=progress)
        interaction = FakeInteraction()

        with pytest.raises(CommandError, match="receiving deployment outcome"):
            await setup_command(deployment_management, interaction, force=True).execute()
        assert interaction.multi_step_spinners[0].closed


class TestSetupConnect:
    """Tests for connecting after setup."""

    @pytest.mark.asyncio
    async def test_connection_string(self, deployment_management):
        """Selecting the connection string returns it."""
        deployment_management.create_deployment = MagicMock(return_value=resolved_progress())
        interaction = FakeInteraction(selects=[SETUP_TYPE_DEFAULT, "Connection string"])

        result = await setup_command(deployment_management, interaction).execute()

        assert result.connect_result == SetupConnectionString(connection_string=CONNECTION_STRING)
        assert interaction.select_prompts[1].message == CONNECT_MESSAGE
        assert list(interaction.select_prompts[1].options) == [
            "Compass",
            "mongosh",
            "VS Code",
            "Connection string",
            "Skip",
        ]

    @pytest.mark.asyncio
    async def test_connect_with_flag(self, deployment_management):
        """--connectWith skips the connect prompt and launches the tool."""
        deployment_management.create_deployment = MagicMock(return_value=resolved_progress())
        mongosh = MagicMock()
        mongosh.is_available.return_value = True
        mongosh.launch = AsyncMock()
        interaction = FakeInteraction()

        result = await setup_command(
            deployment_management,
            interaction,
            force=True,
            connect_with=ConnectWith.MONGOSH,
            connectors=Connectors(mongosh=mongosh),
        ).execute()

        assert result.connect_result == SetupConnected(method="mongosh")
        mongosh.launch.assert_awaited_once_with("local1234", CONNECTION_STRING)
        assert interaction.select_prompts == []

    @pytest.mark.asyncio
    async def test_tool_not_installed(self, deployment_management):
        """A missing tool is reported in the connect result."""
        deployment_management.create_deployment = MagicMock(return_value=resolved_progress())
        compass = MagicMock()
        compass.is_available.return_value = False

        result = await setup_command(
            deployment_management,
            FakeInteraction(selects=[SETUP_TYPE_DEFAULT, "Compass"]),
            connectors=Connectors(compass=compass),
        ).execute()

        assert result.connect_result == SetupConnectionFailed(error="Compass is not installed")

    @pytest.mark.asyncio
    async def test_canceled_connect_prompt_skips(self, deployment_management):
        """Canceling the connect prompt skips connecting."""
        deployment_management.create_deployment = MagicMock(return_value=resolved_progress())

        result = await setup_command(
            deployment_management, FakeInteraction(selects=[SETUP_TYPE_DEFAULT, None])
        ).execute()

        assert result.connect_result == SetupConnectionSkipped()
        deployment_management.get_connection_string.assert_not_called()

    def test_display(self):
        """The summary lists version, port and sample data."""
        result = SetupSuccess(
            deployment_name="dev",
            mongodb_version="8.2.2",
            port=27017,
            load_sample_data=False,
            connect_result=SetupConnectionString(connection_string=CONNECTION_STRING),
        )

        assert str(result).split("\n") == [
            "Successfully setup deployment 'dev'",
            "MongoDB version: 8.2.2",
            "Port: 27017",
            "Load sample data: false",
            f"Connection string: {CONNECTION_STRING}",
        ]


class TestResolveMdbVersion:
    """Tests for resolve_mdb_version()."""

    def test_neither(self):
        assert resolve_mdb_version(None, None) is None

    def test_preview(self):
        assert resolve_mdb_version(True, None) == MongoDBVersion(tag="preview")

    def test_flag(self):
        assert resolve_mdb_version(False, "8.0") == MongoDBVersion(major=8, minor=0)

    def test_conflict(self):
        """Preview and an explicit version are mutually exclusive."""
        with pytest.raises(ConfigError, match="cannot be used together"):
            resolve_mdb_version(True, "8")

    def test_invalid_flag(self):
        with pytest.raises(ConfigError, match="--mdbVersion"):
            resolve_mdb_version(None, "eight")
