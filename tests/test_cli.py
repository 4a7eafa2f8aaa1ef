"""Tests for the typer CLI wiring."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import typer
from typer.testing import CliRunner

from atlas_local.cli.main import app
from atlas_local.cli.runner import run_command
from atlas_local.commands.connectors import ConnectorExitError
from atlas_local.exceptions import DeploymentEngineError
from atlas_local.models import State

from conftest import FakeInteraction, make_deployment

runner = CliRunner()


@pytest.fixture
def cli(deployment_management):
    """Patch the engine client and console interaction used by the CLI."""
    with patch(
        "atlas_local.cli.deployments.DockerDeploymentClient",
        MagicMock(return_value=deployment_management),
    ), patch(
        "atlas_local.cli.deployments.ConsoleInteraction", MagicMock(side_effect=FakeInteraction)
    ), patch("atlas_local.cli.main.setup_logging"):
        yield deployment_management


class TestCli:
    """Tests for command dispatch, output and exit codes."""

    def test_list_text(self, cli):
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "test-deployment" in result.stdout
        assert "MDB VER" in result.stdout

    def test_list_json(self, cli):
        result = runner.invoke(app, ["--output", "json", "list"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == [
            {"name": "test-deployment", "mongo_db_version": "8.2.2", "state": "Running"}
        ]

    def test_ls_alias(self, cli):
        result = runner.invoke(app, ["ls"])

        assert result.exit_code == 0
        cli.list_deployments.assert_awaited_once()

    def test_failed_result_exits_zero(self, cli):
        """Business failures are results, not errors."""
        cli.get_deployment.return_value = make_deployment(state=State.DEAD)

        result = runner.invoke(app, ["-o", "json", "stop", "test-deployment"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "outcome": "failed",
            "deployment_name": "test-deployment",
            "error": "Deployment is dead",
        }

    def test_fatal_error_exits_one(self, cli):
        cli.stop.side_effect = DeploymentEngineError("stopping", "test-deployment", "daemon gone")

        result = runner.invoke(app, ["stop", "test-deployment"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "daemon gone" in result.output

    def test_start_flags(self, cli):
        cli.get_deployment.return_value = make_deployment(state=State.EXITED)

        result = runner.invoke(
            app, ["start", "test-deployment", "--no-waitForHealthy"]
        )

        assert result.exit_code == 0
        assert result.stdout.strip() == "Deployment 'test-deployment' started"
        cli.wait_for_healthy_deployment.assert_not_called()

    def test_connection_string(self, cli):
        result = runner.invoke(
            app, ["connect", "test-deployment", "--connectWith", "connectionString"]
        )

        assert result.exit_code == 0
        assert "mongodb://127.0.0.1:27017/?directConnection=true" in result.stdout

    def test_invalid_preview_setting(self, cli):
        result = runner.invoke(
            app, ["list"], env={"MONGODB_ATLAS_LOCAL_PREVIEW": "maybe"}
        )

        assert result.exit_code == 1
        assert "MONGODB_ATLAS_LOCAL_PREVIEW" in result.output

    def test_preview_conflicts_with_version(self, cli):
        result = runner.invoke(
            app,
            ["setup", "--force", "--mdbVersion", "8"],
            env={"MONGODB_ATLAS_LOCAL_PREVIEW": "true"},
        )

        assert result.exit_code == 1
        assert "cannot be used together with the --mdbVersion flag" in result.output
        cli.create_deployment.assert_not_called()

    def test_search_requires_credentials_pair(self, cli):
        result = runner.invoke(
            app,
            ["search", "indexes", "list", "--deploymentName", "dev", "--username", "admin"],
        )

        assert result.exit_code != 0


class TestRunCommand:
    """Tests for run_command exit codes."""

    @pytest.mark.parametrize("returncode,status", [(3, 3), (-15, 143), (-9, 137)])
    def test_connector_exit_status(self, returncode, status):
        """A tool's exit code passes through; signal deaths map to 128 + N."""
        execute = AsyncMock(side_effect=ConnectorExitError("mongosh", returncode))

        with pytest.raises(typer.Exit) as exc_info:
            run_command(MagicMock(), execute)

        assert exc_info.value.exit_code == status
