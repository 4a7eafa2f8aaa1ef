"""Tests for the Start and Stop commands."""

import pytest

from atlas_local.commands.start import Start, StartFailed, StartStarted
from atlas_local.commands.stop import Stop, StopFailed, StopStopped
from atlas_local.exceptions import (
    CommandError,
    ContainerInspectError,
    DeploymentEngineError,
    IntoDeploymentError,
    UnhealthyDeploymentError,
    WatchTimeoutError,
)
from atlas_local.models import State

from conftest import FakeInteraction, make_deployment


def start_command(deployment_management, interaction, **kwargs):
    return Start(
        deployment_name="test-deployment",
        deployment_management=deployment_management,
        interaction=interaction,
        **kwargs,
    )


class TestStart:
    """Tests for Start.execute()."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", [State.CREATED, State.EXITED])
    async def test_starts_stopped_deployment(self, deployment_management, state):
        """Created and exited deployments are started."""
        deployment_management.get_deployment.return_value = make_deployment(state=state)

        result = await start_command(
            deployment_management, FakeInteraction(), wait_for_healthy=False
        ).execute()

        assert result == StartStarted(deployment_name="test-deployment")
        deployment_management.start.assert_awaited_once_with("test-deployment")
        deployment_management.unpause.assert_not_called()

    @pytest.mark.asyncio
    async def test_unpauses_paused_deployment(self, deployment_management):
        """Paused deployments are unpaused, not started."""
        deployment_management.get_deployment.return_value = make_deployment(state=State.PAUSED)

        result = await start_command(
            deployment_management, FakeInteraction(), wait_for_healthy=False
        ).execute()

        assert isinstance(result, StartStarted)
        deployment_management.unpause.assert_awaited_once_with("test-deployment")
        deployment_management.start.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", [State.RUNNING, State.RESTARTING])
    async def test_running_is_noop(self, deployment_management, state):
        """Running deployments issue no engine call."""
        deployment_management.get_deployment.return_value = make_deployment(state=state)

        result = await start_command(
            deployment_management, FakeInteraction(), wait_for_healthy=False
        ).execute()

        assert isinstance(result, StartStarted)
        deployment_management.start.assert_not_called()
        deployment_management.unpause.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "state,error",
        [(State.DEAD, "Deployment is dead"), (State.REMOVING, "Deployment is in removing state")],
    )
    async def test_terminal_states_fail_without_mutation(self, deployment_management, state, error):
        """Dead and removing deployments fail and are never touched."""
        deployment_management.get_deployment.return_value = make_deployment(state=state)

        result = await start_command(deployment_management, FakeInteraction()).execute()

        assert result == StartFailed(deployment_name="test-deployment", error=error)
        deployment_management.start.assert_not_called()
        deployment_management.unpause.assert_not_called()
        deployment_management.wait_for_healthy_deployment.assert_not_called()

    @pytest.mark.asyncio
    async def test_paused_waits_allowing_unhealthy(self, deployment_management):
        """Waiting after an unpause tolerates an initial unhealthy report."""
        deployment_management.get_deployment.return_value = make_deployment(state=State.PAUSED)

        await start_command(
            deployment_management, FakeInteraction(), wait_for_healthy_timeout=30
        ).execute()

        name, options = deployment_management.wait_for_healthy_deployment.await_args.args
        assert name == "test-deployment"
        assert options.allow_unhealthy_initial_state is True
        assert options.timeout == 30

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "state", [State.CREATED, State.EXITED, State.RUNNING, State.RESTARTING]
    )
    async def test_other_states_wait_strictly(self, deployment_management, state):
        """Every other state waits with allow_unhealthy_initial_state=False."""
        deployment_management.get_deployment.return_value = make_deployment(state=state)

        await start_command(deployment_management, FakeInteraction()).execute()

        _, options = deployment_management.wait_for_healthy_deployment.await_args.args
        assert options.allow_unhealthy_initial_state is False

    @pytest.mark.asyncio
    async def test_spinner_released_before_health_wait(self, deployment_management):
        """The start spinner stops before the health wait spinner starts."""
        interaction = FakeInteraction()
        observed = []

        async def _wait(name, options):
            observed.append([spinner.running for spinner in interaction.spinners])

        deployment_management.wait_for_healthy_deployment.side_effect = _wait

        await start_command(deployment_management, interaction).execute()

        assert observed == [[False, True]]
        assert [s.message for s in interaction.spinners] == [
            "Starting deployment...",
            "Waiting for deployment to become healthy...",
        ]
        assert not any(spinner.running for spinner in interaction.spinners)

    @pytest.mark.asyncio
    async def test_health_timeout_is_failed_result(self, deployment_management):
        """A health wait timeout is a business failure."""
        deployment_management.wait_for_healthy_deployment.side_effect = WatchTimeoutError(
            "test-deployment", 60
        )

        result = await start_command(deployment_management, FakeInteraction()).execute()

        assert result == StartFailed(
            deployment_name="test-deployment",
            error="Waiting for deployment to become healthy timed out",
        )

    @pytest.mark.asyncio
    async def test_unhealthy_is_failed_result(self, deployment_management):
        """An unhealthy deployment is a business failure."""
        deployment_management.wait_for_healthy_deployment.side_effect = UnhealthyDeploymentError(
            "test-deployment"
        )

        result = await start_command(deployment_management, FakeInteraction()).execute()

        assert result.error == "Deployment became unhealthy"

    @pytest.mark.asyncio
    async def test_other_health_errors_are_fatal(self, deployment_management):
        """Unexpected health wait errors propagate."""
        deployment_management.wait_for_healthy_deployment.side_effect = DeploymentEngineError(
            "inspecting", "test-deployment", "daemon gone"
        )

        with pytest.raises(CommandError, match="Failed to wait for healthy deployment"):
            await start_command(deployment_management, FakeInteraction()).execute()

    @pytest.mark.asyncio
    async def test_inspect_error_is_failed_result(self, deployment_management):
        """A missing container is reported, not raised."""
        deployment_management.get_deployment.side_effect = ContainerInspectError(
            "test-deployment", "container 'test-deployment' does not exist"
        )

        result = await start_command(deployment_management, FakeInteraction()).execute()

        assert result.error == "container 'test-deployment' does not exist"
        assert str(result) == (
            "Starting deployment 'test-deployment' failed: "
            "container 'test-deployment' does not exist"
        )

    @pytest.mark.asyncio
    async def test_into_deployment_error_is_fatal(self, deployment_management):
        """A container that is not a deployment is a fatal error."""
        deployment_management.get_deployment.side_effect = IntoDeploymentError(
            "test-deployment", "missing label"
        )
        interaction = FakeInteraction()

        with pytest.raises(CommandError, match="into deployment error: missing label"):
            await start_command(deployment_management, interaction).execute()
        assert not interaction.spinners[0].running


class TestStop:
    """Tests for Stop.execute()."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", [State.RUNNING, State.RESTARTING, State.PAUSED])
    async def test_stops_active_deployment(self, deployment_management, state):
        """Active deployments are stopped."""
        deployment_management.get_deployment.return_value = make_deployment(state=state)

        result = await Stop("test-deployment", deployment_management, FakeInteraction()).execute()

        assert result == StopStopped(deployment_name="test-deployment")
        deployment_management.stop.assert_awaited_once_with("test-deployment")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", [State.CREATED, State.EXITED])
    async def test_stopped_is_noop(self, deployment_management, state):
        """Stopped deployments issue no engine call."""
        deployment_management.get_deployment.return_value = make_deployment(state=state)

        result = await Stop("test-deployment", deployment_management, FakeInteraction()).execute()

        assert isinstance(result, StopStopped)
        deployment_management.stop.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", [State.DEAD, State.REMOVING])
    async def test_terminal_states_fail(self, deployment_management, state):
        """Dead and removing deployments fail without a stop call."""
        deployment_management.get_deployment.return_value = make_deployment(state=state)

        result = await Stop("test-deployment", deployment_management, FakeInteraction()).execute()

        assert isinstance(result, StopFailed)
        deployment_management.stop.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", list(State))
    async def test_start_then_stop_converges(self, deployment_management, state):
        """Start followed by Stop never issues the opposite action first."""
        deployment_management.get_deployment.return_value = make_deployment(state=state)

        started = await start_command(
            deployment_management, FakeInteraction(), wait_for_healthy=False
        ).execute()
        deployment_management.get_deployment.return_value = make_deployment(
            state=State.RUNNING if isinstance(started, StartStarted) else state
        )
        stopped = await Stop("test-deployment", deployment_management, FakeInteraction()).execute()

        if state in (State.DEAD, State.REMOVING):
            assert isinstance(started, StartFailed)
            assert isinstance(stopped, StopFailed)
        else:
            assert isinstance(stopped, StopStopped)
            deployment_management.stop.assert_awaited_once_with("test-deployment")
        if state in (State.RUNNING, State.RESTARTING):
            deployment_management.start.assert_not_called()
            deployment_management.unpause.assert_not_called()

    def test_display(self):
        """Results render the deployment name."""
        assert str(StopStopped(deployment_name="dev")) == "Deployment 'dev' stopped"
        assert (
            str(StopFailed(deployment_name="dev", error="boom"))
            == "Stopping deployment 'dev' failed: boom"
        )
