"""Tests for the start/stop state machine."""

import pytest

from atlas_local.commands.lifecycle import (
    DEAD_ERROR,
    REMOVING_ERROR,
    LifecycleAction,
    allow_unhealthy_initial_state,
    start_transition,
    stop_transition,
)
from atlas_local.models import State


class TestStartTransition:
    """Tests for start_transition()."""

    @pytest.mark.parametrize(
        "state,action",
        [
            (State.CREATED, LifecycleAction.START),
            (State.EXITED, LifecycleAction.START),
            (State.PAUSED, LifecycleAction.UNPAUSE),
            (State.RUNNING, LifecycleAction.NONE),
            (State.RESTARTING, LifecycleAction.NONE),
        ],
    )
    def test_reachable_states(self, state, action):
        """Each startable state maps to exactly one action."""
        transition = start_transition(state)
        assert transition.action is action
        assert transition.error is None

    def test_dead(self):
        """Dead deployments cannot be started."""
        assert start_transition(State.DEAD).error == DEAD_ERROR

    def test_removing(self):
        """Removing deployments cannot be started."""
        assert start_transition(State.REMOVING).error == REMOVING_ERROR


class TestStopTransition:
    """Tests for stop_transition()."""

    @pytest.mark.parametrize("state", [State.RUNNING, State.RESTARTING, State.PAUSED])
    def test_stops_active_states(self, state):
        """Active deployments are stopped."""
        assert stop_transition(state).action is LifecycleAction.STOP

    @pytest.mark.parametrize("state", [State.CREATED, State.EXITED])
    def test_already_stopped(self, state):
        """Stopped deployments need no action."""
        transition = stop_transition(state)
        assert transition.action is LifecycleAction.NONE
        assert transition.error is None

    @pytest.mark.parametrize("state,error", [(State.DEAD, DEAD_ERROR), (State.REMOVING, REMOVING_ERROR)])
    def test_terminal_states(self, state, error):
        """Dead and removing deployments fail."""
        assert stop_transition(state).error == error


@pytest.mark.parametrize("state", list(State))
def test_allow_unhealthy_only_when_paused(state):
    """Only an unpaused deployment may report unhealthy first."""
    assert allow_unhealthy_initial_state(state) is (state is State.PAUSED)
