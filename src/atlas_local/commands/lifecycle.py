"""
Start/stop state machine.

Maps a deployment's current state to the engine action that moves it to
running (start) or stopped (stop). Dead and removing deployments cannot be
moved and produce an error message instead.
"""

from dataclasses import dataclass
from enum import Enum

from atlas_local.models import State

DEAD_ERROR = "Deployment is dead"
REMOVING_ERROR = "Deployment is in removing state"


class LifecycleAction(str, Enum):
    """Engine call required to reach the target state."""

    START = "start"
    UNPAUSE = "unpause"
    STOP = "stop"
    NONE = "none"
    """Already at (or converging to) the target state."""


@dataclass(frozen=True)
class Transition:
    action: LifecycleAction
    error: str | None = None


_TERMINAL = {
    State.DEAD: Transition(LifecycleAction.NONE, DEAD_ERROR),
    State.REMOVING: Transition(LifecycleAction.NONE, REMOVING_ERROR),
}


def start_transition(state: State) -> Transition:
    """Action needed to get a deployment running."""
    if state in _TERMINAL:
        return _TERMINAL[state]
    if state in (State.CREATED, State.EXITED):
        return Transition(LifecycleAction.START)
    if state is State.PAUSED:
        return Transition(LifecycleAction.UNPAUSE)
    return Transition(LifecycleAction.NONE)


def stop_transition(state: State) -> Transition:
    """Action needed to get a deployment stopped."""
    if state in _TERMINAL:
        return _TERMINAL[state]
    if state in (State.RUNNING, State.RESTARTING, State.PAUSED):
        return Transition(LifecycleAction.STOP)
    return Transition(LifecycleAction.NONE)


def allow_unhealthy_initial_state(state: State) -> bool:
    """
    Whether a health wait after starting from `state` may see "unhealthy" first.

    A container that was just unpaused still reports its stale health
    status until the next check runs.
    """
    return state is State.PAUSED
