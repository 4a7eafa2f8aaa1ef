"""Shared fixtures for atlas-local tests."""

from collections import deque
from unittest.mock import AsyncMock, MagicMock

import pytest

from atlas_local.docker.client import DockerDeploymentClient
from atlas_local.interaction import (
    ConfirmationPromptResult,
    InputPromptResult,
    MultiStepSpinner,
    SelectPromptResult,
    Spinner,
)
from atlas_local.models import Deployment, State


class FakeInteraction:
    """
    Scripted interaction surface.

    Prompt answers are consumed in order; every prompt and spinner is
    recorded so tests can assert on them.
    """

    def __init__(self, inputs=(), selects=(), confirms=()):
        self.inputs = deque(inputs)
        self.selects = deque(selects)
        self.confirms = deque(confirms)
        self.input_prompts = []
        self.select_prompts = []
        self.confirm_prompts = []
        self.spinners = []
        self.multi_step_spinners = []

    def input(self, options):
        self.input_prompts.append(options)
        if options.final_answer is not None:
            return InputPromptResult(value=options.final_answer)
        answer = self.inputs.popleft()
        if answer is None:
            return InputPromptResult(canceled=True)
        if answer == "" and options.default is not None:
            answer = options.default
        return InputPromptResult(value=answer)

    def select(self, options):
        self.select_prompts.append(options)
        answer = self.selects.popleft()
        if answer is None:
            return SelectPromptResult(canceled=True)
        return SelectPromptResult(value=answer)

    def confirm(self, options):
        self.confirm_prompts.append(options)
        return self.confirms.popleft()

    def start_spinner(self, message):
        spinner = Spinner(message)
        self.spinners.append(spinner)
        return spinner

    def start_multi_step_spinner(self, steps):
        spinner = MultiStepSpinner(steps)
        self.multi_step_spinners.append(spinner)
        return spinner


def make_deployment(
    name: str | None = "test-deployment",
    state: State = State.RUNNING,
    version: str = "8.2.2",
    **kwargs,
) -> Deployment:
    """Build a Deployment with sensible defaults."""
    return Deployment(
        container_id=kwargs.pop("container_id", "test-container-id"),
        name=name,
        mongodb_version=version,
        state=state,
        **kwargs,
    )


@pytest.fixture
def interaction():
    """Interaction with no scripted answers."""
    return FakeInteraction(confirms=[ConfirmationPromptResult.YES])


@pytest.fixture
def deployment_management():
    """Mock container engine client."""
    client = MagicMock(spec=DockerDeploymentClient)
    client.get_deployment = AsyncMock(return_value=make_deployment())
    client.list_deployments = AsyncMock(return_value=[make_deployment()])
    client.start = AsyncMock(return_value=None)
    client.stop = AsyncMock(return_value=None)
    client.pause = AsyncMock(return_value=None)
    client.unpause = AsyncMock(return_value=None)
    client.delete_deployment = AsyncMock(return_value=None)
    client.wait_for_healthy_deployment = AsyncMock(return_value=None)
    client.get_connection_string = AsyncMock(
        return_value="mongodb://127.0.0.1:27017/?directConnection=true"
    )
    client.get_logs = AsyncMock(return_value=[])
    return client
