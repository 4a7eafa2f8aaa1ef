"""
Spinner handles.

Both spinner kinds are context managers: leaving the ``with`` block stops
them on every exit path, including early returns and exceptions.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

logger = logging.getLogger(__name__)


class Spinner:
    """
    A single spinner with one message.

    Subclasses render it; this base class only tracks whether it is still
    running so that stop() is idempotent.
    """

    def __init__(self, message: str):
        self.message = message
        self.running = True

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        self._on_stop()

    def _on_stop(self) -> None:
        pass

    def __enter__(self) -> "Spinner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


class MultiStepSpinnerOutcome(str, Enum):
    """Final outcome of one multi-step spinner step."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILURE = "failure"


@dataclass
class MultiStepSpinnerStep:
    label: str
    outcome: MultiStepSpinnerOutcome | None = None


class MultiStepSpinner:
    """
    A fixed, ordered list of named steps, each resolved exactly once.

    The first unresolved step is the one shown as in progress. Closing the
    spinner resolves any step still open as skipped and logs a warning,
    since every step is expected to get an outcome before the owning
    command returns.
    """

    def __init__(self, labels: Sequence[str]):
        self.steps = [MultiStepSpinnerStep(label) for label in labels]
        self.closed = False

    @property
    def current_step(self) -> int | None:
        """Index of the first step without an outcome."""
        for index, step in enumerate(self.steps):
            if step.outcome is None:
                return index
        return None

    def set_step_outcome(self, index: int, outcome: MultiStepSpinnerOutcome) -> None:
        """
        Resolve one step.

        Raises:
            IndexError: If there is no such step.
            RuntimeError: If the step already has an outcome.
        """
        step = self.steps[index]
        if step.outcome is not None:
            raise RuntimeError(
                f"step {index} ('{step.label}') already resolved as {step.outcome.value}"
            )
        step.outcome = outcome
        logger.debug("step '%s' resolved as %s", step.label, outcome.value)
        self._on_change()

    def close(self) -> None:
        if self.closed:
            return
        for step in self.steps:
            if step.outcome is None:
                logger.warning("step '%s' closed without an outcome", step.label)
                step.outcome = MultiStepSpinnerOutcome.SKIPPED
        self.closed = True
        self._on_close()

    def _on_change(self) -> None:
        pass

    def _on_close(self) -> None:
        pass

    def __enter__(self) -> "MultiStepSpinner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
