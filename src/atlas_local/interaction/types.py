"""
Prompt option and result types, plus the interaction capabilities.

Prompt results are data: a canceled prompt (Ctrl-C, Esc, closed stdin) is
reported as a canceled result, never as an exception.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Sequence, runtime_checkable

from atlas_local.interaction.spinner import MultiStepSpinner, Spinner


@runtime_checkable
class InputValidator(Protocol):
    """Validates prompt input."""

    def validate(self, value: str) -> str | None:
        """Return an error message for invalid input, None when valid."""
        ...


class ConfirmationPromptResult(str, Enum):
    YES = "yes"
    NO = "no"
    CANCELED = "canceled"


@dataclass
class ConfirmationPromptOptions:
    message: str
    help_message: str | None = None
    default: bool = False


@dataclass
class InputPromptOptions:
    """
    Options for a single-value prompt.

    Attributes:
        message: Question shown to the user.
        default: Value used when the user submits an empty answer.
        validator: Checked on every submission; the prompt repeats until valid.
        final_answer: Already known value. The prompt is printed together with
            this answer and returns it without waiting for input.
    """

    message: str
    default: str | None = None
    validator: InputValidator | None = None
    final_answer: str | None = None


@dataclass(frozen=True)
class InputPromptResult:
    value: str = ""
    canceled: bool = False


@dataclass
class SelectPromptOptions:
    message: str
    options: Sequence[str] = field(default_factory=list)


@dataclass(frozen=True)
class SelectPromptResult:
    value: str = ""
    canceled: bool = False


@runtime_checkable
class ConfirmationPrompt(Protocol):
    def confirm(self, options: ConfirmationPromptOptions) -> ConfirmationPromptResult: ...


@runtime_checkable
class InputPrompt(Protocol):
    def input(self, options: InputPromptOptions) -> InputPromptResult: ...


@runtime_checkable
class SelectPrompt(Protocol):
    def select(self, options: SelectPromptOptions) -> SelectPromptResult: ...


@runtime_checkable
class SpinnerInteraction(Protocol):
    def start_spinner(self, message: str) -> Spinner:
        """Start a spinner; use the returned handle as a context manager."""
        ...


@runtime_checkable
class MultiStepSpinnerInteraction(Protocol):
    def start_multi_step_spinner(self, steps: Sequence[str]) -> MultiStepSpinner:
        """Start a multi-step spinner; use the returned handle as a context manager."""
        ...
