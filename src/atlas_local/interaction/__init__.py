"""
User interaction: prompts and spinners.

- types: prompt options/results and the interaction capability Protocols
- spinner: scoped single and multi-step spinner handles
- console: the rich-based terminal implementation
"""

from atlas_local.interaction.console import ConsoleInteraction
from atlas_local.interaction.spinner import (
    MultiStepSpinner,
    MultiStepSpinnerOutcome,
    MultiStepSpinnerStep,
    Spinner,
)
from atlas_local.interaction.types import (
    ConfirmationPrompt,
    ConfirmationPromptOptions,
    ConfirmationPromptResult,
    InputPrompt,
    InputPromptOptions,
    InputPromptResult,
    InputValidator,
    MultiStepSpinnerInteraction,
    SelectPrompt,
    SelectPromptOptions,
    SelectPromptResult,
    SpinnerInteraction,
)

__all__ = [
    "ConfirmationPrompt",
    "ConfirmationPromptOptions",
    "ConfirmationPromptResult",
    "ConsoleInteraction",
    "InputPrompt",
    "InputPromptOptions",
    "InputPromptResult",
    "InputValidator",
    "MultiStepSpinner",
    "MultiStepSpinnerInteraction",
    "MultiStepSpinnerOutcome",
    "MultiStepSpinnerStep",
    "SelectPrompt",
    "SelectPromptOptions",
    "SelectPromptResult",
    "Spinner",
    "SpinnerInteraction",
]
