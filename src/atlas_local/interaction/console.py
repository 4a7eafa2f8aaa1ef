"""
Terminal interaction built on rich.

ConsoleInteraction implements every interaction capability. Prompts and
spinners write to stderr; stdout is reserved for command output.
"""

import logging
from typing import Sequence

from rich.console import Console, Group
from rich.live import Live
from rich.prompt import Confirm, Prompt
from rich.spinner import Spinner as RichSpinner
from rich.text import Text

from atlas_local.config import SPINNER_TICK
from atlas_local.interaction.spinner import MultiStepSpinner, MultiStepSpinnerOutcome, Spinner
from atlas_local.interaction.types import (
    ConfirmationPromptOptions,
    ConfirmationPromptResult,
    InputPromptOptions,
    InputPromptResult,
    SelectPromptOptions,
    SelectPromptResult,
)

logger = logging.getLogger(__name__)

_OUTCOME_STYLE = {
    MultiStepSpinnerOutcome.SUCCESS: ("✔", "green"),
    MultiStepSpinnerOutcome.FAILURE: ("✘", "red"),
    MultiStepSpinnerOutcome.SKIPPED: ("-", "yellow"),
}


class ConsoleSpinner(Spinner):
    """Single spinner backed by rich's status display."""

    def __init__(self, console: Console, message: str):
        super().__init__(message)
        self._status = console.status(
            message, spinner="dots", refresh_per_second=1 / SPINNER_TICK
        )
        self._status.start()

    def _on_stop(self) -> None:
        self._status.stop()


class ConsoleMultiStepSpinner(MultiStepSpinner):
    """Multi-step spinner rendered as a live list of steps."""

    def __init__(self, console: Console, labels: Sequence[str]):
        super().__init__(labels)
        self._spinner = RichSpinner("dots")
        self._live = Live(
            console=console,
            refresh_per_second=1 / SPINNER_TICK,
            get_renderable=self._render,
        )
        self._live.start()

    def _render(self) -> Group:
        current = self.current_step
        lines = []
        for index, step in enumerate(self.steps):
            if step.outcome is not None:
                icon, style = _OUTCOME_STYLE[step.outcome]
                lines.append(Text.assemble((f"{icon} ", style), step.label))
            elif index == current and not self.closed:
                self._spinner.update(text=step.label)
                lines.append(self._spinner)
            else:
                lines.append(Text(f"  {step.label}", style="dim"))
        return Group(*lines)

    def _on_change(self) -> None:
        self._live.refresh()

    def _on_close(self) -> None:
        self._live.refresh()
        self._live.stop()


class ConsoleInteraction:
    """
    Prompts and spinners on the terminal.

    Ctrl-C or end of input while prompting produces a canceled result.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def _print_answer(self, message: str, answer: str) -> None:
        self.console.print(f"[green]>[/green] {message} [cyan]{answer}[/cyan]", highlight=False)

    def confirm(self, options: ConfirmationPromptOptions) -> ConfirmationPromptResult:
        if options.help_message:
            self.console.print(options.help_message)
        try:
            answer = Confirm.ask(options.message, default=options.default, console=self.console)
        except (KeyboardInterrupt, EOFError):
            logger.debug("confirmation prompt canceled")
            return ConfirmationPromptResult.CANCELED
        return ConfirmationPromptResult.YES if answer else ConfirmationPromptResult.NO

    def input(self, options: InputPromptOptions) -> InputPromptResult:
        if options.final_answer is not None:
            self._print_answer(options.message, options.final_answer)
            return InputPromptResult(value=options.final_answer)

        while True:
            try:
                value = Prompt.ask(
                    options.message,
                    default=options.default if options.default is not None else "",
                    show_default=options.default is not None,
                    console=self.console,
                )
            except (KeyboardInterrupt, EOFError):
                logger.debug("input prompt canceled")
                return InputPromptResult(canceled=True)

            if options.validator is not None:
                error = options.validator.validate(value)
                if error is not None:
                    self.console.print(f"[red]{error}[/red]")
                    continue
            return InputPromptResult(value=value)

    def select(self, options: SelectPromptOptions) -> SelectPromptResult:
        self.console.print(options.message)
        for number, option in enumerate(options.options, start=1):
            self.console.print(f"  [cyan]{number}[/cyan]) {option}")

        choices = [str(number) for number in range(1, len(options.options) + 1)]
        try:
            answer = Prompt.ask(
                "Select an option", choices=choices, default="1", console=self.console
            )
        except (KeyboardInterrupt, EOFError):
            logger.debug("select prompt canceled")
            return SelectPromptResult(canceled=True)

        value = options.options[int(answer) - 1]
        self._print_answer(options.message, value)
        return SelectPromptResult(value=value)

    def start_spinner(self, message: str) -> ConsoleSpinner:
        return ConsoleSpinner(self.console, message)

    def start_multi_step_spinner(self, steps: Sequence[str]) -> ConsoleMultiStepSpinner:
        return ConsoleMultiStepSpinner(self.console, steps)
