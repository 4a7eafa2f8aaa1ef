"""Output formatting for command results.

A result is anything that is both printable (``__str__``) and a pydantic
model. Text output uses the former, JSON output the latter.
"""

from enum import Enum

from pydantic import BaseModel


class Format(str, Enum):
    """Output format selected with --output."""

    TEXT = "text"
    JSON = "json"


def format_result(result: BaseModel, fmt: Format) -> str:
    """Render a command result.

    Args:
        result: Pydantic model implementing __str__ for its text form.
        fmt: Requested format.

    Returns:
        The rendered string (no trailing newline).
    """
    if fmt is Format.JSON:
        return result.model_dump_json(exclude_none=True, by_alias=True)
    return str(result)
