"""
Shared command plumbing.

Every command is an object with a single ``execute()`` coroutine returning
a result model. Results are closed unions of pydantic variants tagged by an
``outcome`` field; expected failures and user cancellation are variants,
never exceptions.
"""

from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, TypeAdapter

ResultT = TypeVar("ResultT", bound=BaseModel, covariant=True)


class Command(Protocol[ResultT]):
    async def execute(self) -> ResultT:
        """Run the command to completion and return its result."""
        ...


def parse_result(result_type: Any, data: str | bytes) -> BaseModel:
    """Parse a JSON-serialized result back into its variant.

    Args:
        result_type: A result union (e.g. StartResult) or model class.
        data: JSON produced by format_result(..., Format.JSON).
    """
    return TypeAdapter(result_type).validate_json(data)
