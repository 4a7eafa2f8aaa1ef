"""Input validators for setup prompts.

Each validator returns an error message for invalid input and None
otherwise. The same validators check values given as flags, so a flag
and a typed answer go through identical rules.
"""

from atlas_local.models import MongoDBVersion

LOWEST_SUPPORTED_MAJOR_VERSION = 7
AUTO_ASSIGN_PORT = "auto-assign"


class DeploymentNameValidator:
    """Accepts any name; an empty one means "generate a name"."""

    def validate(self, value: str) -> str | None:
        return None


class MdbVersionValidator:
    """Accepts latest, preview, or a version with major >= 7."""

    def validate(self, value: str) -> str | None:
        try:
            version = MongoDBVersion.parse(value)
        except ValueError as e:
            return str(e)

        if version.major is not None and version.major < LOWEST_SUPPORTED_MAJOR_VERSION:
            return f"The lowest supported MongoDB version is {LOWEST_SUPPORTED_MAJOR_VERSION}"
        return None


class PortValidator:
    """Accepts 1-65535, or empty / "auto-assign" to let the engine pick."""

    def validate(self, value: str) -> str | None:
        if value in ("", AUTO_ASSIGN_PORT):
            return None
        if value.isdigit() and 1 <= int(value) <= 65535:
            return None
        return "Port must be a number between 1 and 65535, leave empty to auto-assign"


def yes_no_to_bool(value: str, default: bool) -> bool:
    """
    Interpret a yes/no answer.

    Raises:
        ValueError: If the answer is not y, yes, n, no or empty.
    """
    answer = value.strip().lower()
    if answer == "":
        return default
    if answer in ("y", "yes"):
        return True
    if answer in ("n", "no"):
        return False
    raise ValueError(f"Invalid input '{value}', please enter y or n")


class YesNoValidator:
    """Accepts y, yes, n, no (any case) and empty input."""

    def validate(self, value: str) -> str | None:
        try:
            yes_no_to_bool(value, False)
        except ValueError as e:
            return str(e)
        return None
