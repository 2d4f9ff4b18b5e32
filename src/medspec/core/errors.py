"""
Error types for the medspec pipeline.

Bad *data* never raises: the normalizer repairs it and the validator reports
it as a list of violations. The exceptions below are reserved for
configuration and programmer errors (a missing rulebook, an unreadable
config file), which should fail fast.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class MedspecError(Exception):
    """Base exception for all medspec errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class RulebookError(MedspecError):
    """
    Raised when a UX rulebook cannot be loaded.

    Examples:
    - Rulebook file does not exist
    - Invalid JSON or YAML
    - Document does not match the rulebook schema
    """

    pass


class ConfigError(MedspecError):
    """
    Raised when medspec.toml cannot be read or holds invalid values.

    Examples:
    - TOML syntax errors
    - Unknown tablet platform
    - Unknown log level
    """

    pass


class ModelOutputError(MedspecError):
    """
    Raised when no JSON document can be recovered from model output text.
    """

    pass


class PersistenceError(MedspecError):
    """
    Raised when a stored spec cannot be read back.

    Examples:
    - Unknown spec id
    - Corrupted spec file
    """

    pass


@dataclass
class ErrorContext:
    """
    Location of an error inside a document on disk.

    Attributes:
        file: Path to the document
        pointer: Optional dotted path inside the document (e.g. policies[0].rules[2])
    """

    file: Path
    pointer: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "ux_rule.json at policies[0].rules[2]"
        """
        if self.pointer:
            return f"{self.file} at {self.pointer}"
        return str(self.file)


@dataclass(frozen=True)
class Violation:
    """
    A single violated schema constraint.

    Attributes:
        path: Dotted path of the offending value (e.g. foundations.color[2].token)
        message: Human-readable reason
    """

    path: str
    message: str

    def format(self) -> str:
        return f"{self.path or '<root>'}: {self.message}"

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


def make_rulebook_error(
    message: str,
    file: Path | None = None,
    pointer: str | None = None,
) -> RulebookError:
    """
    Helper to create a RulebookError with optional context.

    Args:
        message: Error description
        file: Optional rulebook path
        pointer: Optional dotted path inside the rulebook

    Returns:
        RulebookError with context if a file was provided
    """
    if file:
        return RulebookError(message, ErrorContext(file=file, pointer=pointer))
    return RulebookError(message)
