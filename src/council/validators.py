"""
Input Validators - Validation of operator input at the CLI boundary.

Parse at the boundary: validate and type-check all external input
before it enters the orchestrator. Every failure is a UsageError and
happens before any dispatch.
"""

from .config import BACKENDS
from .errors import UsageError

MAX_TASK_LENGTH = 100_000


def validate_not_empty(value: str | None, field_name: str = "input") -> str:
    """Validate that a string is present and not whitespace-only."""
    if not value or not value.strip():
        raise UsageError(f"{field_name} is required")
    return value


def validate_length(
    value: str,
    field_name: str = "input",
    max_length: int = MAX_TASK_LENGTH,
) -> str:
    """Validate string length is within bounds."""
    if len(value) > max_length:
        raise UsageError(f"{field_name} must be at most {max_length} characters")
    return value


def validate_positive_number(value: int | float, field_name: str = "value") -> int | float:
    """Validate that a number is strictly positive."""
    if value <= 0:
        raise UsageError(f"{field_name} must be a positive integer")
    return value


def validate_in_choices(value: str, choices: tuple[str, ...], field_name: str = "value") -> str:
    """Validate that a value is one of the allowed choices."""
    if value not in choices:
        raise UsageError(f"{field_name} must be one of: {', '.join(choices)}")
    return value


def validate_task(task: str | None) -> str:
    """Validate the task text. Returned verbatim (no stripping) when valid."""
    validate_not_empty(task, "Task description")
    return validate_length(task, "Task description")


def validate_run_options(num_members: int, timeout_seconds: int, backend: str) -> None:
    """Validate numeric and enum options shared by every run."""
    validate_positive_number(num_members, "Number of council members")
    validate_positive_number(timeout_seconds, "Timeout")
    validate_in_choices(backend, BACKENDS, "Backend")
