"""
Field validation helpers shared by the planner models.

Each ``validate_*`` function returns an error message, or ``None`` when
the value is acceptable. Models collect the messages and raise a single
``ValidationError`` listing all of them.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any

_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_IFRAME_RE = re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE)


class ValidationError(ValueError):
    """Raised when a model fails validation."""

    def __init__(self, message: str, errors: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.errors = list(errors)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid number here
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == value


def validate_non_empty_string(value: Any, field_name: str) -> str | None:
    if not isinstance(value, str):
        return f"{field_name} must be a string"
    if not value:
        return f"{field_name} cannot be empty"
    return None


def validate_string_length(value: Any, field_name: str, min_length: int, max_length: int) -> str | None:
    if not isinstance(value, str):
        return f"{field_name} must be a string"
    if len(value) < min_length:
        return f"{field_name} must be at least {_plural(min_length, 'character')}"
    if len(value) > max_length:
        return f"{field_name} must be at most {_plural(max_length, 'character')}"
    return None


def validate_non_empty_trimmed_string(value: Any, field_name: str) -> str | None:
    if not isinstance(value, str):
        return f"{field_name} must be a string"
    if not value.strip():
        return f"{field_name} cannot be empty or whitespace only"
    return None


def validate_boolean(value: Any, field_name: str) -> str | None:
    if not isinstance(value, bool):
        return f"{field_name} must be a boolean"
    return None


def validate_number(value: Any, field_name: str) -> str | None:
    if not _is_number(value):
        return f"{field_name} must be a number"
    return None


def validate_positive_number(value: Any, field_name: str) -> str | None:
    error = validate_number(value, field_name)
    if error:
        return error
    if value < 0:
        return f"{field_name} must be a positive number"
    return None


def validate_number_range(value: Any, field_name: str, minimum: float, maximum: float) -> str | None:
    error = validate_number(value, field_name)
    if error:
        return error
    if value < minimum:
        return f"{field_name} must be at least {minimum}"
    if value > maximum:
        return f"{field_name} must be at most {maximum}"
    return None


def validate_list(value: Any, field_name: str) -> str | None:
    if not isinstance(value, list):
        return f"{field_name} must be a list"
    return None


def validate_list_length(
    value: Any,
    field_name: str,
    min_length: int | None = None,
    max_length: int | None = None,
) -> str | None:
    error = validate_list(value, field_name)
    if error:
        return error
    if min_length is not None and len(value) < min_length:
        return f"{field_name} must have at least {_plural(min_length, 'element')}"
    if max_length is not None and len(value) > max_length:
        return f"{field_name} must have at most {_plural(max_length, 'element')}"
    return None


def validate_pattern(value: Any, field_name: str, pattern: re.Pattern[str], description: str) -> str | None:
    if not isinstance(value, str):
        return f"{field_name} must be a string"
    if not pattern.search(value):
        return f"{field_name} must match {description}"
    return None


def validate_choice(value: Any, field_name: str, allowed: Iterable[Any]) -> str | None:
    allowed = list(allowed)
    if value not in allowed:
        choices = ", ".join(f'"{choice}"' for choice in allowed)
        return f"{field_name} must be one of: {choices}"
    return None


def validate_timestamp(
    value: Any,
    field_name: str,
    after: float | None = None,
    after_field_name: str | None = None,
) -> str | None:
    error = validate_positive_number(value, field_name)
    if error:
        return error
    if after is not None and _is_number(after) and value < after:
        return f"{field_name} cannot be before {after_field_name or 'the reference timestamp'}"
    return None


def validate_id(value: Any, field_name: str, prefix: str | None = None) -> str | None:
    error = validate_non_empty_string(value, field_name)
    if error:
        return error
    if prefix and not value.startswith(prefix):
        return f'{field_name} must start with "{prefix}"'
    return None


def collect_errors(*results: str | None) -> list[str]:
    return [error for error in results if error is not None]


def throw_if_errors(errors: Sequence[str], entity_name: str) -> None:
    """
    Raise ``ValidationError`` if ``errors`` is not empty.
    """
    if errors:
        raise ValidationError(f"{entity_name} validation failed: {', '.join(errors)}", errors)


def sanitize_string(value: str) -> str:
    """Strip script and iframe blocks and surrounding whitespace."""
    value = _SCRIPT_RE.sub("", value)
    value = _IFRAME_RE.sub("", value)
    return value.strip()


def truncate_string(value: str, max_length: int, ellipsis: str = "...") -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - len(ellipsis)] + ellipsis
