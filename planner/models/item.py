"""Checklist item model."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from planner.validation import (
    collect_errors,
    throw_if_errors,
    validate_boolean,
    validate_non_empty_string,
    validate_string_length,
    validate_timestamp,
)

TEXT_MAX_LENGTH = 500


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def generate_id(prefix: str) -> str:
    return f"{prefix}-{now_ms()}-{uuid.uuid4().hex[:9]}"


@dataclass
class Item:
    """
    A single checklist entry.

    Items validate themselves on construction and after every update, and
    raise ``ValidationError`` when a field is out of range.
    """

    text: str = ""
    checked: bool = False
    id: str = field(default_factory=lambda: generate_id("item"))
    created_at: int = field(default_factory=now_ms)
    updated_at: int = field(default_factory=now_ms)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        errors = collect_errors(
            validate_non_empty_string(self.id, "Item ID"),
            validate_string_length(self.text, "Item text", 0, TEXT_MAX_LENGTH),
            validate_boolean(self.checked, "Item checked"),
            validate_timestamp(self.created_at, "Item createdAt"),
            validate_timestamp(self.updated_at, "Item updatedAt"),
        )
        if not errors and self.updated_at < self.created_at:
            errors.append("Item updatedAt cannot be before createdAt")
        throw_if_errors(errors, "Item")

    def update(self, text: str | None = None, checked: bool | None = None) -> None:
        if text is not None:
            self.text = text
        if checked is not None:
            self.checked = checked
        self.updated_at = max(now_ms(), self.created_at)
        self.validate()

    def toggle_checked(self) -> bool:
        """Flip the checked state and return the new value."""
        self.checked = not self.checked
        self.updated_at = max(now_ms(), self.created_at)
        return self.checked

    def is_empty(self) -> bool:
        return not self.text.strip()

    @property
    def display_text(self) -> str:
        return self.text.strip()

    def clone(self) -> Item:
        """Copy text and state into a new item with a fresh id."""
        return Item(text=self.text, checked=self.checked)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "checked": self.checked,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Item:
        if not isinstance(data, dict):
            throw_if_errors(["Item data must be a mapping"], "Item")
        kwargs: dict[str, Any] = {
            "text": data.get("text", ""),
            "checked": data.get("checked", False),
        }
        if data.get("id") is not None:
            kwargs["id"] = data["id"]
        if data.get("createdAt") is not None:
            kwargs["created_at"] = data["createdAt"]
        if data.get("updatedAt") is not None:
            kwargs["updated_at"] = data["updatedAt"]
        return cls(**kwargs)

    def __str__(self) -> str:
        status = "[x]" if self.checked else "[ ]"
        return f"{status} {self.text}"
