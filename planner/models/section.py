"""Section model: a titled checklist or a free-text note."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from planner.models.item import Item, generate_id, now_ms
from planner.validation import (
    collect_errors,
    throw_if_errors,
    validate_boolean,
    validate_list_length,
    validate_non_empty_string,
    validate_positive_number,
    validate_string_length,
    validate_timestamp,
)

DEFAULT_TITLE = "New Section"
DEFAULT_PLACEHOLDER = "Write something..."
TITLE_MAX_LENGTH = 100
TEXT_CONTENT_MAX_LENGTH = 10000
MAX_ITEMS = 100


@dataclass
class Section:
    title: str = DEFAULT_TITLE
    items: list[Item] = field(default_factory=list)
    is_text_section: bool = False
    text_content: str = ""
    placeholder: str = DEFAULT_PLACEHOLDER
    column_index: int = 0
    id: str = field(default_factory=lambda: generate_id("section"))
    created_at: int = field(default_factory=now_ms)
    updated_at: int = field(default_factory=now_ms)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        errors = collect_errors(
            validate_non_empty_string(self.id, "Section ID"),
            validate_string_length(self.title, "Section title", 1, TITLE_MAX_LENGTH),
            validate_list_length(self.items, "Section items", max_length=MAX_ITEMS),
            validate_boolean(self.is_text_section, "Section isTextSection"),
            validate_string_length(self.text_content, "Section textContent", 0, TEXT_CONTENT_MAX_LENGTH),
            validate_positive_number(self.column_index, "Section columnIndex"),
            validate_timestamp(self.created_at, "Section createdAt"),
            validate_timestamp(self.updated_at, "Section updatedAt", self.created_at, "createdAt"),
        )
        throw_if_errors(errors, "Section")

    def touch(self) -> None:
        self.updated_at = max(now_ms(), self.created_at)

    def update(
        self,
        title: str | None = None,
        text_content: str | None = None,
        placeholder: str | None = None,
        is_text_section: bool | None = None,
    ) -> None:
        if title is not None:
            self.title = title
        if text_content is not None:
            self.text_content = text_content
        if placeholder is not None:
            self.placeholder = placeholder
        if is_text_section is not None:
            self.is_text_section = is_text_section
        self.touch()
        self.validate()

    # -----------------------------------------------------------------
    # Items
    # -----------------------------------------------------------------

    def add_item(self, item: Item, position: int | None = None) -> Item:
        if len(self.items) >= MAX_ITEMS:
            throw_if_errors([f"Section cannot have more than {MAX_ITEMS} items"], "Section")
        if position is not None and 0 <= position <= len(self.items):
            self.items.insert(position, item)
        else:
            self.items.append(item)
        self.touch()
        return item

    def remove_item(self, item_id: str) -> Item | None:
        for index, item in enumerate(self.items):
            if item.id == item_id:
                del self.items[index]
                self.touch()
                return item
        return None

    def get_item(self, item_id: str) -> Item | None:
        return next((item for item in self.items if item.id == item_id), None)

    def has_item(self, item_id: str) -> bool:
        return self.get_item(item_id) is not None

    def move_item(self, item_id: str, new_position: int) -> bool:
        item = self.get_item(item_id)
        if item is None:
            return False
        if not 0 <= new_position < len(self.items):
            raise IndexError(
                f"Invalid position: {new_position}. Must be between 0 and {len(self.items) - 1}"
            )
        self.items.remove(item)
        self.items.insert(new_position, item)
        self.touch()
        return True

    @property
    def completed_count(self) -> int:
        return sum(1 for item in self.items if item.checked)

    # -----------------------------------------------------------------
    # Serialization
    # -----------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "items": [item.to_dict() for item in self.items],
            "isTextSection": self.is_text_section,
            "textContent": self.text_content,
            "placeholder": self.placeholder,
            "columnIndex": self.column_index,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Section:
        if not isinstance(data, dict):
            throw_if_errors(["Section data must be a mapping"], "Section")
        items_data = data.get("items") or []
        if not isinstance(items_data, list):
            throw_if_errors(["Section items must be a list"], "Section")
        kwargs: dict[str, Any] = {
            "title": data.get("title", DEFAULT_TITLE),
            "items": [Item.from_dict(item) for item in items_data],
            "is_text_section": data.get("isTextSection", False),
            "text_content": data.get("textContent", ""),
            "placeholder": data.get("placeholder", DEFAULT_PLACEHOLDER),
            "column_index": data.get("columnIndex", 0),
        }
        for key, name in (("id", "id"), ("createdAt", "created_at"), ("updatedAt", "updated_at")):
            if data.get(key) is not None:
                kwargs[name] = data[key]
        return cls(**kwargs)

    def clone(self) -> Section:
        """Copy the section with fresh ids for it and its items."""
        return Section(
            title=self.title,
            items=[item.clone() for item in self.items],
            is_text_section=self.is_text_section,
            text_content=self.text_content,
            placeholder=self.placeholder,
            column_index=self.column_index,
        )
