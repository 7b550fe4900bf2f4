"""
Planner model: the root of the document.

A planner owns its sections and lays them out in columns. Sections that
exist but sit in no column are "orphaned"; they are kept and can be
placed again.
"""

from __future__ import annotations

import re
from typing import Any

from planner.models.item import generate_id, now_ms
from planner.models.section import Section
from planner.validation import (
    collect_errors,
    throw_if_errors,
    validate_choice,
    validate_list,
    validate_non_empty_string,
    validate_pattern,
    validate_timestamp,
)

ORIENTATIONS = ("portrait", "landscape")
DEFAULT_VERSION = "2.0.0"
VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")
MAX_COLUMNS = 10
MAX_SECTIONS_PER_COLUMN = 20
MAX_TOTAL_SECTIONS = 100


class Planner:
    def __init__(
        self,
        sections: list[Section] | None = None,
        columns_order: list[list[str]] | None = None,
        orientation: str = "portrait",
        version: str = DEFAULT_VERSION,
        id: str | None = None,
        created_at: int | None = None,
        updated_at: int | None = None,
    ) -> None:
        self.id = id or generate_id("planner")
        self.orientation = orientation
        self.version = version
        self.columns_order: list[list[str]] = columns_order if columns_order is not None else [[]]
        self.created_at = created_at if created_at is not None else now_ms()
        self.updated_at = updated_at if updated_at is not None else self.created_at

        if sections is not None and not isinstance(sections, list):
            throw_if_errors(["Planner sections must be a list"], "Planner")
        self._sections: dict[str, Section] = {}
        for section in sections or []:
            self._sections[section.id] = section

        self.validate()

    def validate(self) -> None:
        errors = collect_errors(
            validate_non_empty_string(self.id, "Planner ID"),
            validate_choice(self.orientation, "Planner orientation", ORIENTATIONS),
            validate_pattern(self.version, "Planner version", VERSION_PATTERN, 'semantic versioning (e.g., "2.0.0")'),
            validate_list(self.columns_order, "Planner columnsOrder"),
            validate_timestamp(self.created_at, "Planner createdAt"),
            validate_timestamp(self.updated_at, "Planner updatedAt", self.created_at, "createdAt"),
        )

        if isinstance(self.columns_order, list):
            if len(self.columns_order) > MAX_COLUMNS:
                errors.append(f"Planner cannot have more than {MAX_COLUMNS} columns")
            for col_index, column in enumerate(self.columns_order):
                if not isinstance(column, list):
                    errors.append(f"Planner columnsOrder[{col_index}] must be a list")
                    continue
                if len(column) > MAX_SECTIONS_PER_COLUMN:
                    errors.append(
                        f"Column {col_index} cannot have more than {MAX_SECTIONS_PER_COLUMN} sections"
                    )
                for position, section_id in enumerate(column):
                    if not isinstance(section_id, str):
                        errors.append(f"Planner columnsOrder[{col_index}][{position}] must be a string")

        if len(self._sections) > MAX_TOTAL_SECTIONS:
            errors.append(f"Planner cannot have more than {MAX_TOTAL_SECTIONS} sections")

        throw_if_errors(errors, "Planner")

    def touch(self) -> None:
        self.updated_at = max(now_ms(), self.created_at)

    def set_orientation(self, orientation: str) -> None:
        previous = self.orientation
        self.orientation = orientation
        try:
            self.validate()
        except ValueError:
            self.orientation = previous
            raise
        self.touch()

    # -----------------------------------------------------------------
    # Sections
    # -----------------------------------------------------------------

    def add_section(self, section: Section) -> Section:
        if section.id not in self._sections and len(self._sections) >= MAX_TOTAL_SECTIONS:
            throw_if_errors([f"Planner cannot have more than {MAX_TOTAL_SECTIONS} sections"], "Planner")
        self._sections[section.id] = section
        self.touch()
        return section

    def remove_section(self, section_id: str) -> Section | None:
        """Remove a section and every column reference to it."""
        section = self._sections.pop(section_id, None)
        if section is None:
            return None
        self.columns_order = [[sid for sid in column if sid != section_id] for column in self.columns_order]
        self.touch()
        return section

    def get_section(self, section_id: str) -> Section | None:
        return self._sections.get(section_id)

    def has_section(self, section_id: str) -> bool:
        return section_id in self._sections

    @property
    def sections(self) -> list[Section]:
        return list(self._sections.values())

    @property
    def section_count(self) -> int:
        return len(self._sections)

    def find_item(self, item_id: str) -> tuple[Section, Any] | None:
        """Return ``(section, item)`` for an item id, or ``None``."""
        for section in self._sections.values():
            item = section.get_item(item_id)
            if item is not None:
                return section, item
        return None

    def clear_sections(self) -> None:
        self._sections.clear()
        self.columns_order = [[]]
        self.touch()

    # -----------------------------------------------------------------
    # Columns
    # -----------------------------------------------------------------

    def add_section_to_column(self, section_id: str, column_index: int, position: int | None = None) -> bool:
        """
        Place a section in a column, removing it from wherever it was.

        Missing columns up to ``column_index`` are created.
        """
        if section_id not in self._sections:
            raise LookupError(f"Section {section_id} does not exist in planner")
        if column_index < 0 or column_index >= MAX_COLUMNS:
            raise IndexError(f"Invalid column index: {column_index}")

        while len(self.columns_order) <= column_index:
            self.columns_order.append([])

        self.remove_section_from_columns(section_id)
        column = self.columns_order[column_index]
        if len(column) >= MAX_SECTIONS_PER_COLUMN:
            throw_if_errors(
                [f"Column {column_index} cannot have more than {MAX_SECTIONS_PER_COLUMN} sections"],
                "Planner",
            )

        if position is not None and 0 <= position <= len(column):
            column.insert(position, section_id)
        else:
            column.append(section_id)

        self._sections[section_id].column_index = column_index
        self.touch()
        return True

    def move_section_to_column(self, section_id: str, column_index: int, position: int | None = None) -> bool:
        return self.add_section_to_column(section_id, column_index, position)

    def move_section_in_column(self, section_id: str, new_position: int) -> bool:
        column_index = self.find_section_column(section_id)
        if column_index == -1:
            return False

        column = self.columns_order[column_index]
        if not 0 <= new_position < len(column):
            raise IndexError(
                f"Invalid position: {new_position}. Must be between 0 and {len(column) - 1}"
            )

        column.remove(section_id)
        column.insert(new_position, section_id)
        self.touch()
        return True

    def remove_section_from_columns(self, section_id: str) -> bool:
        removed = False
        for column in self.columns_order:
            if section_id in column:
                column[:] = [sid for sid in column if sid != section_id]
                removed = True
        if removed:
            self.touch()
        return removed

    def column_sections(self, column_index: int) -> list[str]:
        if 0 <= column_index < len(self.columns_order):
            return list(self.columns_order[column_index])
        return []

    @property
    def column_count(self) -> int:
        return len(self.columns_order)

    def add_column(self) -> int:
        if len(self.columns_order) >= MAX_COLUMNS:
            throw_if_errors([f"Planner cannot have more than {MAX_COLUMNS} columns"], "Planner")
        self.columns_order.append([])
        self.touch()
        return len(self.columns_order) - 1

    def remove_column(self, column_index: int) -> list[str]:
        """
        Drop a column. Its sections stay in the planner, unplaced.
        """
        if not 0 <= column_index < len(self.columns_order):
            return []
        removed = self.columns_order.pop(column_index)
        if not self.columns_order:
            self.columns_order = [[]]
        self.touch()
        return list(removed)

    def find_section_column(self, section_id: str) -> int:
        for index, column in enumerate(self.columns_order):
            if section_id in column:
                return index
        return -1

    def sections_in_column(self, column_index: int) -> list[Section]:
        return [
            self._sections[sid]
            for sid in self.column_sections(column_index)
            if sid in self._sections
        ]

    def orphaned_sections(self) -> list[Section]:
        placed = {sid for column in self.columns_order for sid in column}
        return [section for section in self._sections.values() if section.id not in placed]

    # -----------------------------------------------------------------
    # Serialization
    # -----------------------------------------------------------------

    def to_state(self) -> dict[str, Any]:
        """Storage shape of the planner."""
        return {
            "sections": {sid: section.to_dict() for sid, section in self._sections.items()},
            "columnsOrder": [list(column) for column in self.columns_order],
            "orientation": self.orientation,
            "version": self.version,
            "lastModified": self.updated_at,
        }

    @classmethod
    def from_state(cls, state: dict[str, Any]) -> Planner:
        if not isinstance(state, dict):
            throw_if_errors(["Planner state must be a mapping"], "Planner")
        sections_data = state.get("sections") or {}
        if not isinstance(sections_data, dict):
            throw_if_errors(["Planner state sections must be a mapping"], "Planner")
        columns_data = state.get("columnsOrder") or [[]]

        errors = [
            f"Planner section '{key}' must be a mapping"
            for key, data in sections_data.items()
            if not isinstance(data, dict)
        ]
        if not isinstance(columns_data, list):
            errors.append("Planner columnsOrder must be a list")
        throw_if_errors(errors, "Planner")

        timestamp = state.get("lastModified")
        if timestamp is None:
            timestamp = now_ms()

        return cls(
            sections=[Section.from_dict(data) for data in sections_data.values()],
            columns_order=[
                list(column) if isinstance(column, list) else column
                for column in columns_data
            ],
            orientation=state.get("orientation", "portrait"),
            version=state.get("version") or DEFAULT_VERSION,
            created_at=timestamp,
            updated_at=timestamp,
        )

    def clone(self) -> Planner:
        return Planner.from_state(self.to_state())

    def __str__(self) -> str:
        return f"Planner ({self.section_count} sections, {self.column_count} columns, {self.orientation})"
