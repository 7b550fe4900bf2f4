"""
Document operations for the planner.

The controller is the producer side of the event bus. Each operation
edits the current planner, publishes the matching domain event, and
records the edit with the state service (which publishes
``state:changed``; autosave and re-rendering hang off that).

A failed operation leaves the planner as it was. The failure is reported
on the error channel and then raised to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from planner.config import DefaultsConfig
from planner.engine.event_bus import EventBus
from planner.events import (
    ERROR_CHANNEL,
    ErrorPayload,
    EventType,
    ItemChecked,
    ItemCreated,
    ItemDeleted,
    ItemMoved,
    ItemUpdated,
    OrientationChanged,
    SectionCreated,
    SectionDeleted,
    SectionMoved,
    SectionUpdated,
)
from planner.models.item import Item
from planner.models.planner import Planner
from planner.models.section import Section
from planner.state import StateService
from planner.validation import sanitize_string

logger = logging.getLogger(__name__)


class PlannerController:
    def __init__(
        self,
        state_service: StateService,
        event_bus: EventBus,
        defaults: DefaultsConfig | None = None,
    ) -> None:
        self.state_service = state_service
        self.event_bus = event_bus
        self.defaults = defaults or DefaultsConfig()

    def ensure_planner(self) -> Planner:
        """
        Return the current planner, starting an empty one if there is none.
        """
        planner = self.state_service.state
        if planner is None:
            planner = Planner(orientation=self.defaults.orientation)
            self.state_service.set_state(planner, "New planner", add_to_history=False)
        return planner

    @contextmanager
    def _edit(self, description: str) -> Iterator[Planner]:
        planner = self.ensure_planner()
        before = planner.to_state()
        try:
            yield planner
        except (LookupError, ValueError) as exc:
            logger.info("%s failed: %s", description, exc)
            self.state_service.rollback(before)
            self.event_bus.publish(ERROR_CHANNEL, ErrorPayload.capture(exc, description))
            raise
        self.state_service.record_change(before, description)

    @staticmethod
    def _section(planner: Planner, section_id: str) -> Section:
        section = planner.get_section(section_id)
        if section is None:
            raise LookupError(f"Unknown section: {section_id}")
        return section

    @staticmethod
    def _item(planner: Planner, item_id: str) -> tuple[Section, Item]:
        found = planner.find_item(item_id)
        if found is None:
            raise LookupError(f"Unknown item: {item_id}")
        return found

    # -----------------------------------------------------------------
    # Sections
    # -----------------------------------------------------------------

    def add_section(
        self,
        title: str | None = None,
        column: int = 0,
        is_text_section: bool = False,
        position: int | None = None,
    ) -> Section:
        with self._edit("Add section") as planner:
            section = Section(
                title=sanitize_string(title) if title else self.defaults.section_title,
                placeholder=self.defaults.section_placeholder,
                is_text_section=is_text_section,
            )
            planner.add_section(section)
            planner.add_section_to_column(section.id, column, position)
            self.event_bus.publish(EventType.SECTION_CREATED, SectionCreated(section))
        return section

    def update_section(self, section_id: str, title: str | None = None, placeholder: str | None = None) -> Section:
        with self._edit("Update section") as planner:
            section = self._section(planner, section_id)
            section.update(
                title=sanitize_string(title) if title is not None else None,
                placeholder=placeholder,
            )
            self.event_bus.publish(EventType.SECTION_UPDATED, SectionUpdated(section))
        return section

    def set_note(self, section_id: str, text: str) -> Section:
        """Replace the free text of a section."""
        with self._edit("Edit note") as planner:
            section = self._section(planner, section_id)
            section.update(text_content=sanitize_string(text))
            self.event_bus.publish(EventType.SECTION_UPDATED, SectionUpdated(section))
        return section

    def delete_section(self, section_id: str) -> None:
        with self._edit("Delete section") as planner:
            self._section(planner, section_id)
            planner.remove_section(section_id)
            self.event_bus.publish(EventType.SECTION_DELETED, SectionDeleted(section_id))

    def move_section(self, section_id: str, column: int, position: int | None = None) -> None:
        with self._edit("Move section") as planner:
            self._section(planner, section_id)
            from_column = planner.find_section_column(section_id)
            planner.move_section_to_column(section_id, column, position)
            self.event_bus.publish(EventType.SECTION_MOVED, SectionMoved(section_id, from_column, column))

    # -----------------------------------------------------------------
    # Items
    # -----------------------------------------------------------------

    def add_item(self, section_id: str, text: str = "", position: int | None = None) -> Item:
        with self._edit("Add item") as planner:
            section = self._section(planner, section_id)
            item = section.add_item(Item(text=sanitize_string(text)), position)
            self.event_bus.publish(EventType.ITEM_CREATED, ItemCreated(item, section_id))
        return item

    def update_item(self, item_id: str, text: str | None = None, checked: bool | None = None) -> Item:
        with self._edit("Update item") as planner:
            section, item = self._item(planner, item_id)
            item.update(text=sanitize_string(text) if text is not None else None, checked=checked)
            self.event_bus.publish(EventType.ITEM_UPDATED, ItemUpdated(item, section.id))
        return item

    def toggle_item(self, item_id: str) -> bool:
        """Flip an item's checked state and return the new value."""
        with self._edit("Toggle item") as planner:
            _, item = self._item(planner, item_id)
            checked = item.toggle_checked()
            self.event_bus.publish(EventType.ITEM_CHECKED, ItemChecked(item_id, checked))
        return checked

    def delete_item(self, item_id: str) -> None:
        with self._edit("Delete item") as planner:
            section, _ = self._item(planner, item_id)
            section.remove_item(item_id)
            self.event_bus.publish(EventType.ITEM_DELETED, ItemDeleted(item_id, section.id))

    def move_item(self, item_id: str, target_section_id: str, position: int | None = None) -> None:
        with self._edit("Move item") as planner:
            source, item = self._item(planner, item_id)
            target = self._section(planner, target_section_id)
            if source is target:
                target.move_item(item_id, position if position is not None else len(target.items) - 1)
            else:
                target.add_item(item, position)
                source.remove_item(item_id)
            self.event_bus.publish(EventType.ITEM_MOVED, ItemMoved(item_id, source.id, target.id))

    # -----------------------------------------------------------------
    # Document
    # -----------------------------------------------------------------

    def set_orientation(self, orientation: str) -> None:
        with self._edit("Change orientation") as planner:
            planner.set_orientation(orientation)
            self.event_bus.publish(EventType.ORIENTATION_CHANGED, OrientationChanged(orientation))
