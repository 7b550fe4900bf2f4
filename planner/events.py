"""
Event map for the planner.

The event bus is generic: it carries any hashable event type and any
payload. This module fixes the closed set of event types the planner
application uses, and the payload each one carries.

Producers build the payload dataclass for the event they publish.
Consumers can rely on receiving that dataclass. The bus never checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from planner.models.item import Item
    from planner.models.section import Section

PlannerState = dict[str, Any]


class EventType(str, Enum):
    SECTION_CREATED = "section:created"
    SECTION_UPDATED = "section:updated"
    SECTION_DELETED = "section:deleted"
    SECTION_MOVED = "section:moved"

    ITEM_CREATED = "item:created"
    ITEM_UPDATED = "item:updated"
    ITEM_DELETED = "item:deleted"
    ITEM_MOVED = "item:moved"
    ITEM_CHECKED = "item:checked"

    STATE_CHANGED = "state:changed"
    STATE_LOADED = "state:loaded"
    STATE_SAVED = "state:saved"
    STATE_RESET = "state:reset"
    STATE_UNDO = "state:undo"
    STATE_REDO = "state:redo"
    STATE_ERROR = "state:error"

    ORIENTATION_CHANGED = "orientation:changed"

    ERROR_OCCURRED = "error:occurred"

    def __str__(self) -> str:
        return self.value


# Reserved channel for listener failures and other reported errors.
ERROR_CHANNEL = EventType.ERROR_OCCURRED


class ListenerError(Exception):
    """Raised-value wrapper for failures that were not exceptions."""


def as_exception(value: object) -> BaseException:
    """Return ``value`` if it is an exception, otherwise wrap it."""
    if isinstance(value, BaseException):
        return value
    return ListenerError(str(value))


# ---------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class SectionCreated:
    section: Section


@dataclass(frozen=True)
class SectionUpdated:
    section: Section


@dataclass(frozen=True)
class SectionDeleted:
    section_id: str


@dataclass(frozen=True)
class SectionMoved:
    section_id: str
    from_column: int
    to_column: int


@dataclass(frozen=True)
class ItemCreated:
    item: Item
    section_id: str


@dataclass(frozen=True)
class ItemUpdated:
    item: Item
    section_id: str


@dataclass(frozen=True)
class ItemDeleted:
    item_id: str
    section_id: str


@dataclass(frozen=True)
class ItemMoved:
    item_id: str
    from_section_id: str
    to_section_id: str


@dataclass(frozen=True)
class ItemChecked:
    item_id: str
    checked: bool


@dataclass(frozen=True)
class StateChanged:
    state: PlannerState


@dataclass(frozen=True)
class StateLoaded:
    state: PlannerState


@dataclass(frozen=True)
class StateSaved:
    state: PlannerState


@dataclass(frozen=True)
class StateReset:
    pass


@dataclass(frozen=True)
class StateUndo:
    state: PlannerState


@dataclass(frozen=True)
class StateRedo:
    state: PlannerState


@dataclass(frozen=True)
class StateError:
    error: str


@dataclass(frozen=True)
class OrientationChanged:
    orientation: str


@dataclass(frozen=True)
class ErrorPayload:
    """Payload of the error channel."""

    error: BaseException
    context: str = field(default="")

    @classmethod
    def capture(cls, error: object, context: str) -> ErrorPayload:
        return cls(error=as_exception(error), context=context)


EVENT_PAYLOADS: dict[EventType, type] = {
    EventType.SECTION_CREATED: SectionCreated,
    EventType.SECTION_UPDATED: SectionUpdated,
    EventType.SECTION_DELETED: SectionDeleted,
    EventType.SECTION_MOVED: SectionMoved,
    EventType.ITEM_CREATED: ItemCreated,
    EventType.ITEM_UPDATED: ItemUpdated,
    EventType.ITEM_DELETED: ItemDeleted,
    EventType.ITEM_MOVED: ItemMoved,
    EventType.ITEM_CHECKED: ItemChecked,
    EventType.STATE_CHANGED: StateChanged,
    EventType.STATE_LOADED: StateLoaded,
    EventType.STATE_SAVED: StateSaved,
    EventType.STATE_RESET: StateReset,
    EventType.STATE_UNDO: StateUndo,
    EventType.STATE_REDO: StateRedo,
    EventType.STATE_ERROR: StateError,
    EventType.ORIENTATION_CHANGED: OrientationChanged,
    EventType.ERROR_OCCURRED: ErrorPayload,
}

# Events that change the planner document and should be persisted.
MUTATION_EVENTS: tuple[EventType, ...] = (
    EventType.STATE_CHANGED,
    EventType.STATE_UNDO,
    EventType.STATE_REDO,
)
