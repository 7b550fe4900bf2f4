# planner/output/adapter.py
from __future__ import annotations

from typing import Any

from planner.engine.clock import WallClock
from planner.engine.event_bus import Clock, EventBus, Unsubscribe
from planner.events import EventType

from .error_adapter import ErrorAdapter
from .item_adapter import ItemAdapter
from .section_adapter import SectionAdapter
from .state_adapter import StateAdapter


class ActivityAdapter:
    """Dispatch events to the proper activity adapter."""

    def __init__(self):
        section = SectionAdapter()
        item = ItemAdapter()
        state = StateAdapter()
        error = ErrorAdapter()

        self.adapters = {
            # Sections
            EventType.SECTION_CREATED: section,
            EventType.SECTION_UPDATED: section,
            EventType.SECTION_DELETED: section,
            EventType.SECTION_MOVED: section,

            # Items
            EventType.ITEM_CREATED: item,
            EventType.ITEM_UPDATED: item,
            EventType.ITEM_DELETED: item,
            EventType.ITEM_MOVED: item,
            EventType.ITEM_CHECKED: item,

            # Document lifecycle
            EventType.STATE_LOADED: state,
            EventType.STATE_SAVED: state,
            EventType.STATE_RESET: state,
            EventType.STATE_UNDO: state,
            EventType.STATE_REDO: state,
            EventType.ORIENTATION_CHANGED: state,

            # Errors
            EventType.STATE_ERROR: error,
            EventType.ERROR_OCCURRED: error,
        }

    def transform(self, event: dict) -> list[str]:
        adapter = self.adapters.get(event.get("event_type"))
        if adapter:
            return list(adapter.transform(event))
        return []


class ActivityLog:
    """
    Rendering-side listener: turns every planner event into activity lines.

    Each line is stamped with the clock's time when the listener runs.
    ``state:changed`` is skipped; the domain event that caused it already
    produced a line.
    """

    SKIPPED = frozenset({EventType.STATE_CHANGED})

    def __init__(
        self,
        event_bus: EventBus,
        adapter: ActivityAdapter | None = None,
        sink=None,
        clock: Clock | None = None,
    ) -> None:
        self.event_bus = event_bus
        self.adapter = adapter or ActivityAdapter()
        self.sink = sink
        self.clock = clock or WallClock()
        self.lines: list[str] = []
        self._unsubscribers: list[Unsubscribe] = []
        for event_type in EventType:
            if event_type in self.SKIPPED:
                continue
            self._unsubscribers.append(event_bus.subscribe(event_type, self._listener_for(event_type)))

    def _listener_for(self, event_type: EventType):
        def handle_event(payload: Any) -> None:
            event = {
                "event_type": str(event_type),
                "timestamp": self.clock.now(),
                "payload": payload,
            }
            for line in self.adapter.transform(event):
                if not line:
                    continue
                self.lines.append(line)
                if self.sink is not None:
                    self.sink(line)

        return handle_event

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
