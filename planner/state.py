"""
State management for the planner document.

The state service owns the current planner, its undo/redo history, and
the link to storage. It never talks to the rendering or autosave code
directly: every change is announced on the event bus.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any

from planner.engine.event_bus import EventBus, Unsubscribe
from planner.events import (
    MUTATION_EVENTS,
    EventType,
    StateChanged,
    StateError,
    StateLoaded,
    StateRedo,
    StateReset,
    StateSaved,
    StateUndo,
)
from planner.models.item import now_ms
from planner.models.planner import Planner
from planner.storage.base import StorageAdapter, StorageSize

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "planner-state"
DEFAULT_MAX_UNDO_STEPS = 50


@dataclass(frozen=True)
class StateHistoryEntry:
    state: dict[str, Any]
    timestamp: int
    description: str = ""


class StateService:
    def __init__(
        self,
        storage: StorageAdapter,
        event_bus: EventBus,
        storage_key: str = DEFAULT_STORAGE_KEY,
        max_undo_steps: int = DEFAULT_MAX_UNDO_STEPS,
    ) -> None:
        self.storage = storage
        self.event_bus = event_bus
        self.storage_key = storage_key
        self.max_undo_steps = max_undo_steps
        self._planner: Planner | None = None
        self._undo: deque[StateHistoryEntry] = deque(maxlen=max_undo_steps)
        self._redo: list[StateHistoryEntry] = []

    @property
    def state(self) -> Planner | None:
        return self._planner

    def set_state(self, planner: Planner, description: str = "State change", add_to_history: bool = True) -> None:
        """
        Make ``planner`` the current document and announce the change.

        The previous document is pushed onto the undo stack, and the redo
        stack is cleared, unless ``add_to_history`` is false.
        """
        if add_to_history and self._planner is not None:
            self._undo.append(StateHistoryEntry(self._planner.to_state(), now_ms(), description))
            self._redo.clear()

        self._planner = planner
        self.event_bus.publish(EventType.STATE_CHANGED, StateChanged(planner.to_state()))

    def record_change(self, before: dict[str, Any], description: str) -> None:
        """
        Announce an in-place edit of the current planner.

        ``before`` is the planner's state prior to the edit; it becomes
        the undo point.
        """
        if self._planner is None:
            return
        self._undo.append(StateHistoryEntry(before, now_ms(), description))
        self._redo.clear()
        logger.debug("Recorded planner change: %s", description)
        self.event_bus.publish(EventType.STATE_CHANGED, StateChanged(self._planner.to_state()))

    def rollback(self, before: dict[str, Any]) -> None:
        """
        Discard a failed in-place edit without announcing anything.
        """
        self._planner = Planner.from_state(before)

    def load_state(self) -> Planner | None:
        """
        Load the planner from storage.

        Returns ``None`` if nothing is stored. Loading does not touch the
        undo history. Failures are announced as ``state:error`` and
        re-raised.
        """
        try:
            state = self.storage.load(self.storage_key)
            if state is None:
                return None
            planner = Planner.from_state(state)
        except Exception as exc:
            self.event_bus.publish(EventType.STATE_ERROR, StateError(str(exc) or "Failed to load state"))
            raise

        self._planner = planner
        self.event_bus.publish(EventType.STATE_LOADED, StateLoaded(state))
        return planner

    def save_state(self) -> None:
        if self._planner is None:
            return

        state = self._planner.to_state()
        try:
            self.storage.save(self.storage_key, state)
        except Exception as exc:
            self.event_bus.publish(EventType.STATE_ERROR, StateError(str(exc) or "Failed to save state"))
            raise

        logger.debug("Saved planner state under key %r", self.storage_key)
        self.event_bus.publish(EventType.STATE_SAVED, StateSaved(state))

    def reset_state(self, clear_storage: bool = True) -> None:
        self._planner = None
        self.clear_history()
        if clear_storage:
            self.storage.remove(self.storage_key)
        self.event_bus.publish(EventType.STATE_RESET, StateReset())

    # -----------------------------------------------------------------
    # Undo / redo
    # -----------------------------------------------------------------

    def undo(self) -> bool:
        if not self._undo:
            return False

        if self._planner is not None:
            self._redo.append(StateHistoryEntry(self._planner.to_state(), now_ms(), "Redo point"))

        entry = self._undo.pop()
        self._planner = Planner.from_state(entry.state)
        self.event_bus.publish(EventType.STATE_UNDO, StateUndo(entry.state))
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False

        if self._planner is not None:
            self._undo.append(StateHistoryEntry(self._planner.to_state(), now_ms(), "Undo point"))

        entry = self._redo.pop()
        self._planner = Planner.from_state(entry.state)
        self.event_bus.publish(EventType.STATE_REDO, StateRedo(entry.state))
        return True

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_history(self) -> tuple[StateHistoryEntry, ...]:
        return tuple(self._undo)

    @property
    def redo_history(self) -> tuple[StateHistoryEntry, ...]:
        return tuple(self._redo)

    def clear_history(self) -> None:
        self._undo.clear()
        self._redo.clear()

    # -----------------------------------------------------------------
    # Import / export
    # -----------------------------------------------------------------

    def export_state(self) -> str | None:
        if self._planner is None:
            return None
        return json.dumps(self._planner.to_state(), indent=2)

    def import_state(self, text: str, add_to_history: bool = True) -> Planner:
        try:
            planner = Planner.from_state(json.loads(text))
        except ValueError as exc:
            raise ValueError(f"Failed to import state: {exc}") from exc

        self.set_state(planner, "Imported state", add_to_history)
        return planner

    def storage_info(self) -> StorageSize | None:
        return self.storage.size()


class Autosaver:
    """
    Saves the planner after every document change.

    Subscribes to the mutation events at low priority so that rendering
    and other listeners see the change first.
    """

    PRIORITY = -100

    def __init__(self, event_bus: EventBus, state_service: StateService) -> None:
        self.event_bus = event_bus
        self.state_service = state_service
        self.saves = 0
        self._unsubscribers: list[Unsubscribe] = [
            event_bus.subscribe(event_type, self._on_change, priority=self.PRIORITY)
            for event_type in MUTATION_EVENTS
        ]

    def _on_change(self, _payload: Any) -> None:
        self.state_service.save_state()
        self.saves += 1

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    @property
    def attached(self) -> bool:
        return bool(self._unsubscribers)
