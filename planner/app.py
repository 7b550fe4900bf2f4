"""
Application wiring.

One event bus is built here and handed to every component that needs it.
Nothing in the planner reaches for a global bus.
"""

from __future__ import annotations

from dataclasses import dataclass

from planner.config import PlannerConfig
from planner.controller import PlannerController
from planner.engine.clock import WallClock
from planner.engine.event_bus import EventBus
from planner.output.adapter import ActivityLog
from planner.state import Autosaver, StateService
from planner.storage import StorageAdapter, create_storage_adapter


@dataclass
class PlannerApp:
    config: PlannerConfig
    event_bus: EventBus
    storage: StorageAdapter
    state: StateService
    controller: PlannerController
    activity: ActivityLog
    autosaver: Autosaver | None = None

    def close(self) -> None:
        self.activity.detach()
        if self.autosaver is not None:
            self.autosaver.detach()


def build_app(
    config: PlannerConfig,
    storage: StorageAdapter | None = None,
    clock=None,
    sink=None,
) -> PlannerApp:
    clock = clock or WallClock()
    event_bus = EventBus(clock=clock, history_capacity=config.events.history_capacity)
    storage = storage or create_storage_adapter(config.storage)
    max_undo_steps = config.features.max_undo_steps if config.features.undo_redo else 0
    state = StateService(storage, event_bus, storage_key=config.storage.key, max_undo_steps=max_undo_steps)
    controller = PlannerController(state, event_bus, defaults=config.defaults)
    activity = ActivityLog(event_bus, sink=sink, clock=clock)
    autosaver = Autosaver(event_bus, state) if config.storage.autosave else None
    return PlannerApp(
        config=config,
        event_bus=event_bus,
        storage=storage,
        state=state,
        controller=controller,
        activity=activity,
        autosaver=autosaver,
    )
