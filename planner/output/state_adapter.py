# planner/output/state_adapter.py
from __future__ import annotations

from typing import Iterable

from .base import Adapter, format_timestamp


class StateAdapter(Adapter):
    """Transform document lifecycle events into activity lines."""

    MESSAGES = {
        "state:loaded": "planner loaded",
        "state:saved": "planner saved",
        "state:reset": "planner reset",
        "state:undo": "undo",
        "state:redo": "redo",
    }

    def transform(self, event: dict) -> Iterable[str]:
        event_type = event.get("event_type")
        ts_str = format_timestamp(event.get("timestamp"))

        if event_type in self.MESSAGES:
            return [f"{ts_str} [state] {self.MESSAGES[event_type]}"]

        if event_type == "orientation:changed":
            return [f"{ts_str} [state] orientation set to {event['payload'].orientation}"]

        return []
