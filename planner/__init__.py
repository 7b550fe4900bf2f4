"""
Personal planner: checklists and notes kept on this machine.

This package contains the event dispatch core and the application built
around it. The core provides:
- EventBus
- HistoryLog
- WallClock / ManualClock

The application side provides the planner models, storage adapters, the
state service with undo/redo, the document controller, and text output.
"""

from planner.engine.clock import ManualClock, WallClock
from planner.engine.event_bus import EventBus
from planner.engine.history import HistoryEntry, HistoryLog

# Expose the event map alongside the bus
from planner.events import ERROR_CHANNEL, ErrorPayload, EventType
