"""
Bounded history of published events.

Every publish is recorded here, whether or not anything was listening.
The log is a diagnostic trail: it holds payloads by reference and keeps
only the most recent entries, evicting the oldest first.
"""

from collections import deque
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any

DEFAULT_HISTORY_CAPACITY = 100


@dataclass(frozen=True)
class HistoryEntry:
    """One published event."""

    event_type: Hashable
    payload: Any
    timestamp: float


class HistoryLog:
    """
    Insertion-ordered FIFO log with a capacity that can change at runtime.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        _check_capacity(capacity)
        self._entries: deque[HistoryEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, entry: HistoryEntry) -> None:
        """
        Add an entry at the tail, evicting from the head when full.
        """
        self._entries.append(entry)

    def all(self) -> tuple[HistoryEntry, ...]:
        """
        Return every retained entry, oldest first.
        """
        return tuple(self._entries)

    def filtered_by(self, event_type: Hashable) -> tuple[HistoryEntry, ...]:
        """
        Return the retained entries of one event type, oldest first.
        """
        return tuple(entry for entry in self._entries if entry.event_type == event_type)

    def set_capacity(self, capacity: int) -> None:
        """
        Change the capacity, trimming the oldest entries if needed.

        A negative capacity is rejected and the log is left as it was.
        """
        _check_capacity(capacity)
        # deque(iterable, maxlen) keeps the last ``capacity`` items.
        self._entries = deque(self._entries, maxlen=capacity)

    def clear(self) -> None:
        self._entries.clear()


def _check_capacity(capacity: int) -> None:
    if capacity < 0:
        raise ValueError(f"History capacity must be >= 0, got {capacity}")
