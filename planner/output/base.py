# planner/output/base.py
from __future__ import annotations

from datetime import UTC, datetime
from typing import Iterable


class Adapter:
    """Base adapter for turning planner events into activity lines."""

    def transform(self, event: dict) -> Iterable[str]:
        """Override in subclasses."""
        return []


def format_timestamp(ts: float | None) -> str:
    if ts is None:
        return "-"
    return datetime.fromtimestamp(ts, tz=UTC).strftime("%b %d %H:%M:%S")
