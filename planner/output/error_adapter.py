# planner/output/error_adapter.py
from __future__ import annotations

from typing import Iterable

from .base import Adapter, format_timestamp


class ErrorAdapter(Adapter):
    """Transform error channel and storage error events into lines."""

    def transform(self, event: dict) -> Iterable[str]:
        event_type = event.get("event_type")
        payload = event.get("payload")
        ts_str = format_timestamp(event.get("timestamp"))

        if event_type == "error:occurred":
            error = payload.error
            context = f"{payload.context}: " if payload.context else ""
            return [f"{ts_str} [error] {context}{type(error).__name__}: {error}"]

        if event_type == "state:error":
            return [f"{ts_str} [error] storage: {payload.error}"]

        return []
