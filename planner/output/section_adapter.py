# planner/output/section_adapter.py
from __future__ import annotations

from typing import Iterable

from .base import Adapter, format_timestamp


class SectionAdapter(Adapter):
    """Transform section events into activity lines."""

    def transform(self, event: dict) -> Iterable[str]:
        lines: list[str] = []
        event_type = event.get("event_type")
        payload = event.get("payload")
        ts_str = format_timestamp(event.get("timestamp"))

        if event_type == "section:created":
            section = payload.section
            kind = "note" if section.is_text_section else "checklist"
            lines.append(f"{ts_str} [section] created {kind} '{section.title}' ({section.id})")

        elif event_type == "section:updated":
            section = payload.section
            lines.append(f"{ts_str} [section] updated '{section.title}' ({section.id})")

        elif event_type == "section:deleted":
            lines.append(f"{ts_str} [section] deleted {payload.section_id}")

        elif event_type == "section:moved":
            source = "unplaced" if payload.from_column < 0 else f"column {payload.from_column + 1}"
            lines.append(
                f"{ts_str} [section] moved {payload.section_id} from {source} to column {payload.to_column + 1}"
            )

        return lines
