# planner/output/item_adapter.py
from __future__ import annotations

from typing import Iterable

from planner.validation import truncate_string

from .base import Adapter, format_timestamp

TEXT_PREVIEW_LENGTH = 40


class ItemAdapter(Adapter):
    """Transform item events into activity lines."""

    def transform(self, event: dict) -> Iterable[str]:
        lines: list[str] = []
        event_type = event.get("event_type")
        payload = event.get("payload")
        ts_str = format_timestamp(event.get("timestamp"))

        if event_type in ("item:created", "item:updated"):
            action = "added" if event_type == "item:created" else "updated"
            text = truncate_string(payload.item.display_text, TEXT_PREVIEW_LENGTH)
            lines.append(f"{ts_str} [item] {action} '{text}' in {payload.section_id} ({payload.item.id})")

        elif event_type == "item:checked":
            state = "checked" if payload.checked else "unchecked"
            lines.append(f"{ts_str} [item] {state} {payload.item_id}")

        elif event_type == "item:deleted":
            lines.append(f"{ts_str} [item] deleted {payload.item_id} from {payload.section_id}")

        elif event_type == "item:moved":
            lines.append(
                f"{ts_str} [item] moved {payload.item_id} from {payload.from_section_id} to {payload.to_section_id}"
            )

        return lines
