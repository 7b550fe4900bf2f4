# planner/output/render.py
"""Plain-text rendering of a planner document."""

from __future__ import annotations

from planner.models.planner import Planner
from planner.models.section import Section


def render_section(section: Section) -> list[str]:
    if section.is_text_section:
        lines = [f"## {section.title}  ({section.id})"]
        text = section.text_content or section.placeholder
        lines.extend(f"    {line}" for line in text.splitlines() or [""])
        return lines

    done = section.completed_count
    lines = [f"## {section.title} [{done}/{len(section.items)}]  ({section.id})"]
    lines.extend(f"  {item}  ({item.id})" for item in section.items)
    return lines


def render_planner(planner: Planner) -> list[str]:
    """Render the planner column by column, then any unplaced sections."""
    lines = [str(planner)]
    for index in range(planner.column_count):
        lines.append(f"== Column {index + 1} ==")
        for section in planner.sections_in_column(index):
            lines.extend(render_section(section))

    orphans = planner.orphaned_sections()
    if orphans:
        lines.append("== Unplaced ==")
        for section in orphans:
            lines.extend(render_section(section))

    return lines
