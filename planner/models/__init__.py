"""
Planner document models.

- Item: one checklist entry
- Section: a titled checklist or free-text note
- Planner: the document, its sections and their column layout
"""

from planner.models.item import Item
from planner.models.planner import Planner
from planner.models.section import Section

__all__ = ["Item", "Section", "Planner"]
