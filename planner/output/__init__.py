# planner/output/__init__.py
from .base import Adapter
from .adapter import ActivityAdapter, ActivityLog
from .section_adapter import SectionAdapter
from .item_adapter import ItemAdapter
from .state_adapter import StateAdapter
from .error_adapter import ErrorAdapter
from .render import render_planner, render_section

__all__ = [
    "Adapter",
    "ActivityAdapter",
    "ActivityLog",
    "SectionAdapter",
    "ItemAdapter",
    "StateAdapter",
    "ErrorAdapter",
    "render_planner",
    "render_section",
]
