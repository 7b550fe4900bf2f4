"""Unit tests for planner/logs.py"""

import io
import logging

from planner.logs import configure_logging


def test_configure_logging_writes_planner_records():
    stream = io.StringIO()
    configure_logging("info", stream=stream)

    logging.getLogger("planner.state").info("saved %s", "doc")
    logging.getLogger("planner.state").debug("hidden")

    output = stream.getvalue()
    assert "INFO planner.state: saved doc" in output
    assert "hidden" not in output


def test_configure_logging_replaces_handlers():
    configure_logging("WARNING", stream=io.StringIO())
    configure_logging("WARNING", stream=io.StringIO())

    assert len(logging.getLogger("planner").handlers) == 1


def test_unknown_level_falls_back_to_warning():
    configure_logging("chatty", stream=io.StringIO())
    assert logging.getLogger("planner").level == logging.WARNING
