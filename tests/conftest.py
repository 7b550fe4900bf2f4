"""Test configuration and fixtures."""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from planner.app import build_app  # noqa: E402
from planner.config import PlannerConfig, StorageConfig  # noqa: E402
from planner.engine.clock import ManualClock  # noqa: E402
from planner.engine.event_bus import EventBus  # noqa: E402
from planner.state import StateService  # noqa: E402
from planner.storage import MemoryAdapter  # noqa: E402


@pytest.fixture(autouse=True)
def restore_planner_logger():
    """Undo configure_logging() so caplog keeps seeing planner records."""
    logger = logging.getLogger("planner")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def clock() -> ManualClock:
    """Deterministic clock starting at a fixed epoch second."""
    return ManualClock(start=1700000000)


@pytest.fixture
def bus(clock) -> EventBus:
    """Fresh event bus per test."""
    return EventBus(clock=clock)


@pytest.fixture
def memory_storage() -> MemoryAdapter:
    return MemoryAdapter()


@pytest.fixture
def state_service(memory_storage, bus) -> StateService:
    return StateService(memory_storage, bus, storage_key="test-state")


@pytest.fixture
def memory_config(tmp_path) -> PlannerConfig:
    """Config that keeps everything in memory."""
    return PlannerConfig(storage=StorageConfig(adapter="memory", directory=tmp_path))


@pytest.fixture
def app(memory_config, memory_storage, clock):
    """Fully wired application on in-memory storage."""
    application = build_app(memory_config, storage=memory_storage, clock=clock)
    yield application
    application.close()


@pytest.fixture
def recorder():
    """Callable that records every payload it receives."""

    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, payload):
            self.calls.append(payload)

    return Recorder()
