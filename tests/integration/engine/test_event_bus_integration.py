"""
Integration tests for EventBus with other components.
Tests how the bus links producers, renderers and storage.
"""

from planner.engine.clock import ManualClock
from planner.engine.event_bus import EventBus
from planner.events import ERROR_CHANNEL, EventType, ItemChecked, SectionDeleted
from planner.output.adapter import ActivityLog


class TestEventBusIntegration:
    """Integration tests for EventBus in system context."""

    def test_bus_as_hub_between_independent_components(self):
        """Test several components reacting to one publish without knowing each other."""
        clock = ManualClock(start=1700000000)
        event_bus = EventBus(clock=clock)

        class Renderer:
            def __init__(self):
                self.rendered = []

            def on_checked(self, payload):
                self.rendered.append(payload.item_id)

        class Counter:
            def __init__(self):
                self.count = 0

            def on_any(self, _payload):
                self.count += 1

        renderer = Renderer()
        counter = Counter()
        activity = ActivityLog(event_bus, clock=clock)

        event_bus.subscribe(EventType.ITEM_CHECKED, renderer.on_checked, priority=10)
        event_bus.subscribe(EventType.ITEM_CHECKED, counter.on_any)
        event_bus.subscribe(EventType.SECTION_DELETED, counter.on_any)

        event_bus.publish(EventType.ITEM_CHECKED, ItemChecked("item-1", True))
        clock.advance_by(1)
        event_bus.publish(EventType.SECTION_DELETED, SectionDeleted("section-1"))

        assert renderer.rendered == ["item-1"]
        assert counter.count == 2
        assert activity.lines == [
            "Nov 14 22:13:20 [item] checked item-1",
            "Nov 14 22:13:21 [section] deleted section-1",
        ]

        # Bound methods can be removed by value
        event_bus.unsubscribe(EventType.ITEM_CHECKED, renderer.on_checked)
        event_bus.publish(EventType.ITEM_CHECKED, ItemChecked("item-2", False))
        assert renderer.rendered == ["item-1"]
        assert counter.count == 3

    def test_error_channel_reaches_activity_log(self):
        """Test a failing renderer surfaces as an activity line while others keep working."""
        clock = ManualClock(start=1700000000)
        event_bus = EventBus(clock=clock)
        activity = ActivityLog(event_bus, clock=clock)
        received = []

        def broken_renderer(_payload):
            raise RuntimeError("template missing")

        event_bus.subscribe(EventType.ITEM_CHECKED, broken_renderer, priority=5)
        event_bus.subscribe(EventType.ITEM_CHECKED, received.append, priority=-5)

        event_bus.publish(EventType.ITEM_CHECKED, ItemChecked("item-1", True))

        assert len(received) == 1
        errors = [line for line in activity.lines if "[error]" in line]
        assert len(errors) == 1
        assert '"item:checked"' in errors[0]
        assert "RuntimeError: template missing" in errors[0]
        assert len(event_bus.history(ERROR_CHANNEL)) == 1

    def test_history_and_listeners_survive_long_sessions(self):
        """Test history stays bounded while dispatch stays correct."""
        event_bus = EventBus(clock=ManualClock(), history_capacity=10)
        seen = []
        event_bus.subscribe("tick", seen.append)

        for index in range(250):
            event_bus.publish("tick", index)

        assert len(seen) == 250
        assert [entry.payload for entry in event_bus.history()] == list(range(240, 250))

        event_bus.set_history_capacity(3)
        assert [entry.payload for entry in event_bus.history("tick")] == [247, 248, 249]

    def test_once_listener_used_for_startup_hook(self):
        """Test a one-shot hook only sees the first load."""
        event_bus = EventBus(clock=ManualClock())
        loads = []
        event_bus.subscribe_once(EventType.STATE_LOADED, loads.append)

        event_bus.publish(EventType.STATE_LOADED, "first")
        event_bus.publish(EventType.STATE_LOADED, "second")

        assert loads == ["first"]
        assert EventType.STATE_LOADED not in event_bus.active_event_types()
        assert len(event_bus.history(EventType.STATE_LOADED)) == 2
