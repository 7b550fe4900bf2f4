"""
Event bus for the planner.

The bus is the only link between the code that changes the planner
document and the code that reacts to those changes (rendering, autosave,
error reporting). Neither side holds a reference to the other.

Delivery is synchronous. ``publish`` runs every listener before it
returns. Listeners for one event type run by descending priority, and in
subscription order when priorities are equal.

A listener that raises does not stop the others. Its failure is logged
and republished on the error channel. A failure inside an error channel
listener is only logged, so error reporting can never recurse.
"""

import itertools
import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any, Protocol

from planner.engine.clock import WallClock
from planner.engine.history import DEFAULT_HISTORY_CAPACITY, HistoryEntry, HistoryLog
from planner.events import ERROR_CHANNEL, ErrorPayload

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]
Unsubscribe = Callable[[], None]


class Clock(Protocol):
    def now(self) -> float: ...


@dataclass(eq=False)
class Listener:
    """
    A registered callback.

    Listeners compare by identity: two subscriptions of the same callback
    are two listeners.
    """

    callback: Callback
    priority: int = 0
    once: bool = False
    sequence: int = 0
    spent: bool = field(default=False, repr=False)

    def sort_key(self) -> tuple[int, int]:
        return (-self.priority, self.sequence)


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of invoking one listener."""

    listener: Listener
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ListenerRegistry:
    """
    Active listeners, per event type, kept in dispatch order.

    The list for an event type is created on first subscription and
    dropped as soon as it becomes empty.
    """

    def __init__(self) -> None:
        self._listeners: dict[Hashable, list[Listener]] = {}
        self._sequence = itertools.count()

    def add(self, event_type: Hashable, callback: Callback, priority: int = 0, once: bool = False) -> Listener:
        listener = Listener(
            callback=callback,
            priority=priority,
            once=once,
            sequence=next(self._sequence),
        )
        listeners = self._listeners.setdefault(event_type, [])
        listeners.append(listener)
        # Stable sort: ties keep insertion order, which is also sequence order.
        listeners.sort(key=Listener.sort_key)
        return listener

    def remove(self, event_type: Hashable, callback: Callback) -> bool:
        """
        Remove the first listener whose callback equals ``callback``.
        """
        listeners = self._listeners.get(event_type)
        if not listeners:
            return False

        for index, listener in enumerate(listeners):
            if listener.callback == callback:
                del listeners[index]
                self._drop_if_empty(event_type)
                return True
        return False

    def discard(self, event_type: Hashable, listener: Listener) -> bool:
        """
        Remove exactly ``listener``, if it is still registered.
        """
        listeners = self._listeners.get(event_type)
        if not listeners:
            return False

        for index, candidate in enumerate(listeners):
            if candidate is listener:
                del listeners[index]
                self._drop_if_empty(event_type)
                return True
        return False

    def snapshot(self, event_type: Hashable) -> tuple[Listener, ...]:
        return tuple(self._listeners.get(event_type, ()))

    def clear(self) -> None:
        self._listeners.clear()

    def clear_event_type(self, event_type: Hashable) -> None:
        self._listeners.pop(event_type, None)

    def count(self, event_type: Hashable) -> int:
        return len(self._listeners.get(event_type, ()))

    def event_types(self) -> frozenset[Hashable]:
        return frozenset(self._listeners)

    def _drop_if_empty(self, event_type: Hashable) -> None:
        if not self._listeners.get(event_type):
            self._listeners.pop(event_type, None)


class EventBus:
    """
    Typed publish-subscribe bus for one process.

    Construct one at application start and pass it to every component
    that publishes or subscribes.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        history_capacity: int = DEFAULT_HISTORY_CAPACITY,
        error_channel: Hashable = ERROR_CHANNEL,
    ) -> None:
        self._clock = clock or WallClock()
        self._registry = ListenerRegistry()
        self._history = HistoryLog(history_capacity)
        self._error_channel = error_channel

    @property
    def error_channel(self) -> Hashable:
        return self._error_channel

    # -----------------------------------------------------------------
    # Subscriptions
    # -----------------------------------------------------------------

    def subscribe(
        self,
        event_type: Hashable,
        callback: Callback,
        *,
        priority: int = 0,
        once: bool = False,
    ) -> Unsubscribe:
        """
        Register ``callback`` for ``event_type``.

        Returns a function that removes this subscription and no other.
        """
        listener = self._registry.add(event_type, callback, priority=priority, once=once)

        def unsubscribe() -> None:
            self._registry.discard(event_type, listener)

        return unsubscribe

    def subscribe_once(self, event_type: Hashable, callback: Callback, *, priority: int = 0) -> Unsubscribe:
        """
        Register ``callback`` to run on the next publish of ``event_type`` only.
        """
        return self.subscribe(event_type, callback, priority=priority, once=True)

    def unsubscribe(self, event_type: Hashable, callback: Callback) -> None:
        """
        Remove the first listener for ``event_type`` using ``callback``.

        Does nothing if there is none.
        """
        self._registry.remove(event_type, callback)

    def clear_all(self) -> None:
        """
        Remove every listener for every event type.
        """
        self._registry.clear()

    def clear_event_type(self, event_type: Hashable) -> None:
        self._registry.clear_event_type(event_type)

    def listener_count(self, event_type: Hashable) -> int:
        return self._registry.count(event_type)

    def has_listeners(self, event_type: Hashable) -> bool:
        return self._registry.count(event_type) > 0

    def active_event_types(self) -> frozenset[Hashable]:
        return self._registry.event_types()

    # -----------------------------------------------------------------
    # History
    # -----------------------------------------------------------------

    def history(self, event_type: Hashable | None = None) -> tuple[HistoryEntry, ...]:
        """
        Return recorded events, oldest first, optionally of one type only.
        """
        if event_type is None:
            return self._history.all()
        return self._history.filtered_by(event_type)

    @property
    def history_capacity(self) -> int:
        return self._history.capacity

    def set_history_capacity(self, capacity: int) -> None:
        """
        Change how many events the history keeps.

        Raises ``ValueError`` for a negative capacity.
        """
        self._history.set_capacity(capacity)

    def clear_history(self) -> None:
        self._history.clear()

    # -----------------------------------------------------------------
    # Dispatch
    # -----------------------------------------------------------------

    def publish(self, event_type: Hashable, payload: Any = None) -> None:
        """
        Deliver ``payload`` to every listener of ``event_type``.

        Listeners subscribed or removed while this call is running take
        effect from the next publish onwards. A once listener is removed
        after its first invocation, whether or not it raised.
        """
        self._history.append(HistoryEntry(event_type, payload, self._clock.now()))

        listeners = self._registry.snapshot(event_type)
        if not listeners:
            return

        in_error_channel = event_type == self._error_channel

        for listener in listeners:
            if listener.once:
                if listener.spent:
                    continue
                listener.spent = True
                self._registry.discard(event_type, listener)

            result = self._invoke(listener, payload)
            if result.ok:
                continue

            context = f'Event listener {_describe(listener.callback)} for "{event_type}"'
            if in_error_channel:
                logger.error("%s failed while reporting an error", context, exc_info=result.error)
                continue

            logger.error("%s failed", context, exc_info=result.error)
            self.publish(self._error_channel, ErrorPayload.capture(result.error, context))

    @staticmethod
    def _invoke(listener: Listener, payload: Any) -> DispatchResult:
        try:
            listener.callback(payload)
        except Exception as exc:
            return DispatchResult(listener, exc)
        return DispatchResult(listener)


def _describe(callback: Callback) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)
