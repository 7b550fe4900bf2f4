"""
Clocks for the planner event bus.

The bus stamps every history entry with the time it was published. The
time source is injected so that tests and replays can control it.

Neither clock sleeps. They only report time, and the manual clock only
moves when it is told to.
"""

import time


class WallClock:
    """
    Real time, as seconds since the epoch.
    """

    def now(self) -> float:
        return time.time()


class ManualClock:
    """
    A clock that only moves when advanced.

    Time is a plain number of seconds. No assumptions are made about what
    the zero point means.
    """

    def __init__(self, start: int | float = 0) -> None:
        self._start = start
        self._current_time: int | float = start

    def now(self) -> int | float:
        """
        Return the current time.
        """
        return self._current_time

    def advance_to(self, target_time: int | float) -> None:
        """
        Move the clock to the specified time.

        The clock may only move forwards. Attempting to move backwards
        would reorder history timestamps, so it is rejected.
        """
        if target_time < self._current_time:
            raise ValueError(
                f"Cannot move clock backwards from {self._current_time} to {target_time}"
            )

        self._current_time = target_time

    def advance_by(self, delta: int | float) -> None:
        """
        Move the clock forwards by ``delta`` seconds.
        """
        if delta < 0:
            raise ValueError(f"Cannot advance clock by a negative amount: {delta}")

        self._current_time += delta

    def reset(self) -> None:
        """
        Return the clock to its starting time.
        """
        self._current_time = self._start
