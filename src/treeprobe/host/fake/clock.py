"""
A virtual clock with timers, for components that schedule work in the future.

Time never advances on its own. Timers fire only while a test advances
the clock, typically inside Root.perform():

    >>> root.perform(lambda: clock.tick(1000))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from sortedcontainers import SortedKeyList
from typing import Any


# Upper bound on timers run by run_all_timers(), to stop self-rescheduling timers
_MAX_TIMERS_PER_RUN = 10_000


@dataclass(eq=False)
class _Timer:
    id: int
    due: float
    seq: int
    callback: Callable[..., Any]
    args: tuple = field(default=())


class FakeClock:
    def __init__(self) -> None:
        self._now = 0.0
        self._next_id = 1
        self._timers = SortedKeyList(key=lambda t: (t.due, t.seq))  # type: SortedKeyList
        self._timer_for_id = {}  # type: dict[int, _Timer]

    # === Properties ===

    @property
    def now(self) -> float:
        """The current virtual time, in milliseconds."""
        return self._now

    @property
    def pending_count(self) -> int:
        return len(self._timers)

    # === Timers ===

    def set_timeout(self, callback: Callable[..., Any], delay: float=0, *args) -> int:
        """
        Schedules `callback(*args)` to run once `delay` milliseconds of
        virtual time have passed. Returns an id for clear_timeout().
        """
        timer_id = self._next_id
        self._next_id += 1
        timer = _Timer(timer_id, self._now + max(delay, 0), timer_id, callback, args)
        self._timers.add(timer)
        self._timer_for_id[timer_id] = timer
        return timer_id

    def clear_timeout(self, timer_id: int | None) -> None:
        """Cancels a pending timer. Unknown or already-run ids are ignored."""
        if timer_id is None:
            return
        timer = self._timer_for_id.pop(timer_id, None)
        if timer is not None:
            self._timers.discard(timer)

    # === Advancing Time ===

    def tick(self, ms: float) -> None:
        """
        Advances virtual time by `ms` milliseconds, running every timer that
        comes due on the way in due order. Timers scheduled by those timers
        also run if they come due within the same window.
        """
        target = self._now + ms
        while len(self._timers) > 0 and self._timers[0].due <= target:
            self._run_next()
        self._now = target

    def run_all_timers(self) -> None:
        """
        Runs timers until none are pending, advancing virtual time as needed.

        Raises:
        * RuntimeError -- if timers keep rescheduling themselves indefinitely.
        """
        for _ in range(_MAX_TIMERS_PER_RUN):
            if len(self._timers) == 0:
                return
            self._run_next()
        raise RuntimeError(
            f'Ran {_MAX_TIMERS_PER_RUN} timers without the queue draining. '
            'A timer is probably rescheduling itself forever.')

    def reset(self) -> None:
        """Cancels all timers and moves virtual time back to zero."""
        self._timers.clear()
        self._timer_for_id.clear()
        self._now = 0.0

    # === Utility ===

    def _run_next(self) -> None:
        timer = self._timers.pop(0)
        del self._timer_for_id[timer.id]
        self._now = max(self._now, timer.due)
        timer.callback(*timer.args)


# ------------------------------------------------------------------------------
# Globals

clock = FakeClock()


def set_timeout(callback: Callable[..., Any], delay: float=0, *args) -> int:
    return clock.set_timeout(callback, delay, *args)


def clear_timeout(timer_id: int | None) -> None:
    clock.clear_timeout(timer_id)


# ------------------------------------------------------------------------------
