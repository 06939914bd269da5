"""Delay and scheduling collaborators used to pace the table."""
from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Protocol, Tuple


class Clock(Protocol):
    """Paces card animations and schedules deferred transitions.

    ``pause`` suspends the running sequence while the UI renders.
    ``call_later`` runs ``callback`` once after ``seconds``.
    """

    def pause(self, seconds: float) -> None:
        ...

    def call_later(self, seconds: float, callback: Callable[[], None]) -> None:
        ...


class ManualClock:
    """Virtual clock for headless play and tests.

    Time only moves through :meth:`pause` and :meth:`advance`; scheduled
    callbacks fire once the virtual time reaches them.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.pauses: List[float] = []
        self._queue: List[Tuple[float, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    def pause(self, seconds: float) -> None:
        self.pauses.append(seconds)
        self.advance(seconds)

    def call_later(self, seconds: float, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self.now + seconds, next(self._counter), callback))

    def advance(self, seconds: float = 0.0) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            callback()
        self.now = max(self.now, target)

    def run_pending(self) -> None:
        """Advance far enough to fire everything currently scheduled."""

        while self._queue:
            self.advance(self._queue[0][0] - self.now)

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def elapsed(self) -> float:
        return sum(self.pauses)


__all__ = ["Clock", "ManualClock"]
