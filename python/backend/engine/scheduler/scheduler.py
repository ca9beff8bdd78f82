"""Deferred callbacks driven by the frontend's event loop.

Nothing runs on its own: a frontend calls ``run_due`` from its loop
(every frame, every key-poll timeout, or on a Qt timer) and every task
whose due time has passed is executed on that thread.
"""

from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True)
class ScheduledTask:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Min-heap of pending callbacks ordered by due time, then by scheduling order."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._heap: list[ScheduledTask] = []
        self._running: list[ScheduledTask] = []
        self._seq = itertools.count()

    # -- scheduling -----------------------------------------------------------

    def call_at(self, when: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(due=when, seq=next(self._seq), callback=callback)
        heapq.heappush(self._heap, task)
        return task

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        return self.call_at(self.clock() + delay, callback)

    def cancel_all(self) -> None:
        """Cancel everything pending, including the rest of a pass in progress."""
        for task in [*self._heap, *self._running]:
            task.cancel()
        self._heap.clear()

    # -- execution ------------------------------------------------------------

    def run_due(self) -> int:
        """Run every task that is due now. Returns how many ran.

        Tasks scheduled by a callback during this pass wait for the next one.
        """
        now = self.clock()
        batch: list[ScheduledTask] = []
        while self._heap and self._heap[0].due <= now:
            batch.append(heapq.heappop(self._heap))

        outer, self._running = self._running, batch
        ran = 0
        try:
            for task in batch:
                if task.cancelled:
                    continue
                task.callback()
                ran += 1
        finally:
            self._running = outer
        return ran

    @property
    def pending(self) -> int:
        return sum(1 for t in self._heap if not t.cancelled)

    def next_due(self) -> float | None:
        live = [t.due for t in self._heap if not t.cancelled]
        return min(live) if live else None
