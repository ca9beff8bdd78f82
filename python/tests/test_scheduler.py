from __future__ import annotations

from backend.engine.scheduler import Scheduler
from helpers import ManualClock


def test_runs_only_due_tasks_in_order(scheduler: Scheduler, clock: ManualClock) -> None:
    calls: list[str] = []
    scheduler.call_later(2.0, lambda: calls.append("late"))
    scheduler.call_later(1.0, lambda: calls.append("first"))
    scheduler.call_later(1.0, lambda: calls.append("second"))

    assert scheduler.run_due() == 0
    clock.advance(1.0)
    assert scheduler.run_due() == 2
    assert calls == ["first", "second"]
    assert scheduler.pending == 1
    assert scheduler.next_due() == clock() + 1.0


def test_cancelled_task_never_runs(scheduler: Scheduler, clock: ManualClock) -> None:
    calls: list[int] = []
    task = scheduler.call_later(1.0, lambda: calls.append(1))
    task.cancel()

    clock.advance(5)
    assert scheduler.run_due() == 0
    assert calls == []


def test_cancel_all_empties_queue(scheduler: Scheduler, clock: ManualClock) -> None:
    calls: list[int] = []
    for delay in (0.5, 1.0, 1.5):
        scheduler.call_later(delay, lambda: calls.append(1))
    scheduler.cancel_all()

    clock.advance(10)
    assert scheduler.run_due() == 0
    assert scheduler.pending == 0
    assert scheduler.next_due() is None
    assert calls == []


def test_task_added_during_pass_waits_for_next_pass(
    scheduler: Scheduler, clock: ManualClock
) -> None:
    calls: list[str] = []

    def outer() -> None:
        calls.append("outer")
        scheduler.call_at(clock(), lambda: calls.append("inner"))

    scheduler.call_later(0, outer)
    assert scheduler.run_due() == 1
    assert calls == ["outer"]
    assert scheduler.run_due() == 1
    assert calls == ["outer", "inner"]


def test_cancel_all_from_callback_stops_rest_of_pass(
    scheduler: Scheduler, clock: ManualClock
) -> None:
    calls: list[str] = []

    def stop() -> None:
        calls.append("stop")
        scheduler.cancel_all()

    scheduler.call_later(1.0, stop)
    scheduler.call_later(1.0, lambda: calls.append("after"))

    clock.advance(1.0)
    assert scheduler.run_due() == 1
    assert calls == ["stop"]
    assert scheduler.pending == 0
