"""Unit tests for the single-threaded task scheduler."""

import pytest

from tradefade.orchestration.scheduler import TaskScheduler


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_tasks_run_in_due_then_insertion_order():
    scheduler = TaskScheduler()
    ran = []
    scheduler.call_later(2.0, lambda: ran.append("late"))
    scheduler.call_later(1.0, lambda: ran.append("first"))
    scheduler.call_later(1.0, lambda: ran.append("second"))

    assert scheduler.advance(2.0) == 3
    assert ran == ["first", "second", "late"]


def test_task_not_run_before_due():
    scheduler = TaskScheduler()
    ran = []
    scheduler.call_later(0.6, lambda: ran.append(1))
    scheduler.advance(0.5)
    assert ran == []
    scheduler.advance(0.2)
    assert ran == [1]


def test_cancel_is_idempotent():
    scheduler = TaskScheduler()
    ran = []
    task = scheduler.call_later(1.0, lambda: ran.append(1))

    assert task.cancel() is True
    assert task.cancel() is False
    scheduler.advance(5.0)
    assert ran == []
    assert scheduler.pending() == 0


def test_cancel_after_fire_is_noop():
    scheduler = TaskScheduler()
    task = scheduler.call_later(1.0, lambda: None)
    scheduler.advance(1.0)
    assert task.fired
    assert task.cancel() is False
    assert not task.cancelled


def test_chained_tasks_keep_whole_second_cadence():
    scheduler = TaskScheduler()
    seen = []

    def tick():
        seen.append(scheduler.now())
        if len(seen) < 3:
            scheduler.call_later(1.0, tick)

    scheduler.call_later(1.0, tick)
    scheduler.advance(10.0)
    assert seen == [1.0, 2.0, 3.0]
    assert scheduler.now() == 10.0


def test_run_virtual_until_idle():
    scheduler = TaskScheduler()
    ran = []
    scheduler.call_later(3.0, lambda: ran.append("a"))
    scheduler.call_later(7.0, lambda: ran.append("b"))

    assert scheduler.run() == 2
    assert ran == ["a", "b"]
    assert scheduler.now() == 7.0


def test_run_stops_on_predicate():
    scheduler = TaskScheduler()
    ran = []
    scheduler.call_later(1.0, lambda: ran.append("a"))
    scheduler.call_later(2.0, lambda: ran.append("b"))

    scheduler.run(until=lambda: len(ran) >= 1)
    assert ran == ["a"]
    assert scheduler.pending() == 1


def test_run_real_clock_sleeps_until_due():
    clock = FakeClock()
    scheduler = TaskScheduler(clock=clock)
    ran = []
    scheduler.call_later(0.6, lambda: ran.append(clock.now))

    scheduler.run(sleep=clock.sleep)
    assert ran == [pytest.approx(0.6)]
    assert clock.sleeps == [pytest.approx(0.6)]


def test_advance_requires_virtual_clock():
    scheduler = TaskScheduler(clock=FakeClock())
    with pytest.raises(RuntimeError):
        scheduler.advance(1.0)


def test_invalid_delays_rejected():
    scheduler = TaskScheduler()
    with pytest.raises(ValueError):
        scheduler.call_later(-0.1, lambda: None)
    with pytest.raises(ValueError):
        scheduler.advance(-1.0)


def test_next_due_skips_cancelled():
    scheduler = TaskScheduler()
    first = scheduler.call_later(1.0, lambda: None)
    scheduler.call_later(2.0, lambda: None)
    first.cancel()
    assert scheduler.next_due() == 2.0
