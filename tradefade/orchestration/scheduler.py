"""
Single-threaded task scheduler for time-deferred game callbacks.

Countdown ticks and the post-round delay are the only suspension points of
the game, and both go through here. Tasks are ordered by due time, then by
insertion order, so two tasks due at the same instant run in the order they
were scheduled.

Usage:
    scheduler = TaskScheduler()                 # virtual clock, driven by advance()
    task = scheduler.call_later(1.0, on_tick, name="countdown")
    task.cancel()                               # idempotent
    scheduler.advance(0.6)

    live = TaskScheduler(clock=time.monotonic)  # real time, driven by run()
    live.run(until=lambda: not engine.state.active)
"""

import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class ScheduledTask:
    """Handle for a pending callback."""

    def __init__(self, due: float, callback: Callable[[], None], name: str = ""):
        self.due = due
        self.callback = callback
        self.name = name
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> bool:
        """
        Cancel the task.

        Returns:
            True if this call cancelled a pending task, False if the task had
            already fired or been cancelled (no-op)
        """
        if not self.active:
            return False
        self.cancelled = True
        return True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "fired" if self.fired else "pending"
        return f"ScheduledTask(name={self.name!r}, due={self.due:.3f}, {state})"


class TaskScheduler:
    """Cancellable deferred callbacks on one thread."""

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        """
        Initialize scheduler.

        Args:
            clock: Real time source (e.g. time.monotonic). When omitted the
                scheduler keeps a virtual clock that only moves via advance().
        """
        self._clock = clock
        self._virtual_now = 0.0
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._seq = itertools.count()

    @property
    def is_virtual(self) -> bool:
        return self._clock is None

    def now(self) -> float:
        return self._virtual_now if self._clock is None else self._clock()

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        """Schedule callback to run `delay` seconds from now."""
        if delay < 0:
            raise ValueError(f"Delay must be >= 0, got {delay}")
        task = ScheduledTask(self.now() + delay, callback, name)
        heapq.heappush(self._queue, (task.due, next(self._seq), task))
        return task

    def pending(self) -> int:
        """Number of tasks still waiting to fire."""
        return sum(1 for _, _, task in self._queue if task.active)

    def next_due(self) -> Optional[float]:
        self._drop_inactive()
        return self._queue[0][0] if self._queue else None

    def _drop_inactive(self) -> None:
        while self._queue and not self._queue[0][2].active:
            heapq.heappop(self._queue)

    def _fire(self, task: ScheduledTask) -> None:
        task.fired = True
        task.callback()

    def run_pending(self) -> int:
        """Run every task due at the current time. Returns the number run."""
        ran = 0
        while True:
            self._drop_inactive()
            if not self._queue or self._queue[0][0] > self.now():
                return ran
            _, _, task = heapq.heappop(self._queue)
            self._fire(task)
            ran += 1

    def advance(self, seconds: float) -> int:
        """
        Move the virtual clock forward, running tasks as they fall due.

        Tasks scheduled by a callback are relative to that callback's due
        time, so a chain of one-second ticks stays on whole seconds.

        Returns:
            Number of tasks run
        """
        if not self.is_virtual:
            raise RuntimeError("advance() requires a virtual clock")
        if seconds < 0:
            raise ValueError(f"Cannot move the clock backwards ({seconds})")

        target = self._virtual_now + seconds
        ran = 0
        while True:
            self._drop_inactive()
            if not self._queue or self._queue[0][0] > target:
                break
            due, _, task = heapq.heappop(self._queue)
            self._virtual_now = max(self._virtual_now, due)
            self._fire(task)
            ran += 1
        self._virtual_now = target
        return ran

    def run(
        self,
        until: Optional[Callable[[], bool]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> int:
        """
        Drive the queue until it is empty or `until()` returns True.

        With a virtual clock the clock jumps straight to the next due time
        instead of sleeping.

        Returns:
            Number of tasks run
        """
        ran = 0
        while True:
            if until is not None and until():
                break
            due = self.next_due()
            if due is None:
                break
            wait = due - self.now()
            if wait > 0:
                if self.is_virtual:
                    self._virtual_now = due
                else:
                    sleep(wait)
            ran += self.run_pending()
        logger.debug("scheduler_run_finished", extra={"tasks_run": ran, "pending": self.pending()})
        return ran
