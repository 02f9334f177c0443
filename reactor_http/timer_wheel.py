"""Hashed timing wheel for second-granularity timeouts."""

from __future__ import annotations

from .log import logger


class TimerTask:
    """A callback due after ``timeout`` ticks unless cancelled.

    The task fires once no wheel slot holds it any longer. Refreshing a
    task places it in a later slot, which postpones its expiry.
    """

    def __init__(self, timer_id, timeout, callback):
        self.timer_id = timer_id
        self.timeout = timeout
        self.callback = callback
        self.valid = True
        self._slots_held = 0

    def cancel(self):
        """Keep the task scheduled but do not run its callback on expiry."""
        self.valid = False


class TimerWheel:
    """Wheel of ``capacity`` slots; each call to :meth:`tick` advances one slot."""

    def __init__(self, capacity=60):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._position = 0
        self._slots = [{} for _ in range(capacity)]
        self._timers = {}

    def has_timer(self, timer_id):
        return timer_id in self._timers

    def add(self, timer_id, timeout, callback):
        """Schedule ``callback`` to run ``timeout`` ticks from now."""
        task = TimerTask(timer_id, timeout, callback)
        logger.debug("timer %s added with delay %d", timer_id, timeout)
        self._timers[timer_id] = task
        self._place(task)

    def cancel(self, timer_id):
        task = self._timers.get(timer_id)
        if task is None:
            logger.warning("cannot cancel timer %s: no such timer", timer_id)
            return
        task.cancel()

    def refresh(self, timer_id):
        """Push the timer's expiry back to a full timeout from now."""
        task = self._timers.get(timer_id)
        if task is None:
            logger.warning("cannot refresh timer %s: no such timer", timer_id)
            return
        self._place(task)

    def tick(self):
        """Advance one slot and expire the tasks no longer held by any slot."""
        self._position = (self._position + 1) % self.capacity
        due = self._slots[self._position]
        self._slots[self._position] = {}
        for task in due:
            task._slots_held -= 1
            if task._slots_held == 0:
                self._expire(task)

    def _place(self, task):
        slot = self._slots[(self._position + task.timeout) % self.capacity]
        if task not in slot:
            slot[task] = None
            task._slots_held += 1

    def _expire(self, task):
        if task.valid:
            logger.debug("timer %s fired", task.timer_id)
            task.callback()
        if self._timers.get(task.timer_id) is task:
            del self._timers[task.timer_id]