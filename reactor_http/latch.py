"""Count-down latch for waiting until a number of events have happened."""

from __future__ import annotations

import threading


class CountDownLatch:
    """Blocks waiters until the count has been counted down to zero."""

    def __init__(self, count):
        self._count = count
        self._cond = threading.Condition()

    def wait(self, timeout=None):
        """Wait until the count reaches zero; False if ``timeout`` ran out first."""
        with self._cond:
            return self._cond.wait_for(lambda: self._count <= 0, timeout)

    def count_down(self):
        with self._cond:
            self._count -= 1
            if self._count == 0:
                self._cond.notify_all()

    @property
    def count(self):
        with self._cond:
            return self._count