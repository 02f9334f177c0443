"""Event loops running in their own threads, and a round-robin pool of them."""

from __future__ import annotations

import threading

from .event_loop import EventLoop
from .log import logger


class LoopThread:
    """A daemon thread that creates an event loop and runs it forever."""

    def __init__(self):
        self._loop = None
        self._cond = threading.Condition()
        self.thread = threading.Thread(target=self._entry, daemon=True)
        self.thread.start()

    def loop(self):
        """The thread's event loop, waiting until it has been created."""
        with self._cond:
            self._cond.wait_for(lambda: self._loop is not None)
            logger.debug("loop ready in thread %s", self.thread.ident)
            return self._loop

    def _entry(self):
        loop = EventLoop()
        with self._cond:
            self._loop = loop
            self._cond.notify_all()
        loop.start()


class LoopThreadPool:
    """Hands out loops from worker threads in turn, or the base loop if none."""

    def __init__(self, base_loop):
        self.base_loop = base_loop
        self.thread_count = 0
        self._next = 0
        self.threads = []
        self.loops = []

    def set_thread_count(self, count):
        self.thread_count = count

    def create(self):
        """Start the worker threads and wait for each of their loops."""
        if self.thread_count <= 0:
            return
        self.threads = [LoopThread() for _ in range(self.thread_count)]
        self.loops = [thread.loop() for thread in self.threads]

    def next_loop(self):
        if self.thread_count == 0:
            return self.base_loop
        self._next = (self._next + 1) % self.thread_count
        return self.loops[self._next]