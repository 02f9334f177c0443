"""Single-threaded reactor: polls channels, runs queued tasks and drives timers."""

from __future__ import annotations

import functools
import socket
import threading
import time

from .channel import Channel
from .log import logger
from .poller import Poller
from .timer_wheel import TimerWheel

_TICK_SECONDS = 1.0
_WHEEL_SLOTS = 60


class LoopThreadError(RuntimeError):
    """An operation that must run in the loop's thread was called elsewhere."""


class EventLoop:
    """Event loop bound to one thread, with a task queue and a timer wheel.

    The loop belongs to the thread that created it until :meth:`start` is
    called, and from then on to the thread running :meth:`start`.
    """

    def __init__(self):
        self._thread_id = threading.get_ident()
        self._poller = Poller()
        self._wheel = TimerWheel(_WHEEL_SLOTS)
        self._tasks = []
        self._lock = threading.Lock()
        self._quit = False
        self._wake_reader, self._wake_writer = socket.socketpair()
        self._wake_reader.setblocking(False)
        self._wake_writer.setblocking(False)
        self._wake_channel = Channel(self._wake_reader.fileno(), self)
        self._wake_channel.on_read = self._drain_wakeups
        self._wake_channel.enable_read()
        self._next_tick = time.monotonic() + _TICK_SECONDS

    def is_in_loop(self):
        return threading.get_ident() == self._thread_id

    def start(self):
        """Poll, dispatch, tick timers and run tasks until :meth:`stop`."""
        self._thread_id = threading.get_ident()
        while not self._quit:
            timeout = max(0.0, self._next_tick - time.monotonic())
            for channel, revents in self._poller.wait(timeout):
                channel.handle_event(revents)
            self._advance_timers()
            self._run_tasks()
        self._quit = False

    def stop(self):
        """Make :meth:`start` return after the current iteration."""
        self._quit = True
        self._wake()

    def push_task(self, task):
        """Queue ``task`` to run in the loop thread and wake the loop."""
        with self._lock:
            self._tasks.append(task)
        self._wake()

    def run_in_loop(self, task):
        """Run ``task`` now if called from the loop thread, otherwise queue it."""
        if self.is_in_loop():
            task()
        else:
            self.push_task(task)

    def assert_in_loop(self):
        if not self.is_in_loop():
            raise LoopThreadError("called outside the event loop's thread")

    def update_channel(self, channel):
        self._poller.update(channel)

    def remove_channel(self, channel):
        self._poller.remove(channel)

    def has_timer(self, timer_id):
        return self._wheel.has_timer(timer_id)

    def timer_add(self, timer_id, timeout, callback):
        self.run_in_loop(functools.partial(self._wheel.add, timer_id, timeout, callback))

    def timer_refresh(self, timer_id):
        self.run_in_loop(functools.partial(self._wheel.refresh, timer_id))

    def timer_cancel(self, timer_id):
        self.run_in_loop(functools.partial(self._wheel.cancel, timer_id))

    def _advance_timers(self):
        now = time.monotonic()
        while now >= self._next_tick:
            self._wheel.tick()
            self._next_tick += _TICK_SECONDS

    def _run_tasks(self):
        with self._lock:
            ready, self._tasks = self._tasks, []
        for task in ready:
            task()

    def _wake(self):
        try:
            self._wake_writer.send(b"\x01")
        except (BlockingIOError, InterruptedError):
            logger.debug("wake-up channel is full")

    def _drain_wakeups(self):
        try:
            while self._wake_reader.recv(4096):
                pass
        except (BlockingIOError, InterruptedError):
            return