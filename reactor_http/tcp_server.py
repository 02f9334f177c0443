"""Multi-loop TCP server: one accepting loop plus an optional pool of worker loops."""

from __future__ import annotations

import functools

from .acceptor import Acceptor
from .connection import Connection
from .event_loop import EventLoop
from .log import logger
from .loop_thread import LoopThreadPool


class TcpServer:
    """Accepts clients and hands each one to a loop as a :class:`Connection`.

    Set ``on_connected``, ``on_message``, ``on_close`` and ``on_event`` before
    calling :meth:`start`; they are given to every new connection.
    """

    def __init__(self, port, ip="0.0.0.0"):
        self.port = port
        self._next_id = 0
        self.timeout = 0
        self.inactive_release = False
        self.base_loop = EventLoop()
        self._acceptor = Acceptor(self.base_loop, port, ip)
        self.pool = LoopThreadPool(self.base_loop)
        self.connections = {}
        self.on_connected = None
        self.on_message = None
        self.on_close = None
        self.on_event = None
        self._acceptor.on_accept = self._new_connection
        self._acceptor.listen()

    def address(self):
        return self._acceptor.address()

    def set_thread_count(self, count):
        logger.info("loop thread pool size set to %d", count)
        self.pool.set_thread_count(count)

    def enable_inactive_release(self, timeout):
        """Release connections that stay idle for ``timeout`` seconds."""
        logger.info("inactive connections are released after %d s", timeout)
        self.timeout = timeout
        self.inactive_release = True

    def run_after(self, task, delay):
        """Run ``task`` in the accepting loop after ``delay`` seconds."""
        self.base_loop.run_in_loop(
            functools.partial(self._run_after_in_loop, task, delay)
        )

    def start(self):
        """Start the worker loops, then run the accepting loop until stopped."""
        self.pool.create()
        self.base_loop.start()

    def stop(self):
        """Stop the worker loops, close the listening socket and stop the base loop."""
        for loop in self.pool.loops:
            loop.stop()
        self.base_loop.run_in_loop(self._stop_in_loop)

    def _stop_in_loop(self):
        channel = self._acceptor.channel
        channel.disable_all()
        channel.remove()
        self._acceptor.socket.close()
        self.base_loop.stop()

    def _new_connection(self, sock, ip, port):
        self._next_id += 1
        conn = Connection(self.pool.next_loop(), self._next_id, sock, ip, port)
        conn.on_connected = self.on_connected
        conn.on_message = self.on_message
        conn.on_close = self.on_close
        conn.on_event = self.on_event
        conn.on_server_close = self._remove_connection
        self.connections[self._next_id] = conn
        if self.inactive_release:
            conn.enable_inactive_release(self.timeout)
        conn.established()

    def _remove_connection(self, conn):
        self.base_loop.run_in_loop(
            functools.partial(self._remove_connection_in_loop, conn)
        )

    def _remove_connection_in_loop(self, conn):
        if self.connections.pop(conn.conn_id, None) is None:
            logger.warning("connection %s to remove does not exist", conn.conn_id)
        else:
            logger.debug("removed connection on fd %d", conn.fd)

    def _run_after_in_loop(self, task, delay):
        self._next_id += 1
        self.base_loop.timer_add(self._next_id, delay, task)