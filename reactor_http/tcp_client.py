"""TCP client: a connector plus the connection it produces."""

from __future__ import annotations

import threading

from .connection import Connection
from .connector import Connector


class TcpClient:
    """Connects to ``ip:port`` on ``loop`` and wraps the result in a :class:`Connection`.

    ``on_connected``, ``on_message`` and ``on_close`` are passed on to the
    connection; ``connection`` holds it once connected.
    """

    def __init__(self, loop, ip, port):
        self.loop = loop
        self.server_ip = ip
        self.server_port = port
        self.connector = Connector(loop, ip, port)
        self.connector.on_new_connection = self._new_connection
        self.retry = False
        self.is_connected = True
        self.connection = None
        self.on_connected = None
        self.on_message = None
        self.on_close = None
        self._lock = threading.Lock()

    def connect(self):
        self.is_connected = True
        self.connector.start()

    def disconnect(self):
        """Shut down the current connection and stop connecting."""
        self.is_connected = False
        with self._lock:
            if self.connection is not None:
                self.connection.shutdown()
        self.connector.stop()

    def enable_retry(self):
        self.retry = True

    def stop(self):
        self.is_connected = False
        self.connector.stop()

    def _new_connection(self, sock):
        self.loop.assert_in_loop()
        conn = Connection(self.loop, 0, sock, self.server_ip, self.server_port)
        conn.on_connected = self.on_connected
        conn.on_message = self.on_message
        conn.on_close = self.on_close
        with self._lock:
            self.connection = conn
        conn.established()