"""One TCP connection driven by an event loop, with buffered input and output."""

from __future__ import annotations

import enum
import functools
import socket

from .buffer import Buffer
from .channel import Channel
from .log import logger
from .net_socket import ConnectionClosedError

_BUFFER_SIZE = 65536


class ConnectionStatus(enum.Enum):
    DISCONNECTED = enum.auto()
    CONNECTING = enum.auto()
    CONNECTED = enum.auto()
    DISCONNECTING = enum.auto()


class Connection:
    """A connected socket with callbacks for connect, message, close and any event.

    ``on_message`` is called as ``on_message(connection, buffer)``; the other
    callbacks receive the connection only. ``context`` holds whatever state
    the protocol layer attaches.
    """

    def __init__(self, loop, conn_id, sock, ip, port):
        self.loop = loop
        self.conn_id = conn_id
        self.socket = sock
        self.fd = sock.fileno()
        self.ip = ip
        self.port = port
        self.status = ConnectionStatus.CONNECTING
        self.inactive_release = False
        self.in_buffer = Buffer()
        self.out_buffer = Buffer()
        self.context = None
        self.on_connected = None
        self.on_message = None
        self.on_close = None
        self.on_event = None
        self.on_server_close = None
        self.channel = Channel(self.fd, loop)
        self.channel.on_read = self._handle_read
        self.channel.on_write = self._handle_write
        self.channel.on_close = self._handle_close
        self.channel.on_error = self._handle_close
        self.channel.on_event = self._handle_event

    @property
    def connected(self):
        return self.status is ConnectionStatus.CONNECTED

    def established(self):
        """Move from connecting to connected and start reading."""
        self.loop.run_in_loop(self._established_in_loop)

    def send(self, data):
        """Queue ``data`` for sending; a str is sent as UTF-8."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        payload = bytes(data)
        self.loop.run_in_loop(functools.partial(self._send_in_loop, payload))

    def shutdown(self):
        """Handle pending input, flush pending output, then release."""
        self.loop.run_in_loop(self._shutdown_in_loop)

    def disconnect(self):
        """Half-close the write side if nothing is waiting to be sent."""
        self.loop.run_in_loop(self._disconnect_in_loop)

    def release(self):
        """Release the connection once the current round of events is done."""
        self.loop.push_task(self._release_in_loop)

    def enable_inactive_release(self, seconds):
        self.loop.run_in_loop(
            functools.partial(self._enable_inactive_release_in_loop, seconds)
        )

    def disable_inactive_release(self):
        self.loop.run_in_loop(self._disable_inactive_release_in_loop)

    def upgrade(self, context, on_connected, on_message, on_close, on_event):
        """Switch protocol; must be called from the loop thread."""
        self.loop.assert_in_loop()
        self.loop.run_in_loop(
            functools.partial(
                self._upgrade_in_loop,
                context,
                on_connected,
                on_message,
                on_close,
                on_event,
            )
        )

    def _dispatch_pending(self):
        if self.in_buffer.readable_size() > 0 and self.on_message:
            self.on_message(self, self.in_buffer)

    def _handle_read(self):
        try:
            data = self.socket.nonblocking_recv(_BUFFER_SIZE - 1)
        except ConnectionClosedError:
            self.shutdown()
            return
        self.in_buffer.write(data)
        self._dispatch_pending()

    def _handle_write(self):
        try:
            sent = self.socket.nonblocking_send(self.out_buffer.peek())
        except ConnectionClosedError:
            self._dispatch_pending()
            self.release()
            return
        self.out_buffer.consume(sent)
        if self.out_buffer.readable_size() == 0:
            self.channel.disable_write()
            if self.status is ConnectionStatus.DISCONNECTING:
                self.release()

    def _handle_close(self):
        self._dispatch_pending()
        self.release()

    def _handle_event(self):
        if self.inactive_release:
            self.loop.timer_refresh(self.conn_id)
        if self.on_event:
            self.on_event(self)

    def _established_in_loop(self):
        if self.status is not ConnectionStatus.CONNECTING:
            logger.fatal("connection %s established in unexpected state", self.conn_id)
            raise RuntimeError(
                f"connection {self.conn_id} is {self.status.name}, not CONNECTING"
            )
        self.status = ConnectionStatus.CONNECTED
        self.channel.enable_read()
        if self.on_connected:
            self.on_connected(self)

    def _release_in_loop(self):
        if self.status is ConnectionStatus.DISCONNECTED:
            logger.warning("connection %s already released", self.conn_id)
            return
        self.status = ConnectionStatus.DISCONNECTED
        self.channel.disable_all()
        self.channel.remove()
        if self.loop.has_timer(self.conn_id):
            self._disable_inactive_release_in_loop()
        try:
            if self.on_close:
                self.on_close(self)
            if self.on_server_close:
                self.on_server_close(self)
        finally:
            logger.debug("released connection %s:%d", self.ip, self.port)
            self.socket.close()

    def _send_in_loop(self, payload):
        if self.status is ConnectionStatus.DISCONNECTED:
            return
        self.out_buffer.write(payload)
        if not self.channel.writable():
            self.channel.enable_write()

    def _shutdown_in_loop(self):
        if self.status is not ConnectionStatus.CONNECTED:
            logger.warning("connection %s is not connected, skipping shutdown", self.conn_id)
            return
        self.status = ConnectionStatus.DISCONNECTING
        self._dispatch_pending()
        if self.out_buffer.readable_size() > 0:
            if not self.channel.writable():
                self.channel.enable_write()
        else:
            self._release_in_loop()

    def _disconnect_in_loop(self):
        if self.status is ConnectionStatus.DISCONNECTED:
            logger.warning("connection %s already released", self.conn_id)
            return
        if not self.channel.writable():
            try:
                self.socket.sock.shutdown(socket.SHUT_WR)
            except OSError as exc:
                logger.warning("half-close of fd %d failed: %s", self.fd, exc)

    def _enable_inactive_release_in_loop(self, seconds):
        self.inactive_release = True
        if self.loop.has_timer(self.conn_id):
            self.loop.timer_refresh(self.conn_id)
        else:
            self.loop.timer_add(self.conn_id, seconds, self._release_in_loop)

    def _disable_inactive_release_in_loop(self):
        self.inactive_release = False
        if self.loop.has_timer(self.conn_id):
            self.loop.timer_cancel(self.conn_id)

    def _upgrade_in_loop(self, context, on_connected, on_message, on_close, on_event):
        self.context = context
        self.on_connected = on_connected
        self.on_message = on_message
        self.on_close = on_close
        self.on_event = on_event