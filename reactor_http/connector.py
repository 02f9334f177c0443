"""Non-blocking outgoing TCP connect with exponential back-off retries."""

from __future__ import annotations

import enum
import errno
import socket

from .channel import Channel
from .log import logger
from .net_socket import Socket

_INIT_RETRY_DELAY = 1
_MAX_RETRY_DELAY = 8

_IN_PROGRESS = {0, errno.EINPROGRESS, errno.EINTR, errno.EISCONN}
_RETRYABLE = {
    errno.EAGAIN,
    errno.EADDRINUSE,
    errno.EADDRNOTAVAIL,
    errno.ECONNREFUSED,
    errno.ENETUNREACH,
}


class _State(enum.Enum):
    DISCONNECTED = enum.auto()
    CONNECTING = enum.auto()
    CONNECTED = enum.auto()


class Connector:
    """Connects to ``ip:port`` from its loop and hands over the connected socket.

    ``on_new_connection`` is called with a :class:`Socket` once the connect
    succeeds. Failed attempts are retried after 1, 2, 4 and then 8 seconds.
    """

    def __init__(self, loop, ip, port):
        self.loop = loop
        self.server_ip = ip
        self.server_port = port
        self.enabled = False
        self.state = _State.DISCONNECTED
        self.retry_delay = _INIT_RETRY_DELAY
        self.timer_id = id(self)
        self.on_new_connection = None
        self._channel = None
        self._sock = None

    def start(self):
        self.enabled = True
        self.loop.run_in_loop(self._start_in_loop)

    def restart(self):
        """Reset the back-off and connect again; must be called in the loop thread."""
        self.loop.assert_in_loop()
        self.state = _State.DISCONNECTED
        self.retry_delay = _INIT_RETRY_DELAY
        self.enabled = True
        self._start_in_loop()

    def stop(self):
        self.enabled = False
        self.loop.push_task(self._stop_in_loop)

    def _start_in_loop(self):
        self.loop.assert_in_loop()
        if self.state is not _State.DISCONNECTED:
            logger.fatal("connector started in state %s", self.state.name)
        if self.enabled:
            self._connect()
        else:
            logger.info("connector is not enabled")

    def _stop_in_loop(self):
        self.loop.assert_in_loop()
        if self.state is _State.CONNECTING:
            self.state = _State.DISCONNECTED
            self._detach_channel()
            self._reset_channel().close()

    def _connect(self):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setblocking(False)
        try:
            err = sock.connect_ex((self.server_ip, self.server_port))
        except OSError as exc:
            logger.error("cannot connect to %s:%d: %s", self.server_ip, self.server_port, exc)
            sock.close()
            return
        if err in _IN_PROGRESS:
            self._connecting(sock)
        elif err in _RETRYABLE:
            self._retry(sock)
        else:
            logger.error("connect failed: %s", errno.errorcode.get(err, err))
            sock.close()

    def _connecting(self, sock):
        self.state = _State.CONNECTING
        if self._channel is not None:
            logger.fatal("connector already has a channel")
            sock.close()
            raise RuntimeError("connector already has a channel")
        self._sock = sock
        self._channel = Channel(sock.fileno(), self.loop)
        self._channel.on_write = self._handle_write
        self._channel.on_error = self._handle_error
        self._channel.enable_write()

    def _handle_write(self):
        if self.state is not _State.CONNECTING:
            logger.fatal("connector write event in state %s", self.state.name)
            raise RuntimeError(f"connector is {self.state.name}, not CONNECTING")
        self._detach_channel()
        sock = self._reset_channel()
        err = self._socket_error(sock)
        if err or self._is_self_connect(sock):
            logger.warning("connect failed: %s", errno.errorcode.get(err, "self connect"))
            self._retry(sock)
            return
        self.state = _State.CONNECTED
        if self.enabled and self.on_new_connection:
            self.on_new_connection(Socket(sock))
        else:
            logger.info("connector is not enabled")
            sock.close()

    def _handle_error(self):
        if self.state is _State.CONNECTING:
            self._detach_channel()
            sock = self._reset_channel()
            err = self._socket_error(sock)
            logger.warning("connect failed: %s", errno.errorcode.get(err, err))
            self._retry(sock)

    @staticmethod
    def _socket_error(sock):
        try:
            return sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        except OSError as exc:
            logger.error("reading socket error failed: %s", exc)
            return exc.errno or errno.EIO

    @staticmethod
    def _is_self_connect(sock):
        try:
            return sock.getsockname() == sock.getpeername()
        except OSError:
            return False

    def _retry(self, sock):
        sock.close()
        self.state = _State.DISCONNECTED
        if self.enabled:
            logger.info(
                "retrying %s:%d in %d s",
                self.server_ip,
                self.server_port,
                self.retry_delay,
            )
            self.loop.timer_add(self.timer_id, self.retry_delay, self._start_in_loop)
            self.retry_delay = min(self.retry_delay * 2, _MAX_RETRY_DELAY)

    def _detach_channel(self):
        self._channel.disable_all()
        self._channel.remove()

    def _reset_channel(self):
        sock, self._sock = self._sock, None
        self.loop.push_task(self._reset_channel_in_loop)
        return sock

    def _reset_channel_in_loop(self):
        self._channel = None