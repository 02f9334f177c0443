"""TCP sockets: server and client setup plus non-blocking send and receive."""

from __future__ import annotations

import enum
import socket

from .log import logger

# Writing to a peer that has gone away raises BrokenPipeError here rather
# than killing the process: the interpreter already ignores SIGPIPE.

_BACKLOG = 10
_DONTWAIT = getattr(socket, "MSG_DONTWAIT", 0)


class Protocol(enum.Enum):
    """Address family of a TCP socket."""

    IPV4_TCP = socket.AF_INET
    IPV6_TCP = socket.AF_INET6


class ConnectionClosedError(ConnectionError):
    """The peer closed the connection or the socket failed."""


class Socket:
    """A stream socket with helpers that map transient errors to empty results."""

    def __init__(self, sock):
        self.sock = sock

    def fileno(self):
        return self.sock.fileno()

    def reuse_address(self):
        """Allow quick restarts on the same address and port."""
        logger.debug("address reuse enabled")
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if hasattr(socket, "SO_REUSEPORT"):
            try:
                self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
            except OSError:
                logger.debug("port reuse is not supported")

    def set_nonblocking(self):
        self.sock.setblocking(False)

    def accept(self):
        """Accept one client; return ``(Socket, ip, port)``."""
        try:
            client, address = self.sock.accept()
        except OSError as exc:
            logger.warning("accept failed: %s", exc)
            raise
        ip, port = address[0], address[1]
        logger.info("connection established with client %s:%d", ip, port)
        return Socket(client), ip, port

    def recv(self, size):
        """Receive up to ``size`` bytes; b"" when nothing is available right now."""
        return self._recv(size, nonblocking=False)

    def nonblocking_recv(self, size):
        return self._recv(size, nonblocking=True)

    def send(self, data):
        """Send what the kernel takes; return the count, 0 if it would block."""
        return self._send(data, nonblocking=False)

    def nonblocking_send(self, data):
        return self._send(data, nonblocking=True)

    def close(self):
        if self.sock.fileno() != -1:
            logger.debug("closing socket fd %d", self.sock.fileno())
        self.sock.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def _call(self, method, argument, nonblocking):
        if not nonblocking:
            return method(argument)
        if _DONTWAIT:
            return method(argument, _DONTWAIT)
        previous = self.sock.gettimeout()
        self.sock.setblocking(False)
        try:
            return method(argument)
        finally:
            self.sock.settimeout(previous)

    def _recv(self, size, nonblocking):
        if size == 0:
            return b""
        try:
            data = self._call(self.sock.recv, size, nonblocking)
        except (BlockingIOError, InterruptedError):
            return b""
        except OSError as exc:
            logger.error("receive failed on fd %d: %s", self.sock.fileno(), exc)
            raise ConnectionClosedError(str(exc)) from exc
        if not data:
            logger.info("peer closed the connection on fd %d", self.sock.fileno())
            raise ConnectionClosedError("connection closed by peer")
        return data

    def _send(self, data, nonblocking):
        if not data:
            return 0
        try:
            return self._call(self.sock.send, data, nonblocking)
        except (BlockingIOError, InterruptedError):
            return 0
        except OSError as exc:
            logger.error("send failed on fd %d: %s", self.sock.fileno(), exc)
            raise ConnectionClosedError(str(exc)) from exc


def _new_socket(protocol):
    protocol = Protocol(protocol)
    sock = socket.socket(protocol.value, socket.SOCK_STREAM, socket.IPPROTO_TCP)
    logger.info("socket created, fd %d", sock.fileno())
    return Socket(sock)


def create_server(protocol, ip, port, nonblocking=False):
    """Create a listening socket bound to ``ip:port`` with address reuse."""
    server = _new_socket(protocol)
    try:
        if nonblocking:
            server.set_nonblocking()
        server.reuse_address()
        server.sock.bind((ip, port))
        server.sock.listen(_BACKLOG)
    except OSError as exc:
        logger.fatal("server socket setup failed: %s", exc)
        server.close()
        raise
    logger.info("listening on %s:%d", ip, server.sock.getsockname()[1])
    return server


def create_client(protocol, ip, port):
    """Create a socket connected to ``ip:port``."""
    client = _new_socket(protocol)
    try:
        client.sock.connect((ip, port))
    except OSError as exc:
        logger.warning("connect to %s:%d failed: %s", ip, port, exc)
        client.close()
        raise
    logger.info("connected to server %s:%d", ip, port)
    return client