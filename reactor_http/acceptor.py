"""Listening socket that reports each accepted client to a callback."""

from __future__ import annotations

from .channel import Channel
from .log import logger
from .net_socket import Protocol, create_server


class Acceptor:
    """Accepts connections on ``ip:port`` when its loop reports readiness.

    ``on_accept`` is called as ``on_accept(socket, ip, port)``.
    """

    def __init__(self, loop, port, ip="0.0.0.0"):
        self.loop = loop
        self.socket = create_server(Protocol.IPV4_TCP, ip, port)
        self.channel = Channel(self.socket.fileno(), loop)
        self.channel.on_read = self._handle_read
        self.on_accept = None

    def address(self):
        """The ``(ip, port)`` the socket is bound to."""
        return self.socket.sock.getsockname()[:2]

    def listen(self):
        logger.debug("listening socket fd %d: read enabled", self.socket.fileno())
        self.channel.enable_read()

    def _handle_read(self):
        try:
            client, ip, port = self.socket.accept()
        except OSError:
            logger.error("accepting a client on the listening socket failed")
            return
        if self.on_accept:
            self.on_accept(client, ip, port)
        else:
            client.close()