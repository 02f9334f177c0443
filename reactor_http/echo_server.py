"""TCP echo server: each message is sent back and the connection then closed."""

from __future__ import annotations

import sys

from .log import logger
from .tcp_server import TcpServer

_INACTIVE_TIMEOUT = 10


class EchoServer:
    """Echoes what a client sends, then shuts the connection down."""

    def __init__(self, port):
        self.server = TcpServer(port)
        self.server.set_thread_count(0)
        self.server.enable_inactive_release(_INACTIVE_TIMEOUT)
        self.server.on_connected = self._on_connected
        self.server.on_message = self._on_message
        self.server.on_close = self._on_close

    def address(self):
        return self.server.address()

    def start(self):
        self.server.start()

    def stop(self):
        self.server.stop()

    @staticmethod
    def _on_connected(conn):
        logger.debug("new connection %s from %s:%d", conn.conn_id, conn.ip, conn.port)

    @staticmethod
    def _on_message(conn, buf):
        logger.debug("echoing %d bytes", buf.readable_size())
        conn.send(buf.read(buf.readable_size()))
        conn.shutdown()

    @staticmethod
    def _on_close(conn):
        logger.debug("connection %s is closing", conn.conn_id)


def _usage(prog):
    print(f"\n\rUsage: {prog} port[1024+] level[0~4]\n")


def main(argv=None):
    """Run the echo server: ``echo_server PORT LEVEL``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        _usage("echo_server")
        return 0
    port_text, level_text = args
    logger.level = int(level_text[:1])
    server = EchoServer(int(port_text))
    server.start()
    return 0


if __name__ == "__main__":
    sys.exit(main())