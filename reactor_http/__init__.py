"""Reactor-style event loops with TCP server and client layers and an HTTP/1.1 server."""

__version__ = "0.1.0"