"""HTTP server on top of the TCP server: static files plus regex-routed handlers."""

from __future__ import annotations

import re
from pathlib import Path

from .http_context import HttpContext, RecvStatus
from .http_response import HttpResponse
from .http_util import (
    canonical_path,
    extend_mime,
    http_date,
    is_directory,
    is_regular,
    last_modified_time,
    status_desc,
    valid_path,
)
from .log import logger
from .tcp_server import TcpServer

DEFAULT_TIMEOUT = 30
SERVER_NAME = "MyHttpServer/1.0"

_DISPATCHED_METHODS = ("GET", "POST", "PUT", "DELETE")


class HttpServer:
    """Serves files under a base directory and calls handlers for matching paths.

    A handler is called as ``handler(request, response)`` and fills in the
    response. Route patterns are regular expressions matched against the
    whole request path; the match is stored in ``request.matches``.
    """

    def __init__(self, port, timeout=DEFAULT_TIMEOUT):
        self.base_dir = ""
        self.base_page = "index.html"
        self.error_page = "error.html"
        self._routes = {
            method: [] for method in ("GET", "POST", "PUT", "DELETE", "OPTIONS")
        }
        self.server = TcpServer(port)
        self.server.on_connected = self._on_connected
        self.server.on_message = self._on_message
        self.server.enable_inactive_release(timeout)

    def address(self):
        return self.server.address()

    def set_base_dir(self, path):
        """Serve static files from ``path``; NotADirectoryError if it is not a directory."""
        if not is_directory(path):
            logger.fatal("static root %s does not exist", path)
            raise NotADirectoryError(path)
        self.base_dir = path

    def method_get(self, pattern, handler):
        self._routes["GET"].append((re.compile(pattern), handler))

    def method_post(self, pattern, handler):
        self._routes["POST"].append((re.compile(pattern), handler))

    def method_put(self, pattern, handler):
        self._routes["PUT"].append((re.compile(pattern), handler))

    def method_delete(self, pattern, handler):
        self._routes["DELETE"].append((re.compile(pattern), handler))

    def method_options(self, pattern, handler):
        self._routes["OPTIONS"].append((re.compile(pattern), handler))

    def set_thread_count(self, count):
        self.server.set_thread_count(count)

    def set_base_page(self, page):
        self.base_page = page

    def set_error_page(self, page):
        self.error_page = page

    def set_inactive_release(self, timeout):
        self.server.enable_inactive_release(timeout)

    def listen(self):
        """Run the server until :meth:`stop` is called."""
        self.server.start()

    def stop(self):
        self.server.stop()

    def _on_connected(self, conn):
        conn.context = HttpContext()

    def _on_message(self, conn, buf):
        while buf.readable_size() > 0:
            context = conn.context
            if not isinstance(context, HttpContext):
                context = conn.context = HttpContext()
            context.recv_http_request(buf)
            req = context.request
            rsp = HttpResponse(context.response_status)
            if rsp.status >= 400:
                self._error_handler(rsp)
                self._set_response(req, rsp)
                self._write_response(conn, rsp)
                context.reset()
                buf.clear()
                conn.shutdown()
                return
            if context.recv_status is not RecvStatus.OVER:
                return
            self._route(req, rsp)
            self._set_response(req, rsp)
            self._write_response(conn, rsp)
            context.reset()
            if rsp.should_close():
                conn.shutdown()
                return

    def _error_handler(self, rsp):
        path = self.base_dir + self.error_page
        try:
            rsp.body = Path(path).read_bytes()
        except OSError:
            logger.error("reading the error page %s failed", path)
            return
        rsp.set_header("Content-Type", extend_mime(path))

    def _route(self, req, rsp):
        if self._is_file_request(req):
            self._file_handler(req, rsp)
            return
        if req.method in _DISPATCHED_METHODS:
            self._dispatch(req, rsp, self._routes[req.method])
        else:
            rsp.status = 405
            self._error_handler(rsp)

    def _resource_path(self, req):
        path = self.base_dir + req.path
        if req.path == "/":
            path += self.base_page
        return path

    def _is_file_request(self, req):
        if not self.base_dir:
            return False
        if req.method not in ("GET", "HEAD"):
            return False
        if not valid_path(req.path):
            return False
        return is_regular(self._resource_path(req))

    def _file_handler(self, req, rsp):
        if "../" in req.path or "..\\" in req.path:
            rsp.status = 403
            return
        path = self._resource_path(req)
        if not is_regular(path):
            rsp.status = 404
            return
        if not canonical_path(path).startswith(canonical_path(self.base_dir)):
            rsp.status = 403
            return
        try:
            rsp.body = Path(path).read_bytes()
        except OSError:
            logger.error("reading %s failed", path)
            rsp.status = 500
            return
        rsp.set_header("Content-Type", extend_mime(path))
        modified = last_modified_time(path)
        if modified:
            rsp.set_header("Last-Modified", modified)
        if req.method == "HEAD":
            rsp.body = b""

    def _dispatch(self, req, rsp, routes):
        for pattern, handler in routes:
            match = pattern.fullmatch(req.path)
            if match:
                req.matches = match
                handler(req, rsp)
                return
        rsp.status = 404
        self._error_handler(rsp)
        logger.error("requested resource %s does not exist", req.path)

    @staticmethod
    def _set_response(req, rsp):
        rsp.version = req.version
        rsp.set_header("Connection", "close" if req.should_close() else "keep-alive")
        rsp.set_header("Date", http_date())
        rsp.set_header("Server", SERVER_NAME)
        if rsp.body:
            rsp.set_header("Content-Length", str(len(rsp.body)))
            rsp.set_header("Content-Type", "application/octet-stream")
        if rsp.redirect_flag:
            rsp.set_header("Location", rsp.redirect_url)

    @staticmethod
    def _write_response(conn, rsp):
        lines = [f"{rsp.version} {rsp.status} {status_desc(rsp.status)}\r\n"]
        lines.extend(f"{key}: {value}\r\n" for key, value in rsp.headers.items())
        lines.append("\r\n")
        conn.send("".join(lines).encode("latin-1") + rsp.body)