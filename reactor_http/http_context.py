"""Incremental HTTP/1.x request parser over a connection's input buffer."""

from __future__ import annotations

import enum
import re

from .http_request import HttpRequest
from .http_util import normalize_path, split, url_decode

MAX_LINE = 8192
MAX_HEADERS = 100
MAX_BODY = 10 * 1024 * 1024

_REQUEST_LINE = re.compile(
    r"(GET|HEAD|POST|PUT|DELETE|OPTIONS|PATCH|TRACE|CONNECT) "
    r"((?:/[^\s?#]*)(?:\?[^\s#]*)?(?:#[^\s]*)?) "
    r"(HTTP/1\.[01])\r?\n?",
    re.IGNORECASE,
)


class RecvStatus(enum.Enum):
    ERROR = enum.auto()
    LINE = enum.auto()
    HEAD = enum.auto()
    BODY = enum.auto()
    OVER = enum.auto()


class _ParseError(Exception):
    def __init__(self, status):
        super().__init__(status)
        self.status = status


class HttpContext:
    """Parses one request at a time from a buffer, across as many calls as needed.

    ``response_status`` becomes 400 or higher when the request is rejected;
    ``recv_status`` is ``RecvStatus.OVER`` once a whole request has arrived.
    """

    def __init__(self):
        self.response_status = 200
        self.recv_status = RecvStatus.LINE
        self.request = HttpRequest()

    def reset(self):
        self.response_status = 200
        self.recv_status = RecvStatus.LINE
        self.request.reset()

    def recv_http_request(self, buf):
        """Consume as much of the request from ``buf`` as is available."""
        status = self.recv_status
        if status not in (RecvStatus.LINE, RecvStatus.HEAD, RecvStatus.BODY):
            return
        try:
            if status is RecvStatus.LINE:
                self._recv_line(buf)
            if status in (RecvStatus.LINE, RecvStatus.HEAD):
                self._recv_head(buf)
            self._recv_body(buf)
        except _ParseError as exc:
            self.recv_status = RecvStatus.ERROR
            self.response_status = exc.status

    @staticmethod
    def _next_line(buf):
        line = buf.get_line()
        if not line:
            if buf.readable_size() > MAX_LINE:
                raise _ParseError(414)
            return b""
        if len(line) > MAX_LINE:
            raise _ParseError(414)
        return line

    def _recv_line(self, buf):
        line = self._next_line(buf)
        if not line:
            return
        self._parse_line(line.decode("utf-8", errors="replace"))
        self.recv_status = RecvStatus.HEAD

    def _parse_line(self, line):
        match = _REQUEST_LINE.fullmatch(line)
        if match is None:
            raise _ParseError(400)
        request = self.request
        request.method = match.group(1).upper()
        full_path = match.group(2)
        raw_path, has_query, query = full_path.partition("?")
        try:
            request.path = url_decode(raw_path, False)
        except ValueError:
            raise _ParseError(400) from None
        if any(bad in request.path for bad in ("../", "..\\", "//")):
            raise _ParseError(403)
        request.path = normalize_path(request.path)
        request.version = match.group(3)
        if not has_query:
            return
        for pair in split(query, "&"):
            key, eq, val = pair.partition("=")
            if not eq:
                continue
            try:
                request.set_param(url_decode(key, True), url_decode(val, True))
            except ValueError:
                raise _ParseError(400) from None

    def _recv_head(self, buf):
        if self.recv_status is not RecvStatus.HEAD:
            return
        while True:
            line = self._next_line(buf)
            if not line:
                return
            if line in (b"\n", b"\r\n"):
                break
            self._parse_header(line.decode("latin-1"))
        request = self.request
        if request.version == "HTTP/1.1" and not request.has_header("Host"):
            raise _ParseError(400)
        self.recv_status = RecvStatus.BODY

    def _parse_header(self, line):
        if len(self.request.headers) >= MAX_HEADERS:
            raise _ParseError(431)
        line = line.removesuffix("\n").removesuffix("\r")
        key, sep, val = line.partition(": ")
        if not sep:
            raise _ParseError(400)
        self.request.set_header(key, val)

    def _recv_body(self, buf):
        if self.recv_status is not RecvStatus.BODY:
            return
        try:
            length = self.request.content_size()
        except ValueError:
            raise _ParseError(400) from None
        if length == 0:
            self.recv_status = RecvStatus.OVER
            return
        if length < 0 or length > MAX_BODY:
            raise _ParseError(413)
        remaining = length - len(self.request.body)
        available = buf.readable_size()
        if available >= remaining:
            self.request.body += buf.read(remaining)
            self.recv_status = RecvStatus.OVER
        else:
            self.request.body += buf.read(available)