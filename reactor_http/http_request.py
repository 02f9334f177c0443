"""Parsed HTTP request: start line, headers, query parameters and body."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .http_util import split, trim


@dataclass
class HttpRequest:
    """One HTTP request as filled in by the parser.

    ``matches`` holds the route pattern's match once a handler is chosen.
    Setting a header or parameter that already exists keeps the first value.
    """

    method: str = ""
    path: str = ""
    version: str = "HTTP/1.1"
    body: bytes = b""
    matches: re.Match | None = None
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)

    def reset(self):
        """Return to the state of a freshly created request."""
        self.method = ""
        self.path = ""
        self.version = "HTTP/1.1"
        self.body = b""
        self.matches = None
        self.headers = {}
        self.params = {}

    def set_header(self, key, val):
        self.headers.setdefault(key, val)

    def has_header(self, key):
        return key in self.headers

    def get_header(self, key):
        """The header's value, or "" if it is absent."""
        return self.headers.get(key, "")

    def set_param(self, key, val):
        self.params.setdefault(key, val)

    def has_param(self, key):
        return key in self.params

    def get_param(self, key):
        """The query parameter's value, or "" if it is absent."""
        return self.params.get(key, "")

    def content_size(self):
        """Value of Content-Length, 0 if absent; ValueError if it is not a number."""
        if not self.has_header("Content-Length"):
            return 0
        return int(self.get_header("Content-Length"))

    def should_close(self):
        """True unless the client asked for ``Connection: keep-alive``."""
        return self.get_header("Connection") != "keep-alive"

    def client_ip(self):
        """The X-Forwarded-For header, or "" if there is none."""
        return self.get_header("X-Forwarded-For")

    def is_json(self):
        return "application/json" in self.get_header("Content-Type")

    def get_cookie(self, name):
        """Value of the named cookie from the Cookie header, or ""."""
        if not self.has_header("Cookie"):
            return ""
        for cookie in split(self.get_header("Cookie"), ";"):
            key, eq, value = cookie.partition("=")
            if not eq:
                continue
            if trim(key) == name:
                return trim(value)
        return ""