"""HTTP response under construction: status, headers, body and redirect."""

from __future__ import annotations


class HttpResponse:
    """A response a handler fills in; setting an existing header keeps the first value."""

    def __init__(self, status=200):
        self.status = status
        self.redirect_flag = False
        self.version = "HTTP/1.1"
        self.body = b""
        self.redirect_url = ""
        self.headers = {}

    def reset(self):
        self.status = 200
        self.redirect_flag = False
        self.body = b""
        self.redirect_url = ""
        self.headers = {}

    def set_header(self, key, val):
        self.headers.setdefault(key, val)

    def has_header(self, key):
        return key in self.headers

    def get_header(self, key):
        """The header's value, or "" if it is absent."""
        return self.headers.get(key, "")

    def set_content(self, body, content_type):
        """Set the body (str is stored as UTF-8) and its Content-Type."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.body = bytes(body)
        self.set_header("Content-Type", content_type)

    def set_redirect(self, url, status=302):
        self.status = status
        self.redirect_flag = True
        self.redirect_url = url

    def set_cookie(self, name, value, path="/", max_age=86400, http_only=True):
        cookie = f"{name}={value}; Path={path}; Max-Age={max_age}"
        if http_only:
            cookie += "; HttpOnly"
        self.set_header("Set-Cookie", cookie)

    def should_close(self):
        """True unless the response carries ``Connection: keep-alive``."""
        return self.get_header("Connection") != "keep-alive"