"""Demo HTTP application: echo routes for each method and an upload route."""

from __future__ import annotations

import sys
from pathlib import Path

from .http_server import HttpServer
from .log import logger

WWW_ROOT = "www_root/"
_THREAD_COUNT = 12
_DOUBLINGS = 6


def request_str(req):
    """The request as text, repeated 64 times."""
    lines = [f"{req.method} {req.path} {req.version}\r\n"]
    lines.extend(f"{key}: {value}\r\n" for key, value in req.headers.items())
    lines.append("\r\n")
    lines.append(req.body.decode("utf-8", errors="replace"))
    text = "".join(lines)
    for _ in range(_DOUBLINGS):
        text += text
    return text


def get_method(req, rsp):
    rsp.set_content(request_str(req), "text/plain")


def post_method(req, rsp):
    rsp.set_content(request_str(req), "text/plain")


def put_method(req, rsp):
    """Store the request body as ``put.txt`` in the default web root."""
    _store_upload(WWW_ROOT, req)


def delete_method(req, rsp):
    rsp.set_content(request_str(req), "text/plain")


def _store_upload(www_root, req):
    path = www_root + "put.txt"
    logger.debug("path: %s", path)
    try:
        Path(path).write_bytes(req.body)
    except OSError as exc:
        logger.error("writing %s failed: %s", path, exc)


def build_server(port, www_root=WWW_ROOT):
    """An HTTP server with the demo routes, serving files from ``www_root``."""
    server = HttpServer(port)
    server.set_thread_count(_THREAD_COUNT)
    server.set_base_dir(www_root)
    server.method_get("/get", get_method)
    server.method_post("/post", post_method)
    server.method_put("/put", lambda req, rsp: _store_upload(www_root, req))
    server.method_delete("/delete", delete_method)
    return server


def _usage(prog):
    print(f"\n\rUsage: {prog} port[1024+] level[0~4]\n")


def main(argv=None):
    """Run the demo server: ``app PORT LEVEL``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        _usage("app")
        return 0
    port_text, level_text = args
    logger.level = int(level_text[:1])
    server = build_server(int(port_text), WWW_ROOT)
    server.listen()
    return 0


if __name__ == "__main__":
    sys.exit(main())