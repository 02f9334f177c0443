"""Helpers for HTTP handling: paths, URL coding, files, MIME types and dates."""

from __future__ import annotations

import os
import re
import string
from email.utils import formatdate

STATUS_MESSAGES = {
    100: "Continue",
    101: "Switching Protocol",
    102: "Processing",
    103: "Early Hints",
    200: "OK",
    201: "Created",
    202: "Accepted",
    203: "Non-Authoritative Information",
    204: "No Content",
    205: "Reset Content",
    206: "Partial Content",
    207: "Multi-Status",
    208: "Already Reported",
    226: "IM Used",
    300: "Multiple Choice",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    304: "Not Modified",
    305: "Use Proxy",
    306: "unused",
    307: "Temporary Redirect",
    308: "Permanent Redirect",
    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Payload Too Large",
    414: "URI Too Long",
    415: "Unsupported Media Type",
    416: "Range Not Satisfiable",
    417: "Expectation Failed",
    418: "I'm a teapot",
    421: "Misdirected Request",
    422: "Unprocessable Entity",
    423: "Locked",
    424: "Failed Dependency",
    425: "Too Early",
    426: "Upgrade Required",
    428: "Precondition Required",
    429: "Too Many Requests",
    431: "Request Header Fields Too Large",
    451: "Unavailable For Legal Reasons",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
    505: "HTTP Version Not Supported",
    506: "Variant Also Negotiates",
    507: "Insufficient Storage",
    508: "Loop Detected",
    510: "Not Extended",
    511: "Network Authentication Required",
}

MIME_TYPES = {
    ".aac": "audio/aac",
    ".abw": "application/x-abiword",
    ".arc": "application/x-freearc",
    ".avi": "video/x-msvideo",
    ".azw": "application/vnd.amazon.ebook",
    ".bin": "application/octet-stream",
    ".bmp": "image/bmp",
    ".bz": "application/x-bzip",
    ".bz2": "application/x-bzip2",
    ".csh": "application/x-csh",
    ".css": "text/css",
    ".csv": "text/csv",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".eot": "application/vnd.ms-fontobject",
    ".epub": "application/epub+zip",
    ".gif": "image/gif",
    ".htm": "text/html",
    ".html": "text/html",
    ".ico": "image/vnd.microsoft.icon",
    ".ics": "text/calendar",
    ".jar": "application/java-archive",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".js": "text/javascript",
    ".json": "application/json",
    ".jsonld": "application/ld+json",
    ".mid": "audio/midi",
    ".midi": "audio/x-midi",
    ".mjs": "text/javascript",
    ".mp3": "audio/mpeg",
    ".mpeg": "video/mpeg",
    ".mpkg": "application/vnd.apple.installer+xml",
    ".odp": "application/vnd.oasis.opendocument.presentation",
    ".ods": "application/vnd.oasis.opendocument.spreadsheet",
    ".odt": "application/vnd.oasis.opendocument.text",
    ".oga": "audio/ogg",
    ".ogv": "video/ogg",
    ".ogx": "application/ogg",
    ".otf": "font/otf",
    ".png": "image/png",
    ".pdf": "application/pdf",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".rar": "application/x-rar-compressed",
    ".rtf": "application/rtf",
    ".sh": "application/x-sh",
    ".svg": "image/svg+xml",
    ".swf": "application/x-shockwave-flash",
    ".tar": "application/x-tar",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".ttf": "font/ttf",
    ".txt": "text/plain",
    ".vsd": "application/vnd.visio",
    ".wav": "audio/wav",
    ".weba": "audio/webm",
    ".webm": "video/webm",
    ".webp": "image/webp",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".xhtml": "application/xhtml+xml",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xml": "application/xml",
    ".xul": "application/vnd.mozilla.xul+xml",
    ".zip": "application/zip",
    ".3gp": "video/3gpp",
    ".3g2": "video/3gpp2",
    ".7z": "application/x-7z-compressed",
}

DEFAULT_MIME = "application/octet-stream"

_UNRESERVED = frozenset(
    (string.ascii_letters + string.digits + ".-_~").encode("ascii")
)
_ESCAPE = re.compile(rb"%(.{2})|\+", re.DOTALL)
_WHITESPACE = " \t\r\n"


def split(src, sep):
    """Split ``src`` on ``sep``, dropping empty pieces."""
    if not sep:
        raise ValueError("empty separator")
    return [piece for piece in src.split(sep) if piece]


def read_file(path):
    """Return the whole file as bytes."""
    with open(path, "rb") as handle:
        return handle.read()


def write_file(path, data):
    """Replace the file's contents with ``data`` (bytes or str as UTF-8)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    with open(path, "wb") as handle:
        handle.write(data)


def url_encode(url, convert_space_to_plus):
    """Percent-encode everything except letters, digits and ``.-_~``."""
    pieces = []
    for byte in url.encode("utf-8"):
        if byte in _UNRESERVED:
            pieces.append(chr(byte))
        elif byte == 0x20 and convert_space_to_plus:
            pieces.append("+")
        else:
            pieces.append(f"%{byte:02X}")
    return "".join(pieces)


def hex_to_int(c):
    """Value of one hexadecimal digit."""
    if len(c) != 1 or c not in string.hexdigits:
        raise ValueError(f"not a hexadecimal digit: {c!r}")
    return int(c, 16)


def url_decode(url, convert_space_to_plus):
    """Decode ``%XX`` escapes and, when asked, ``+`` as a space."""

    def replace(match):
        if match.group(0) == b"+":
            return b" " if convert_space_to_plus else b"+"
        high, low = match.group(1).decode("latin-1")
        return bytes([hex_to_int(high) << 4 | hex_to_int(low)])

    decoded = _ESCAPE.sub(replace, url.encode("utf-8"))
    return decoded.decode("utf-8", errors="replace")


def status_desc(status):
    return STATUS_MESSAGES.get(status, "Unknow")


def extend_mime(file_name):
    """MIME type from the text after the last dot, or the binary-stream default."""
    _, dot, extension = file_name.rpartition(".")
    if not dot:
        return DEFAULT_MIME
    return MIME_TYPES.get("." + extension, DEFAULT_MIME)


def is_directory(path):
    return os.path.isdir(path)


def is_regular(path):
    return os.path.isfile(path)


def valid_path(path):
    """False if the path climbs above its root with ``..``."""
    level = 0
    for part in split(path, "/"):
        if part == "..":
            level -= 1
            if level < 0:
                return False
        else:
            level += 1
    return True


def trim(s):
    return s.strip(_WHITESPACE)


def last_modified_time(path):
    """File modification time as an HTTP date, or "" if it cannot be read."""
    try:
        mtime = os.stat(path).st_mtime
    except OSError:
        return ""
    return formatdate(int(mtime), usegmt=True)


def canonical_path(path):
    """Absolute path with links and dot parts resolved; the input if that fails."""
    try:
        return os.path.realpath(path, strict=True)
    except OSError:
        return path


def http_date():
    """The current time as an HTTP date."""
    return formatdate(usegmt=True)


def normalize_path(path):
    """Collapse ``.``, ``..`` and repeated slashes into an absolute path."""
    normalized = []
    for part in split(path, "/") if path else []:
        if part == ".":
            continue
        if part == "..":
            if normalized:
                normalized.pop()
        else:
            normalized.append(part)
    return "".join("/" + part for part in normalized) or "/"