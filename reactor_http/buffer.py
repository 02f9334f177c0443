"""Byte buffer with a read cursor, used for socket input and output."""

from __future__ import annotations


class Buffer:
    """A growable FIFO of bytes."""

    def __init__(self):
        self._data = bytearray()

    def readable_size(self):
        """Number of bytes waiting to be read."""
        return len(self._data)

    def peek(self):
        """All readable bytes, without consuming them."""
        return bytes(self._data)

    def write(self, data):
        """Append bytes; a str is stored as UTF-8."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data += data

    def write_buffer(self, other):
        """Append the readable contents of another buffer, leaving it intact."""
        self._data += other.peek()

    def read(self, size):
        """Remove and return exactly ``size`` bytes."""
        self._check(size)
        chunk = bytes(self._data[:size])
        del self._data[:size]
        return chunk

    def consume(self, size):
        """Drop ``size`` bytes from the front."""
        self._check(size)
        del self._data[:size]

    def get_line(self):
        """Remove and return one line including its newline, or b"" if none is complete."""
        pos = self._data.find(b"\n")
        if pos < 0:
            return b""
        return self.read(pos + 1)

    def clear(self):
        self._data.clear()

    def _check(self, size):
        if size < 0:
            raise ValueError("size must not be negative")
        if size > len(self._data):
            raise ValueError(
                f"cannot take {size} bytes, only {len(self._data)} readable"
            )