import pytest

from reactor_http.buffer import Buffer


def test_new_buffer_is_empty():
    buf = Buffer()
    assert buf.readable_size() == 0
    assert buf.peek() == b""


def test_write_then_read_round_trip():
    buf = Buffer()
    buf.write(b"hello world")
    assert buf.readable_size() == len(b"hello world")
    assert buf.read(5) == b"hello"
    assert buf.read(6) == b" world"
    assert buf.readable_size() == 0


def test_write_str_is_utf8():
    buf = Buffer()
    buf.write("héllo")
    assert buf.peek() == "héllo".encode("utf-8")


def test_peek_does_not_consume():
    buf = Buffer()
    buf.write(b"abc")
    assert buf.peek() == b"abc"
    assert buf.readable_size() == 3


def test_read_too_much_raises_and_keeps_data():
    buf = Buffer()
    buf.write(b"abc")
    with pytest.raises(ValueError):
        buf.read(4)
    assert buf.peek() == b"abc"


def test_negative_size_raises():
    buf = Buffer()
    buf.write(b"abc")
    with pytest.raises(ValueError):
        buf.consume(-1)


def test_consume():
    buf = Buffer()
    buf.write(b"abcdef")
    buf.consume(2)
    assert buf.peek() == b"cdef"
    with pytest.raises(ValueError):
        buf.consume(10)
    assert buf.peek() == b"cdef"


def test_get_line_includes_newline():
    buf = Buffer()
    buf.write(b"GET / HTTP/1.1\r\nHost: x\r\n")
    assert buf.get_line() == b"GET / HTTP/1.1\r\n"
    assert buf.get_line() == b"Host: x\r\n"
    assert buf.get_line() == b""


def test_get_line_incomplete_leaves_data():
    buf = Buffer()
    buf.write(b"partial")
    assert buf.get_line() == b""
    assert buf.peek() == b"partial"


def test_get_line_after_partial_read():
    buf = Buffer()
    buf.write(b"xxline\nrest")
    buf.consume(2)
    assert buf.get_line() == b"line\n"
    assert buf.peek() == b"rest"


def test_write_buffer_copies_without_draining_source():
    src = Buffer()
    src.write(b"payload")
    dst = Buffer()
    dst.write(b">")
    dst.write_buffer(src)
    assert dst.peek() == b">payload"
    assert src.peek() == b"payload"


def test_clear():
    buf = Buffer()
    buf.write(b"data")
    buf.clear()
    assert buf.readable_size() == 0


def test_large_write_grows():
    buf = Buffer()
    data = bytes(range(256)) * 1000
    buf.write(data)
    buf.write(data)
    assert buf.readable_size() == 2 * len(data)
    assert buf.read(len(data)) == data
    assert buf.peek() == data