import queue
import socket
import threading

import pytest

from reactor_http.channel import Channel
from reactor_http.event_loop import EventLoop, LoopThreadError


@pytest.fixture
def running():
    loop = EventLoop()
    thread = threading.Thread(target=loop.start, daemon=True)
    thread.start()
    ready = threading.Event()
    loop.push_task(ready.set)
    assert ready.wait(2)
    yield loop, thread
    loop.stop()
    thread.join(2)


def _in_loop(loop, func):
    results = queue.Queue()
    loop.push_task(lambda: results.put(func()))
    return results.get(timeout=2)


def test_pushed_task_runs_in_loop_thread(running):
    loop, thread = running
    assert _in_loop(loop, threading.get_ident) == thread.ident


def test_is_in_loop_depends_on_thread(running):
    loop, _ = running
    assert loop.is_in_loop() is False
    assert _in_loop(loop, loop.is_in_loop) is True


def test_assert_in_loop_raises_outside(running):
    loop, _ = running
    with pytest.raises(LoopThreadError):
        loop.assert_in_loop()

    def check():
        loop.assert_in_loop()
        return "ok"

    assert _in_loop(loop, check) == "ok"


def test_run_in_loop_runs_immediately_inside_loop(running):
    loop, _ = running
    order = []

    def outer():
        loop.run_in_loop(lambda: order.append("inner"))
        order.append("after")
        return list(order)

    assert _in_loop(loop, outer) == ["inner", "after"]


def test_tasks_run_in_push_order(running):
    loop, _ = running
    seen = []
    done = threading.Event()
    for value in range(5):
        loop.push_task(lambda value=value: seen.append(value))
    loop.push_task(done.set)
    assert done.wait(2)
    assert seen == list(range(5))


def test_stop_ends_start(running):
    loop, thread = running
    loop.stop()
    thread.join(2)
    assert not thread.is_alive()


def test_channel_read_callback_fires():
    a, b = socket.socketpair()
    loop = EventLoop()
    thread = threading.Thread(target=loop.start, daemon=True)
    received = queue.Queue()
    channel = Channel(a.fileno(), loop)
    channel.on_read = lambda: received.put((a.recv(100), loop.is_in_loop()))
    channel.enable_read()
    assert channel.readable() is True
    thread.start()
    try:
        b.send(b"ping")
        data, inside = received.get(timeout=2)
        assert data == b"ping"
        assert inside is True
    finally:
        loop.stop()
        thread.join(2)
        a.close()
        b.close()


def test_timer_fires_and_is_released(running):
    loop, _ = running
    fired = threading.Event()
    loop.timer_add(7, 1, fired.set)
    assert fired.wait(3)
    assert _in_loop(loop, lambda: loop.has_timer(7)) is False


def test_timer_operations_before_start_apply_directly():
    loop = EventLoop()
    loop.timer_add(1, 5, lambda: None)
    assert loop.has_timer(1)
    loop.timer_refresh(1)
    loop.timer_cancel(1)
    assert loop.has_timer(1)
    assert not loop.has_timer(2)