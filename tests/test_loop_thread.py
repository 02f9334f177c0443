import threading

from reactor_http.event_loop import EventLoop
from reactor_http.loop_thread import LoopThread, LoopThreadPool


def _run(loop, fn):
    done = threading.Event()
    box = []

    def task():
        box.append(fn())
        done.set()

    loop.push_task(task)
    assert done.wait(5)
    return box[0]


def test_loop_thread_runs_tasks_in_its_own_thread():
    worker = LoopThread()
    loop = worker.loop()
    try:
        assert worker.loop() is loop
        ident = _run(loop, threading.get_ident)
        assert ident == worker.thread.ident
        assert ident != threading.get_ident()
        assert not loop.is_in_loop()
    finally:
        loop.stop()


def test_pool_without_threads_returns_base_loop():
    base = EventLoop()
    pool = LoopThreadPool(base)
    pool.create()
    assert pool.loops == []
    assert pool.next_loop() is base
    assert pool.next_loop() is base


def test_pool_hands_out_loops_round_robin():
    base = EventLoop()
    pool = LoopThreadPool(base)
    pool.set_thread_count(2)
    pool.create()
    try:
        assert len(pool.loops) == 2
        assert len({id(loop) for loop in pool.loops}) == 2
        assert base not in pool.loops
        first = pool.next_loop()
        second = pool.next_loop()
        third = pool.next_loop()
        assert first is pool.loops[1]
        assert second is pool.loops[0]
        assert third is first
    finally:
        for loop in pool.loops:
            loop.stop()


def test_pool_loops_run_in_distinct_threads():
    pool = LoopThreadPool(EventLoop())
    pool.set_thread_count(2)
    pool.create()
    try:
        idents = {_run(loop, threading.get_ident) for loop in pool.loops}
        assert idents == {thread.thread.ident for thread in pool.threads}
        assert threading.get_ident() not in idents
    finally:
        for loop in pool.loops:
            loop.stop()