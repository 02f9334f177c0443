import threading

from reactor_http.latch import CountDownLatch


def test_count_decreases():
    latch = CountDownLatch(3)
    latch.count_down()
    assert latch.count == 2


def test_wait_returns_immediately_at_zero():
    latch = CountDownLatch(0)
    assert latch.wait(0) is True


def test_wait_times_out_while_positive():
    latch = CountDownLatch(2)
    latch.count_down()
    assert latch.wait(0.05) is False
    assert latch.count == 1


def test_waiter_released_by_other_threads():
    latch = CountDownLatch(4)
    workers = [threading.Thread(target=latch.count_down) for _ in range(4)]
    for worker in workers:
        worker.start()
    assert latch.wait(2) is True
    for worker in workers:
        worker.join()
    assert latch.count == 0


def test_all_waiters_are_woken():
    latch = CountDownLatch(1)
    results = []
    lock = threading.Lock()

    def waiter():
        ok = latch.wait(2)
        with lock:
            results.append(ok)

    threads = [threading.Thread(target=waiter) for _ in range(3)]
    for thread in threads:
        thread.start()
    latch.count_down()
    assert latch.wait(2) is True
    for thread in threads:
        thread.join()
    assert results == [True, True, True]
    assert latch.count == 0