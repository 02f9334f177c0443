import pytest

from reactor_http.timer_wheel import TimerTask, TimerWheel


def _ticks(wheel, count):
    for _ in range(count):
        wheel.tick()


def test_task_fires_after_timeout_ticks():
    wheel = TimerWheel(60)
    fired = []
    wheel.add(1, 3, lambda: fired.append(1))
    _ticks(wheel, 2)
    assert fired == []
    assert wheel.has_timer(1)
    wheel.tick()
    assert fired == [1]
    assert not wheel.has_timer(1)


def test_cancelled_task_does_not_run_but_is_released():
    wheel = TimerWheel(60)
    fired = []
    wheel.add(5, 2, lambda: fired.append(5))
    wheel.cancel(5)
    assert wheel.has_timer(5)
    _ticks(wheel, 2)
    assert fired == []
    assert not wheel.has_timer(5)


def test_repeated_refresh_in_same_slot_fires_once():
    wheel = TimerWheel(60)
    fired = []
    wheel.add(3, 2, lambda: fired.append(3))
    wheel.refresh(3)
    wheel.refresh(3)
    _ticks(wheel, 10)
    assert fired == [3]


def test_timeout_wraps_around_capacity():
    wheel = TimerWheel(4)
    fired = []
    wheel.add(9, 0, lambda: fired.append(9))
    _ticks(wheel, 3)
    assert fired == []
    wheel.tick()
    assert fired == [9]


def test_callback_may_re_add_same_id():
    wheel = TimerWheel(60)
    fired = []

    def again():
        fired.append("first")
        wheel.add(4, 1, lambda: fired.append("second"))

    wheel.add(4, 1, again)
    wheel.tick()
    assert fired == ["first"]
    assert wheel.has_timer(4)
    wheel.tick()
    assert fired == ["first", "second"]
    assert not wheel.has_timer(4)


def test_unknown_ids_are_ignored():
    wheel = TimerWheel(60)
    wheel.cancel(42)
    wheel.refresh(42)
    assert not wheel.has_timer(42)


def test_independent_tasks_fire_in_their_own_slots():
    wheel = TimerWheel(60)
    fired = []
    wheel.add(1, 1, lambda: fired.append(1))
    wheel.add(2, 2, lambda: fired.append(2))
    wheel.tick()
    assert fired == [1]
    wheel.tick()
    assert fired == [1, 2]


@pytest.mark.parametrize("capacity", [0, -1])
def test_capacity_must_be_positive(capacity):
    with pytest.raises(ValueError):
        TimerWheel(capacity)


def test_timer_task_cancel_clears_valid():
    task = TimerTask(1, 5, lambda: None)
    assert task.valid
    task.cancel()
    assert task.valid is False