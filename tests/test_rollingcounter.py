import itertools

import pytest

from adbkit.tcpusb.rollingcounter import RollingCounter


def test_zero_minimum_becomes_one():
    counter = RollingCounter(10)
    assert counter.minimum == 1
    assert counter.current == 1


def test_sequence_wraps():
    counter = RollingCounter(3)
    assert [counter.next() for _ in range(4)] == [2, 3, 2, 3]


@pytest.mark.parametrize("maximum,minimum", [(5, 0), (10, 3), (0xFFFFFFFF, 0)])
def test_values_stay_in_range(maximum, minimum):
    counter = RollingCounter(maximum, minimum)
    for value in itertools.islice(counter, 50):
        assert counter.minimum < value <= counter.maximum


def test_next_returns_current():
    counter = RollingCounter(100)
    value = counter.next()
    assert counter.current == value


def test_reset():
    counter = RollingCounter(100, 5)
    counter.next()
    counter.next()
    counter.reset()
    assert counter.current == counter.minimum


def test_lowering_maximum_below_current_resets():
    counter = RollingCounter(100)
    for _ in range(10):
        counter.next()
    counter.maximum = 5
    assert counter.current == counter.minimum


def test_raising_minimum_above_current_moves_current():
    counter = RollingCounter(100)
    counter.minimum = 50
    assert counter.current == 50
    assert counter.next() == 51