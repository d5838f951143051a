"""Unit tests for core/utils/workers.py"""

import time

import pytest

from mdsite.core.utils.workers import map_in_order


@pytest.mark.parametrize("workers", [1, 4])
def test_map_in_order_keeps_input_order(workers):
    def slow_square(n):
        time.sleep(0.01 * (5 - n))
        return n * n
    assert map_in_order(slow_square, [1, 2, 3, 4], workers) == [1, 4, 9, 16]


@pytest.mark.parametrize("workers", [1, 4])
def test_map_in_order_propagates_first_error(workers):
    def fail_on_odd(n):
        if n % 2:
            raise ValueError(f"odd {n}")
        return n
    with pytest.raises(ValueError, match="odd 1"):
        map_in_order(fail_on_odd, [2, 1, 3], workers)


def test_map_in_order_empty():
    assert map_in_order(str, [], 8) == []
