import itertools

import pytest

from lootbag.pool import WeightedPool


class FixedSource:
    """Random source replaying a fixed list of values, cycling when exhausted."""

    def __init__(self, values):
        self.values = list(values)
        self._cycle = itertools.cycle(self.values)
        self.calls = 0

    def random(self):
        self.calls += 1
        return next(self._cycle)


@pytest.fixture
def fixed_source():
    return FixedSource


@pytest.fixture
def abc_pool():
    pool = WeightedPool()
    pool.insert("A", 50)
    pool.insert("B", 30)
    pool.insert("C", 20)
    return pool
