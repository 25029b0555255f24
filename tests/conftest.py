import pytest

from simulation import Dispatcher


@pytest.fixture
def dispatcher() -> Dispatcher:
    return Dispatcher(elevator_count=3, min_floor=1, max_floor=30, starting_floor=1)


@pytest.fixture
def single_car() -> Dispatcher:
    return Dispatcher(elevator_count=1, min_floor=1, max_floor=10, starting_floor=1)


def run_ticks(dispatcher: Dispatcher, start: int, count: int):
    """Advance ``dispatcher`` through ``count`` ticks starting at ``start``."""
    return [dispatcher.tick(t) for t in range(start, start + count)]
