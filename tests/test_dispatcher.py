from collections import deque

import pytest

from conftest import run_ticks
from simulation import (
    DISPATCH_BATCH_SIZE,
    DOOR_OPEN_TICKS,
    Direction,
    Dispatcher,
    FloorOutOfRangeError,
    Request,
    TickOrderError,
)


class NeverScheduler:
    def __init__(self) -> None:
        self.calls = 0

    def select_elevator(self, elevator_state, request):
        self.calls += 1
        return None


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(elevator_count=0, min_floor=1, max_floor=10, starting_floor=1),
        dict(elevator_count=2, min_floor=10, max_floor=10, starting_floor=10),
        dict(elevator_count=2, min_floor=1, max_floor=10, starting_floor=11),
    ],
)
def test_invalid_construction(kwargs):
    with pytest.raises(ValueError):
        Dispatcher(**kwargs)


def test_fleet_starts_idle_at_starting_floor(dispatcher):
    assert [e.elevator_id for e in dispatcher.fleet] == [0, 1, 2]
    assert all(e.current_floor == 1 and e.is_idle() for e in dispatcher.fleet)


@pytest.mark.parametrize("origin,destination", [(0, 5), (5, 31), (31, 2)])
def test_out_of_range_submission_fails(dispatcher, origin, destination):
    with pytest.raises(FloorOutOfRangeError):
        dispatcher.submit(Request(origin, destination, 0))
    assert dispatcher.unassigned_count == 0


def test_out_of_range_is_a_value_error(dispatcher):
    with pytest.raises(ValueError):
        dispatcher.submit(Request(1, 40, 0))


def test_tick_counter_must_increase(dispatcher):
    dispatcher.tick(0)
    dispatcher.tick(1)
    with pytest.raises(TickOrderError):
        dispatcher.tick(1)


def test_pickup_at_starting_floor_boards_then_holds_doors(dispatcher):
    dispatcher.submit(Request(1, 18, 0))
    snapshot = dispatcher.tick(0)

    car = snapshot.elevators[0]
    assert car.floor == 1
    assert car.door_hold_ticks == DOOR_OPEN_TICKS
    assert car.direction == Direction.UP
    assert car.up_stops == (18,)
    assert snapshot.waiting == 0
    assert dispatcher.metrics.wait_times == [0]

    for tick in range(1, 1 + DOOR_OPEN_TICKS):
        assert dispatcher.tick(tick).elevators[0].floor == 1
    assert dispatcher.tick(1 + DOOR_OPEN_TICKS).elevators[0].floor == 2

    tick = 2 + DOOR_OPEN_TICKS
    while dispatcher.delivered_count == 0:
        snapshot = dispatcher.tick(tick)
        assert all(1 <= e.floor <= 30 for e in snapshot.elevators)
        tick += 1
        assert tick < 100
    assert dispatcher.fleet[0].current_floor == 18
    assert dispatcher.fleet[1].current_floor == 1
    assert dispatcher.fleet[2].current_floor == 1


def test_riders_at_same_floor_board_together(dispatcher):
    dispatcher.submit(Request(5, 10, 0))
    dispatcher.submit(Request(5, 1, 0))
    dispatcher.tick(0)

    assert len(dispatcher.waiting_by_floor[5]) == 2
    car = dispatcher.fleet[0]
    assert list(car.up_stops) == [5]

    run_ticks(dispatcher, 1, 3)
    assert car.current_floor == 5
    assert len(dispatcher.waiting_by_floor[5]) == 2
    snapshot = dispatcher.tick(4)

    assert car.current_floor == 5
    assert 5 not in dispatcher.waiting_by_floor
    assert list(car.up_stops) == [10]
    assert list(car.down_stops) == [1]
    assert car.onboard_counts == {10: 1, 1: 1}
    assert snapshot.elevators[0].door_hold_ticks == DOOR_OPEN_TICKS
    assert snapshot.waiting == 0


def test_batch_cap_limits_work_per_tick(dispatcher):
    requests = [Request(5 + i % 10, 25, 0) for i in range(20)]
    for request in requests:
        dispatcher.submit(request)

    dispatcher.tick(0)
    assert dispatcher.unassigned_count == 20 - DISPATCH_BATCH_SIZE
    assert list(dispatcher.unassigned) == requests[DISPATCH_BATCH_SIZE:]
    assert dispatcher.waiting_at_floors == DISPATCH_BATCH_SIZE

    dispatcher.tick(1)
    assert dispatcher.unassigned_count == 0
    assert dispatcher.waiting_at_floors == 20


def test_deferred_requests_go_behind_unprocessed_ones(dispatcher):
    never = NeverScheduler()
    dispatcher.scheduler = never
    requests = [Request(5, 6 + i % 20, 0) for i in range(20)]
    for request in requests:
        dispatcher.submit(request)

    dispatcher.tick(0)

    assert never.calls == DISPATCH_BATCH_SIZE
    assert list(dispatcher.unassigned) == requests[DISPATCH_BATCH_SIZE:] + requests[:DISPATCH_BATCH_SIZE]
    assert dispatcher.waiting_at_floors == 0


def test_score_ties_go_to_lowest_id(dispatcher):
    best = dispatcher.choose_best_elevator(Request(12, 2, 0))
    assert best is dispatcher.fleet[0]


def test_idle_car_beats_en_route_car_at_equal_distance(dispatcher):
    moving, idle, _ = dispatcher.fleet
    moving.current_floor = 3
    moving.direction = Direction.UP
    moving.up_stops.add(9)
    idle.current_floor = 7

    request = Request(5, 10, 0)
    assert dispatcher.score(moving, request) == 4
    assert dispatcher.score(idle, request) == 2
    assert dispatcher.choose_best_elevator(request) is idle


def test_cars_heading_away_are_penalized_not_excluded():
    dispatcher = Dispatcher(elevator_count=1, min_floor=1, max_floor=30, starting_floor=10)
    car = dispatcher.fleet[0]
    car.direction = Direction.DOWN
    car.down_stops.add(2)

    request = Request(12, 20, 0)
    assert dispatcher.score(car, request) == 2 + 50
    assert dispatcher.choose_best_elevator(request) is car

    car.direction = Direction.UP
    assert dispatcher.score(car, Request(8, 20, 0)) == 2 + 50
    assert dispatcher.score(car, Request(12, 1, 0)) == 2 + 50


def test_any_car_serving_a_floor_boards_everyone_waiting(dispatcher):
    dispatcher.waiting_by_floor[1] = deque([Request(1, 4, 0), Request(1, 9, 0), Request(1, 6, 0)])
    car = dispatcher.fleet[2]
    assert dispatcher.board_waiting_passengers_at(car, 1, 3) == 3
    assert car.onboard_counts == {4: 1, 9: 1, 6: 1}
    assert dispatcher.board_waiting_passengers_at(car, 1, 3) == 0
    assert dispatcher.metrics.wait_times == [3, 3, 3]


def test_every_request_is_delivered_within_bounds(dispatcher):
    schedule = {
        0: [Request(1, 18, 0)],
        1: [Request(4, 2, 1)],
        5: [Request(16, 27, 5)],
        7: [Request(27, 3, 7)],
        10: [Request(8, 22, 10)],
        12: [Request(22, 5, 12)],
        20: [Request(3, 30, 20)],
        25: [Request(15, 1, 25)],
        40: [Request(12, 25, 40)],
        45: [Request(25, 11, 45)],
    }
    total = sum(len(batch) for batch in schedule.values())

    for tick in range(400):
        for request in schedule.get(tick, []):
            dispatcher.submit(request)
        snapshot = dispatcher.tick(tick)
        assert all(1 <= car.floor <= 30 for car in snapshot.elevators)

    assert dispatcher.waiting_count == 0
    assert dispatcher.metrics.boarded == total
    assert dispatcher.delivered_count == total
    assert all(car.is_idle() for car in dispatcher.fleet)


def test_identical_inputs_give_identical_snapshots():
    def run():
        dispatcher = Dispatcher(elevator_count=3, min_floor=1, max_floor=30, starting_floor=1)
        snapshots = []
        for tick in range(60):
            if tick % 7 == 0:
                dispatcher.submit(Request(1 + tick % 30, 30 - tick % 29, tick))
            snapshots.append(dispatcher.tick(tick))
        return snapshots

    assert run() == run()


def test_switching_scheduler(dispatcher):
    dispatcher.set_scheduler("nearest")
    assert dispatcher.scheduler_name == "nearest"
    with pytest.raises(ValueError):
        dispatcher.set_scheduler("elevator-roulette")
    assert dispatcher.scheduler_name == "nearest"


def test_metrics_snapshot_counts(dispatcher):
    dispatcher.submit(Request(1, 3, 0))
    dispatcher.submit(Request(20, 3, 0))
    run_ticks(dispatcher, 0, 5)
    metrics = dispatcher.metrics_snapshot(4)
    assert metrics.boarded == 1
    assert metrics.delivered == 0
    assert metrics.waiting == 1
