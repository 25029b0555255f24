from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, List, Optional

from scheduler import PendingRequest, Scheduler, get_scheduler

from .config import DEFAULT_CAPACITY, DISPATCH_BATCH_SIZE, DOOR_OPEN_TICKS
from .elevator import Elevator
from .errors import FloorOutOfRangeError, TickOrderError
from .metrics import MetricsSnapshot, MetricsTracker
from .request import Request
from .snapshot import FleetSnapshot

logger = logging.getLogger(__name__)


class Dispatcher:
    """Owns the fleet and moves requests from submission to boarding.

    A request lives in ``unassigned`` until the scheduler matches it to a car,
    then in ``waiting_by_floor[origin]`` until any car serving that floor
    boards it. Each ``tick`` dispatches, steps every car in id order, and
    returns a snapshot.
    """

    def __init__(
        self,
        elevator_count: int,
        min_floor: int,
        max_floor: int,
        starting_floor: int,
        *,
        door_open_ticks: int = DOOR_OPEN_TICKS,
        batch_size: int = DISPATCH_BATCH_SIZE,
        capacity: int = DEFAULT_CAPACITY,
        scheduler_name: str = "cost",
        scheduler_options: Optional[dict] = None,
    ) -> None:
        if elevator_count < 1:
            raise ValueError("elevator_count must be at least 1")
        if min_floor >= max_floor:
            raise ValueError("min_floor must be below max_floor")
        if not (min_floor <= starting_floor <= max_floor):
            raise ValueError(f"starting_floor must be between {min_floor} and {max_floor}")
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self.min_floor = min_floor
        self.max_floor = max_floor
        self.batch_size = batch_size
        self.fleet: List[Elevator] = [
            Elevator(
                elevator_id=i,
                current_floor=starting_floor,
                min_floor=min_floor,
                max_floor=max_floor,
                door_open_ticks=door_open_ticks,
                capacity=capacity,
            )
            for i in range(elevator_count)
        ]
        self.unassigned: Deque[Request] = deque()
        self.waiting_by_floor: Dict[int, Deque[Request]] = {}
        self.metrics = MetricsTracker()
        self.last_tick: Optional[int] = None
        self.scheduler_name = scheduler_name
        self.scheduler: Scheduler = get_scheduler(scheduler_name, **(scheduler_options or {}))

    @property
    def unassigned_count(self) -> int:
        return len(self.unassigned)

    @property
    def waiting_at_floors(self) -> int:
        return sum(len(queue) for queue in self.waiting_by_floor.values())

    @property
    def waiting_count(self) -> int:
        return self.unassigned_count + self.waiting_at_floors

    @property
    def delivered_count(self) -> int:
        return sum(elevator.delivered for elevator in self.fleet)

    def set_scheduler(self, name: str, **options) -> None:
        self.scheduler = get_scheduler(name, **options)
        self.scheduler_name = name

    def in_range(self, floor: int) -> bool:
        return self.min_floor <= floor <= self.max_floor

    def submit(self, request: Request) -> None:
        if not (self.in_range(request.origin) and self.in_range(request.destination)):
            logger.warning("rejecting %s: outside floors %d-%d", request, self.min_floor, self.max_floor)
            raise FloorOutOfRangeError(f"Floor out of range: {request}")
        self.unassigned.append(request)

    def dispatch_waiting_requests(self, tick: int) -> None:
        polls = min(len(self.unassigned), self.batch_size)
        deferred: List[Request] = []
        for _ in range(polls):
            request = self.unassigned.popleft()
            best = self.choose_best_elevator(request)
            if best is None:
                deferred.append(request)
                continue
            self.waiting_by_floor.setdefault(request.origin, deque()).append(request)
            best.add_stop(request.origin)
            logger.debug("tick %d: assigned %s to elevator %d", tick, request, best.elevator_id)
        self.unassigned.extend(deferred)

    def choose_best_elevator(self, request: Request) -> Optional[Elevator]:
        chosen_id = self.scheduler.select_elevator(
            [elevator.snapshot() for elevator in self.fleet],
            self._pending(request),
        )
        if chosen_id is None:
            return None
        return self._get_elevator(chosen_id)

    def score(self, elevator: Elevator, request: Request) -> int:
        scorer = getattr(self.scheduler, "score", None)
        if scorer is None:
            raise TypeError(f"Scheduler '{self.scheduler_name}' does not expose a score")
        return scorer(elevator.snapshot(), self._pending(request))

    def board_waiting_passengers_at(self, elevator: Elevator, floor: int, tick: int) -> int:
        queue = self.waiting_by_floor.get(floor)
        if not queue:
            return 0
        # Capacity is informational: every rider waiting here gets on.
        boarded = 0
        while queue:
            request = queue.popleft()
            elevator.add_destination(request.destination)
            self.metrics.record_boarding(request, tick)
            boarded += 1
        del self.waiting_by_floor[floor]
        return boarded

    def tick(self, tick: int) -> FleetSnapshot:
        if self.last_tick is not None and tick <= self.last_tick:
            raise TickOrderError(f"tick {tick} does not follow tick {self.last_tick}")
        self.last_tick = tick
        self.dispatch_waiting_requests(tick)
        for elevator in self.fleet:
            elevator.step(self, tick)
        return self.snapshot(tick)

    def snapshot(self, tick: int) -> FleetSnapshot:
        return FleetSnapshot(
            tick=tick,
            unassigned=self.unassigned_count,
            waiting_at_floors=self.waiting_at_floors,
            elevators=tuple(elevator.snapshot() for elevator in self.fleet),
        )

    def metrics_snapshot(self, tick: int) -> MetricsSnapshot:
        return self.metrics.snapshot(tick, delivered=self.delivered_count, waiting=self.waiting_count)

    def _pending(self, request: Request) -> PendingRequest:
        return PendingRequest(
            origin=request.origin,
            destination=request.destination,
            direction=int(request.desired_direction),
            requested_at=request.created_at_tick,
        )

    def _get_elevator(self, elevator_id: int) -> Optional[Elevator]:
        for elevator in self.fleet:
            if elevator.elevator_id == elevator_id:
                return elevator
        return None
