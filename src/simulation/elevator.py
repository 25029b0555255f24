from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Protocol

from scheduler import ElevatorSnapshot

from .config import DEFAULT_CAPACITY, DOOR_OPEN_TICKS
from .request import Direction
from .stops import StopSet

logger = logging.getLogger(__name__)


class BoardingController(Protocol):
    """The part of the dispatcher an elevator calls back into while stepping."""

    def board_waiting_passengers_at(self, elevator: "Elevator", floor: int, tick: int) -> int:
        ...


@dataclass
class Elevator:
    """A single car: direction, two directional stop sets and a door countdown.

    ``up_stops`` are served on the upward sweep and ``down_stops`` on the
    downward one. A floor may sit in both at once. ``onboard_counts`` maps a
    destination to the riders who get off there.
    """

    elevator_id: int
    current_floor: int
    min_floor: int
    max_floor: int
    door_open_ticks: int = DOOR_OPEN_TICKS
    capacity: int = DEFAULT_CAPACITY
    direction: Direction = Direction.IDLE
    up_stops: StopSet = field(default_factory=StopSet)
    down_stops: StopSet = field(default_factory=lambda: StopSet(descending=True))
    door_hold_ticks_remaining: int = 0
    onboard_counts: Dict[int, int] = field(default_factory=dict)
    delivered: int = 0

    @property
    def doors_open(self) -> bool:
        return self.door_hold_ticks_remaining > 0

    @property
    def door_state(self) -> str:
        if self.doors_open:
            return f"OPEN({self.door_hold_ticks_remaining})"
        return "CLOSED"

    @property
    def load(self) -> int:
        return sum(self.onboard_counts.values())

    def is_idle(self) -> bool:
        return (
            self.direction == Direction.IDLE
            and not self.up_stops
            and not self.down_stops
            and not self.doors_open
        )

    def has_stop_at(self, floor: int) -> bool:
        return floor in self.up_stops or floor in self.down_stops

    def add_stop(self, floor: int) -> None:
        if floor < self.min_floor or floor > self.max_floor:
            return
        if floor == self.current_floor and not self.doors_open:
            # Served by the next step instead of arriving instantly.
            self.up_stops.add(floor)
            return
        if self.direction == Direction.DOWN:
            above = floor > self.current_floor
        else:
            above = floor >= self.current_floor
        if above:
            self.up_stops.add(floor)
        else:
            self.down_stops.add(floor)

    def add_destination(self, destination: int) -> None:
        self.add_stop(destination)
        self.onboard_counts[destination] = self.onboard_counts.get(destination, 0) + 1

    def step(self, controller: BoardingController, tick: int) -> None:
        if self.doors_open:
            self.door_hold_ticks_remaining -= 1
            if not self.doors_open:
                self._update_direction()
            return

        if self.has_stop_at(self.current_floor):
            self._serve_current_floor(controller, tick)
            return

        if self.direction == Direction.IDLE:
            self._update_direction()

        if self.direction == Direction.UP:
            if self.up_stops:
                self.current_floor += 1
            elif self.down_stops:
                self.current_floor -= 1
        elif self.direction == Direction.DOWN:
            if self.down_stops:
                self.current_floor -= 1
            elif self.up_stops:
                self.current_floor += 1

        self.current_floor = max(self.min_floor, min(self.max_floor, self.current_floor))

    def snapshot(self) -> ElevatorSnapshot:
        return ElevatorSnapshot(
            elevator_id=self.elevator_id,
            floor=self.current_floor,
            direction=int(self.direction),
            up_stops=self.up_stops.as_tuple(),
            down_stops=self.down_stops.as_tuple(),
            door_hold_ticks=self.door_hold_ticks_remaining,
            load=self.load,
            capacity=self.capacity,
        )

    def _serve_current_floor(self, controller: BoardingController, tick: int) -> None:
        floor = self.current_floor
        self.up_stops.discard(floor)
        self.down_stops.discard(floor)

        # Alight
        dropped = self.onboard_counts.pop(floor, 0)
        self.delivered += dropped

        # Board
        boarded = controller.board_waiting_passengers_at(self, floor, tick)

        if dropped or boarded:
            self.door_hold_ticks_remaining = self.door_open_ticks
            logger.debug(
                "elevator %d at floor %d tick %d: %d off, %d on",
                self.elevator_id,
                floor,
                tick,
                dropped,
                boarded,
            )

        self._update_direction()

    def _update_direction(self) -> None:
        if self.up_stops and self.down_stops:
            up_distance = abs(self.up_stops.nearest(self.current_floor) - self.current_floor)
            down_distance = abs(self.down_stops.nearest(self.current_floor) - self.current_floor)
            self.direction = Direction.UP if up_distance <= down_distance else Direction.DOWN
        elif self.up_stops:
            self.direction = Direction.UP
        elif self.down_stops:
            self.direction = Direction.DOWN
        else:
            self.direction = Direction.IDLE

    def __str__(self) -> str:
        return (
            f"Elevator{{id={self.elevator_id}, floor={self.current_floor}, "
            f"dir={self.direction.name}, up={self.up_stops!r}, down={self.down_stops!r}, "
            f"door={self.door_state}}}"
        )
