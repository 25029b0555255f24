from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Tuple

from scheduler import ElevatorSnapshot

from .request import Direction


@dataclass(frozen=True)
class FleetSnapshot:
    """State of the whole fleet at the end of a tick."""

    tick: int
    unassigned: int
    waiting_at_floors: int
    elevators: Tuple[ElevatorSnapshot, ...]

    @property
    def waiting(self) -> int:
        return self.unassigned + self.waiting_at_floors

    def to_dict(self) -> dict:
        data = asdict(self)
        data["waiting"] = self.waiting
        for elevator in data["elevators"]:
            elevator["direction"] = Direction(elevator["direction"]).name
            elevator["up_stops"] = list(elevator["up_stops"])
            elevator["down_stops"] = list(elevator["down_stops"])
        data["elevators"] = list(data["elevators"])
        return data


def _format_stops(stops: Tuple[int, ...]) -> str:
    return "[" + ", ".join(str(floor) for floor in stops) + "]"


def format_elevator(elevator: ElevatorSnapshot) -> str:
    door = f"OPEN({elevator.door_hold_ticks})" if elevator.doors_open else "CLOSED"
    return (
        f"Elevator{{id={elevator.elevator_id}, floor={elevator.floor}, "
        f"dir={Direction(elevator.direction).name}, "
        f"up={_format_stops(elevator.up_stops)}, down={_format_stops(elevator.down_stops)}, "
        f"door={door}}}"
    )


def format_snapshot(snapshot: FleetSnapshot) -> str:
    lines = [f"T={snapshot.tick} | waiting={snapshot.waiting}"]
    lines.extend(f"  {format_elevator(elevator)}" for elevator in snapshot.elevators)
    return "\n".join(lines) + "\n"
