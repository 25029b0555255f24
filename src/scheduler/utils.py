from __future__ import annotations

from .interface import ElevatorSnapshot, PendingRequest


def floor_distance(elevator: ElevatorSnapshot, floor: int) -> int:
    return abs(elevator.floor - floor)


def is_en_route(elevator: ElevatorSnapshot, request: PendingRequest) -> bool:
    """True when the car already travels the rider's way and has not passed the origin.

    An idle car is never en route.
    """

    if elevator.direction == 0 or elevator.direction != request.direction:
        return False
    if elevator.direction > 0:
        return elevator.floor <= request.origin
    return elevator.floor >= request.origin
