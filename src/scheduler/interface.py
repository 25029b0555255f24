from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple


@dataclass(frozen=True)
class ElevatorSnapshot:
    """Lightweight view of an elevator for scheduling decisions and display."""

    elevator_id: int
    floor: int
    direction: int
    up_stops: Tuple[int, ...] = ()
    down_stops: Tuple[int, ...] = ()
    door_hold_ticks: int = 0
    load: int = 0
    capacity: int = 0

    @property
    def is_idle(self) -> bool:
        return self.direction == 0

    @property
    def doors_open(self) -> bool:
        return self.door_hold_ticks > 0


@dataclass(frozen=True)
class PendingRequest:
    """Representation of an unassigned rider request for schedulers."""

    origin: int
    destination: int
    direction: int
    requested_at: int


class Scheduler(Protocol):
    """Strategy interface for matching a request to one elevator."""

    def select_elevator(
        self,
        elevator_state: Sequence[ElevatorSnapshot],
        request: PendingRequest,
    ) -> Optional[int]:
        """
        Return the id of the elevator that should pick up ``request``.

        ``elevator_state`` is ordered by elevator id and implementations must
        break ties in that order. ``None`` means no elevator qualifies this
        round; the caller defers the request.
        """
        ...
