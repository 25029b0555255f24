from __future__ import annotations

from typing import Optional, Sequence

from .interface import ElevatorSnapshot, PendingRequest
from .utils import floor_distance


class NearestCarScheduler:
    """Assigns each request to the physically closest car, ignoring direction."""

    def select_elevator(
        self,
        elevator_state: Sequence[ElevatorSnapshot],
        request: PendingRequest,
    ) -> Optional[int]:
        candidates = list(elevator_state)
        if not candidates:
            return None
        # min() keeps the first of equal keys, i.e. the lowest id.
        chosen = min(candidates, key=lambda e: self.score(e, request))
        return chosen.elevator_id

    def score(self, elevator: ElevatorSnapshot, request: PendingRequest) -> int:
        return floor_distance(elevator, request.origin)
