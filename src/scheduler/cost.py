from __future__ import annotations

from typing import Optional, Sequence

from .interface import ElevatorSnapshot, PendingRequest
from .utils import floor_distance, is_en_route


class CostHeuristicScheduler:
    """Picks the car with the lowest distance-plus-penalty score.

    Idle cars cost their distance. Cars already heading the rider's way
    without having passed the origin pay a small penalty, so an idle car wins
    at equal distance. Every other car pays a heavy penalty but is never
    excluded, which keeps assignment total.
    """

    def __init__(self, en_route_penalty: int = 2, away_penalty: int = 50) -> None:
        self.en_route_penalty = en_route_penalty
        self.away_penalty = away_penalty

    def select_elevator(
        self,
        elevator_state: Sequence[ElevatorSnapshot],
        request: PendingRequest,
    ) -> Optional[int]:
        best: Optional[ElevatorSnapshot] = None
        best_score: Optional[int] = None
        for elevator in elevator_state:
            score = self.score(elevator, request)
            if best_score is None or score < best_score:
                best, best_score = elevator, score
        return best.elevator_id if best is not None else None

    def score(self, elevator: ElevatorSnapshot, request: PendingRequest) -> int:
        distance = floor_distance(elevator, request.origin)
        if elevator.is_idle:
            return distance
        if is_en_route(elevator, request):
            return distance + self.en_route_penalty
        return distance + self.away_penalty
