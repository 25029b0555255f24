from __future__ import annotations

from typing import Dict, Type

from .cost import CostHeuristicScheduler
from .interface import ElevatorSnapshot, PendingRequest, Scheduler
from .nearest import NearestCarScheduler

__all__ = [
    "CostHeuristicScheduler",
    "ElevatorSnapshot",
    "NearestCarScheduler",
    "PendingRequest",
    "Scheduler",
    "get_scheduler",
]


SCHEDULER_REGISTRY: Dict[str, Type[Scheduler]] = {
    "cost": CostHeuristicScheduler,
    "nearest": NearestCarScheduler,
}


def get_scheduler(name: str, **kwargs) -> Scheduler:
    cls = SCHEDULER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown scheduler '{name}'. Available: {', '.join(SCHEDULER_REGISTRY)}")
    return cls(**kwargs)
