from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .dispatcher import Dispatcher

DOOR_OPEN_TICKS = 2
DISPATCH_BATCH_SIZE = 16
# Tracked for display only; boarding never checks it.
DEFAULT_CAPACITY = 12


@dataclass
class BuildingConfig:
    """Building envelope and fleet size."""

    min_floor: int = 1
    max_floor: int = 30
    elevator_count: int = 3
    starting_floor: int = 1

    def __post_init__(self) -> None:
        if self.min_floor >= self.max_floor:
            raise ValueError("min_floor must be below max_floor")
        if self.elevator_count < 1:
            raise ValueError("elevator_count must be at least 1")
        if not (self.min_floor <= self.starting_floor <= self.max_floor):
            raise ValueError(
                f"starting_floor must be between {self.min_floor} and {self.max_floor}"
            )


@dataclass
class ElevatorConstraints:
    """Per-car settings shared by the whole fleet."""

    capacity: int = DEFAULT_CAPACITY
    door_open_ticks: int = DOOR_OPEN_TICKS

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be at least 1")
        if self.door_open_ticks < 1:
            raise ValueError("door_open_ticks must be at least 1")


@dataclass
class DispatchConfig:
    """Assignment strategy and per-tick work bound."""

    batch_size: int = DISPATCH_BATCH_SIZE
    scheduler_name: str = "cost"
    scheduler_options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")


def build_dispatcher(
    building: BuildingConfig,
    constraints: ElevatorConstraints | None = None,
    dispatch: DispatchConfig | None = None,
) -> "Dispatcher":
    from .dispatcher import Dispatcher

    constraints = constraints or ElevatorConstraints()
    dispatch = dispatch or DispatchConfig()
    return Dispatcher(
        elevator_count=building.elevator_count,
        min_floor=building.min_floor,
        max_floor=building.max_floor,
        starting_floor=building.starting_floor,
        door_open_ticks=constraints.door_open_ticks,
        batch_size=dispatch.batch_size,
        capacity=constraints.capacity,
        scheduler_name=dispatch.scheduler_name,
        scheduler_options=dispatch.scheduler_options,
    )
