"""Dispatch and motion engine for a simulated elevator bank."""

from .config import (
    DEFAULT_CAPACITY,
    DISPATCH_BATCH_SIZE,
    DOOR_OPEN_TICKS,
    BuildingConfig,
    DispatchConfig,
    ElevatorConstraints,
    build_dispatcher,
)
from .dispatcher import Dispatcher
from .elevator import BoardingController, Elevator
from .errors import FloorOutOfRangeError, InvalidRequestError, SimulationError, TickOrderError
from .metrics import MetricsSnapshot, MetricsTracker
from .request import Direction, Request
from .simulation import Simulation
from .snapshot import FleetSnapshot, format_snapshot
from .stops import StopSet

__all__ = [
    "DEFAULT_CAPACITY",
    "DISPATCH_BATCH_SIZE",
    "DOOR_OPEN_TICKS",
    "BoardingController",
    "BuildingConfig",
    "DispatchConfig",
    "Direction",
    "Dispatcher",
    "Elevator",
    "ElevatorConstraints",
    "FleetSnapshot",
    "FloorOutOfRangeError",
    "InvalidRequestError",
    "MetricsSnapshot",
    "MetricsTracker",
    "Request",
    "Simulation",
    "SimulationError",
    "StopSet",
    "TickOrderError",
    "build_dispatcher",
    "format_snapshot",
]
