from __future__ import annotations


class SimulationError(Exception):
    """Base class for errors raised by the dispatch engine."""


class InvalidRequestError(SimulationError, ValueError):
    """A request whose origin and destination are the same floor."""


class FloorOutOfRangeError(SimulationError, ValueError):
    """A request referencing a floor outside the building envelope."""


class TickOrderError(SimulationError, ValueError):
    """The tick counter did not strictly increase between calls."""
