from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .errors import InvalidRequestError


class Direction(IntEnum):
    """Travel direction; the value is the sign used by schedulers."""

    UP = 1
    DOWN = -1
    IDLE = 0


@dataclass(frozen=True)
class Request:
    """A rider travelling from ``origin`` to ``destination``."""

    origin: int
    destination: int
    created_at_tick: int = 0

    def __post_init__(self) -> None:
        if self.origin == self.destination:
            raise InvalidRequestError(
                f"origin and destination must differ (both {self.origin})"
            )

    @property
    def desired_direction(self) -> Direction:
        return Direction.UP if self.destination > self.origin else Direction.DOWN

    def __str__(self) -> str:
        return f"Request{{{self.origin}->{self.destination}}}"
