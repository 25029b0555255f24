from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

from .request import Request


@dataclass
class MetricsSnapshot:
    time_step: int
    average_wait: float
    wait_p95: float
    boarded: int
    delivered: int
    waiting: int


class MetricsTracker:
    def __init__(self) -> None:
        self.wait_times: List[int] = []

    @property
    def boarded(self) -> int:
        return len(self.wait_times)

    def record_boarding(self, request: Request, tick: int) -> None:
        self.wait_times.append(tick - request.created_at_tick)

    def _average(self, values: List[int]) -> float:
        if not values:
            return 0.0
        return sum(values) / len(values)

    def _percentile(self, values: List[int], percentile: float) -> float:
        if not values:
            return 0.0
        sorted_vals = sorted(values)
        k = (len(sorted_vals) - 1) * percentile
        f = math.floor(k)
        c = math.ceil(k)
        if f == c:
            return float(sorted_vals[int(k)])
        d0 = sorted_vals[int(f)] * (c - k)
        d1 = sorted_vals[int(c)] * (k - f)
        return float(d0 + d1)

    def snapshot(self, time_step: int, delivered: int = 0, waiting: int = 0) -> MetricsSnapshot:
        return MetricsSnapshot(
            time_step=time_step,
            average_wait=self._average(self.wait_times),
            wait_p95=self._percentile(self.wait_times, 0.95),
            boarded=self.boarded,
            delivered=delivered,
            waiting=waiting,
        )
