from __future__ import annotations

import logging
import math
import random
from typing import Callable, Dict, Iterable, List, Optional

from .dispatcher import Dispatcher
from .metrics import MetricsSnapshot
from .request import Request
from .snapshot import FleetSnapshot

logger = logging.getLogger(__name__)


class Simulation:
    """Tick driver feeding scripted and random requests into a dispatcher."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        scripted_requests: Iterable[Request] = (),
        arrival_rate_per_floor: float = 0.0,
        random_seed: Optional[int] = None,
        snapshot_interval: int = 1,
    ) -> None:
        self.dispatcher = dispatcher
        self.scripted_requests: List[Request] = sorted(
            scripted_requests, key=lambda request: request.created_at_tick
        )
        self.arrival_rate_per_floor = arrival_rate_per_floor
        self.random = random.Random(random_seed)
        self.snapshot_interval = max(1, snapshot_interval)
        self.current_time: int = 0
        self.last_snapshot: Optional[FleetSnapshot] = None
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self._next_scripted = 0

    def run(self, duration: int) -> None:
        for _ in range(duration):
            self.step()

    def step(self) -> FleetSnapshot:
        submitted = self._submit_scripted_requests()
        submitted += self._generate_random_requests()
        if submitted:
            self._emit("arrival", {"time": self.current_time, "count": submitted})

        snapshot = self.dispatcher.tick(self.current_time)
        self.last_snapshot = snapshot

        if self.current_time % self.snapshot_interval == 0:
            self._emit("snapshot", snapshot)

        self.current_time += 1
        return snapshot

    def submit(self, origin: int, destination: int) -> Request:
        """Submit a request created at the current tick."""

        request = Request(origin, destination, self.current_time)
        self.dispatcher.submit(request)
        return request

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def metrics_snapshot(self) -> MetricsSnapshot:
        return self.dispatcher.metrics_snapshot(self.current_time)

    def _submit_scripted_requests(self) -> int:
        count = 0
        while (
            self._next_scripted < len(self.scripted_requests)
            and self.scripted_requests[self._next_scripted].created_at_tick <= self.current_time
        ):
            self.dispatcher.submit(self.scripted_requests[self._next_scripted])
            self._next_scripted += 1
            count += 1
        return count

    def _generate_random_requests(self) -> int:
        if self.arrival_rate_per_floor <= 0:
            return 0
        total_arrivals = 0
        floors = range(self.dispatcher.min_floor, self.dispatcher.max_floor + 1)
        for origin in floors:
            arrivals = self._poisson(self.arrival_rate_per_floor)
            for _ in range(arrivals):
                destination = self.random.choice([f for f in floors if f != origin])
                self.dispatcher.submit(Request(origin, destination, self.current_time))
            total_arrivals += arrivals
        if total_arrivals:
            logger.debug("tick %d: %d random arrivals", self.current_time, total_arrivals)
        return total_arrivals

    def _poisson(self, lam: float) -> int:
        if lam <= 0:
            return 0
        L = math.exp(-lam)
        k = 0
        p = 1.0
        while p > L:
            k += 1
            p *= self.random.random()
        return k - 1

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
