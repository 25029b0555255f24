from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from dataclasses import asdict
from typing import Dict, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from simulation import BuildingConfig, Simulation, build_dispatcher

logger = logging.getLogger(__name__)


class AlgorithmSelection(BaseModel):
    name: str
    options: Dict[str, object] = {}


class RequestSubmission(BaseModel):
    origin: int
    destination: int


class SimulationManager:
    def __init__(
        self,
        building: Optional[BuildingConfig] = None,
        tick_interval: float = 1.0,
        arrival_rate_per_floor: float = 0.0,
    ) -> None:
        dispatcher = build_dispatcher(building or BuildingConfig())
        self.simulation = Simulation(
            dispatcher=dispatcher,
            arrival_rate_per_floor=arrival_rate_per_floor,
        )
        self.tick_interval = tick_interval
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        while True:
            payload = await self.advance()
            await self.broadcast(payload)
            await asyncio.sleep(self.tick_interval)

    async def advance(self) -> dict:
        async with self._lock:
            self.simulation.step()
            return self.current_state()

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        dispatcher = self.simulation.dispatcher
        # The last tick run is current_time - 1; before any tick, report the initial fleet.
        snapshot = self.simulation.last_snapshot or dispatcher.snapshot(self.simulation.current_time)
        return {
            "time": self.simulation.current_time,
            "fleet": snapshot.to_dict(),
            "metrics": asdict(self.simulation.metrics_snapshot()),
            "scheduler": dispatcher.scheduler_name,
        }

    async def submit(self, origin: int, destination: int) -> dict:
        async with self._lock:
            request = self.simulation.submit(origin, destination)
            state = self.current_state()
            state["submitted"] = {
                "origin": request.origin,
                "destination": request.destination,
                "created_at_tick": request.created_at_tick,
            }
            return state

    async def set_scheduler(self, name: str, options: Dict[str, object]) -> dict:
        async with self._lock:
            self.simulation.dispatcher.set_scheduler(name, **options)
            logger.info("scheduler switched to %s", name)
            return self.current_state()


def build_app(manager: SimulationManager, run_background: bool = True) -> FastAPI:
    app = FastAPI(title="Elevator Dispatch Simulation API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if run_background:

        @app.on_event("startup")
        async def on_startup() -> None:
            await manager.start()

        @app.on_event("shutdown")
        async def on_shutdown() -> None:
            await manager.stop()

    @app.get("/state")
    async def get_state() -> dict:
        return manager.current_state()

    @app.post("/requests")
    async def submit_request(submission: RequestSubmission) -> dict:
        try:
            return await manager.submit(submission.origin, submission.destination)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    @app.post("/tick")
    async def advance_tick() -> dict:
        payload = await manager.advance()
        await manager.broadcast(payload)
        return payload

    @app.post("/scheduler")
    async def set_scheduler(selection: AlgorithmSelection) -> dict:
        try:
            return await manager.set_scheduler(selection.name, selection.options)
        except (TypeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    @app.websocket("/ws/stream")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await manager.register(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            await manager.unregister(websocket)

    return app


manager = SimulationManager()
app = build_app(manager)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
