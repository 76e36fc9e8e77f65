from __future__ import annotations

import asyncio
import json
from typing import Set

import structlog
from fastapi import WebSocket, WebSocketDisconnect

from ..store import AppStore, StoreState

SEND_TIMEOUT = 5.0

logger = structlog.get_logger(__name__)


class ConnectionManager:
    """Pushes the name of every store action to connected websockets.

    Clients re-read whatever they render through the HTTP routes; the socket
    only tells them that something changed.
    """

    def __init__(self) -> None:
        self.connections: Set[WebSocket] = set()
        self._tasks: Set[asyncio.Task] = set()
        self._unsubscribe = None

    def attach(self, store: AppStore) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = store.subscribe(self._on_action)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.connections.add(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        self.connections.discard(websocket)

    def _on_action(self, action: str, state: StoreState) -> None:
        if not self.connections:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self.broadcast_text(json.dumps({"action": action})))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def broadcast_text(self, message: str) -> None:
        targets = list(self.connections)
        coros = [asyncio.wait_for(ws.send_text(message), SEND_TIMEOUT) for ws in targets]
        results = await asyncio.gather(*coros, return_exceptions=True)
        for ws, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.debug("ws.send_failed", error=str(result))
                self.disconnect(ws)


async def store_events_endpoint(websocket: WebSocket) -> None:
    manager: ConnectionManager = websocket.app.state.ws_manager
    await manager.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket)
