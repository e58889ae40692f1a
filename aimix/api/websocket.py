"""WebSocket push channel for mix job updates.

Clients connect to /ws/mix and receive a job snapshot on connect and after
every state change. This sits on top of the polling endpoint; the snapshot
payload is identical to ``GET /api/tracks``.
"""

from __future__ import annotations

import json

import structlog
from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from aimix.console.coordinator import MixJobCoordinator
from aimix.console.store import MixJob

logger = structlog.get_logger()


class ConnectionManager:
    """Tracks connected clients and fans out job snapshots."""

    def __init__(self) -> None:
        self._connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        """Accept and register a new WebSocket connection."""
        await websocket.accept()
        self._connections.append(websocket)
        logger.info("ws.connected", clients=len(self._connections))

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove a disconnected WebSocket."""
        self._connections = [ws for ws in self._connections if ws != websocket]
        logger.info("ws.disconnected", clients=len(self._connections))

    async def send_job(self, websocket: WebSocket, job: MixJob) -> None:
        await websocket.send_text(json.dumps({"type": "job", "job": job.to_dict()}))

    async def broadcast_job(self, job: MixJob) -> None:
        """Send a snapshot to every connected client."""
        dead: list[WebSocket] = []
        for ws in list(self._connections):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await self.send_job(ws, job)
            except Exception:
                dead.append(ws)

        for ws in dead:
            self.disconnect(ws)


async def websocket_endpoint(
    websocket: WebSocket,
    manager: ConnectionManager,
    coordinator: MixJobCoordinator,
) -> None:
    """Push job snapshots until the client goes away.

    Usage from frontend:
        const ws = new WebSocket('ws://host:8000/ws/mix')
        ws.onmessage = (event) => {
            const data = JSON.parse(event.data)
            // data.type: 'job' | 'pong'
            // data.job: same shape as GET /api/tracks
        }
    """
    await manager.connect(websocket)
    try:
        await manager.send_job(websocket, coordinator.status())
        while True:
            data = await websocket.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue
            if isinstance(msg, dict) and msg.get("action") == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
    except WebSocketDisconnect:
        manager.disconnect(websocket)
