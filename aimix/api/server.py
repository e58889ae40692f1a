"""AIMIX FastAPI server — main application."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from aimix import __version__
from aimix.api.routes.mix import router as mix_router
from aimix.api.routes.samples import router as samples_router
from aimix.api.websocket import ConnectionManager, websocket_endpoint
from aimix.brain.backends import select_backend
from aimix.config import Settings, settings
from aimix.console.coordinator import MixJobCoordinator
from aimix.errors import MixError

logger = structlog.get_logger()


def create_app(
    coordinator: MixJobCoordinator | None = None,
    app_settings: Settings | None = None,
) -> FastAPI:
    """Build the app around one coordinator.

    The backend is probed here, once; pass a prepared coordinator to skip it.
    """
    app_settings = app_settings or settings
    if coordinator is None:
        coordinator = MixJobCoordinator(select_backend(app_settings), app_settings)

    app = FastAPI(
        title="AIMIX",
        description="Genre-aware mix parameters from raw stems.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    manager = ConnectionManager()
    coordinator.add_listener(manager.broadcast_job)
    app.state.coordinator = coordinator
    app.state.connections = manager

    app.include_router(mix_router, prefix="/api")
    app.include_router(samples_router, prefix="/api")

    @app.websocket("/ws/mix")
    async def ws_endpoint(websocket: WebSocket) -> None:
        """WebSocket for live mix job updates."""
        await websocket_endpoint(websocket, manager, coordinator)

    # ── Public routes ──

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "aimix"}

    @app.get("/api/model")
    async def model_info(request: Request) -> dict[str, Any]:
        """Active backend and, for the model backend, its input/output layout."""
        active: MixJobCoordinator = request.app.state.coordinator
        try:
            return active.backend.describe()
        except MixError as e:
            raise HTTPException(status_code=503, detail=str(e)) from None

    @app.get("/api/info")
    async def info(request: Request) -> dict[str, object]:
        """System information and capabilities."""
        active: MixJobCoordinator = request.app.state.coordinator
        return {
            "name": "AIMIX",
            "version": __version__,
            "backend": active.backend.name,
            "max_tracks": app_settings.max_tracks,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "model": "GET /api/model",
                "mix_generate": "POST /api/mix/generate",
                "mix_parameters": "GET /api/mix/parameters",
                "tracks": "GET|POST /api/tracks",
                "samples": "GET /api/samples",
                "websocket": "WS /ws/mix",
            },
        }

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "aimix.api.server:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )
