"""FastAPI dependencies shared by the route modules."""

from __future__ import annotations

from fastapi import Request

from aimix.console.coordinator import MixJobCoordinator


def get_coordinator(request: Request) -> MixJobCoordinator:
    """The coordinator owned by the running app."""
    coordinator: MixJobCoordinator = request.app.state.coordinator
    return coordinator
