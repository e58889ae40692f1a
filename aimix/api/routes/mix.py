"""API routes for mix jobs — trigger, poll, and parameter export."""

from __future__ import annotations

import asyncio
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from aimix.api.deps import get_coordinator
from aimix.brain.denorm import parameter_units
from aimix.console.coordinator import MixJobCoordinator
from aimix.console.store import JobStatus
from aimix.errors import ConcurrencyConflict, InputError

logger = structlog.get_logger()

router = APIRouter(tags=["mix"])

Coordinator = Annotated[MixJobCoordinator, Depends(get_coordinator)]


class GenreRequest(BaseModel):
    """Body carrying the target genre."""

    genre: str | None = None


# ── Trigger ──────────────────────────────────────────────


@router.post("/mix/generate")
async def generate_mix(req: GenreRequest, coordinator: Coordinator) -> dict[str, Any]:
    """Run a mix job for the genre and return its tracks.

    The job keeps running if the client disconnects; poll ``/tracks`` for it.
    """
    try:
        task = coordinator.trigger(req.genre)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except ConcurrencyConflict as e:
        raise HTTPException(status_code=409, detail=str(e)) from None
    except Exception as e:
        logger.error("mix.trigger.failed", genre=req.genre, error=str(e))
        raise HTTPException(status_code=500, detail=str(e)) from e

    job = await asyncio.shield(task)

    if job.status is JobStatus.FAILED:
        status_code = 400 if job.error_code == InputError.code else 500
        raise HTTPException(status_code=status_code, detail=job.error)

    return {
        "genre": job.genre,
        "source": job.source,
        "units": parameter_units(job.source),
        "tracks": [t.to_dict() for t in job.tracks],
    }


# ── Status ───────────────────────────────────────────────


@router.get("/tracks")
async def get_tracks(coordinator: Coordinator, genre: str | None = None) -> dict[str, Any]:
    """Current job snapshot; a new genre starts a job lazily."""
    return coordinator.status(genre).to_dict()


@router.post("/tracks")
async def post_tracks(req: GenreRequest, coordinator: Coordinator) -> dict[str, Any]:
    """Same as ``GET /tracks`` with the genre in the body."""
    return coordinator.status(req.genre).to_dict()


# ── Export ───────────────────────────────────────────────


@router.get("/mix/parameters")
async def get_parameters(coordinator: Coordinator) -> dict[str, Any]:
    """Ordered gains and pans of the last completed job."""
    params = coordinator.last_parameters()
    if params is None:
        raise HTTPException(status_code=404, detail="No completed mix job")
    return params.to_dict()
