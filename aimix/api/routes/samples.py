"""API routes for the sample directory — read-only."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from aimix.api.deps import get_coordinator
from aimix.console.coordinator import MixJobCoordinator
from aimix.ear.loader import list_samples

router = APIRouter(prefix="/samples", tags=["samples"])


class SampleInfo(BaseModel):
    """A sample file available to the pipeline."""

    name: str
    path: str


@router.get("")
async def get_samples(
    coordinator: Annotated[MixJobCoordinator, Depends(get_coordinator)],
) -> list[SampleInfo]:
    """List every supported sample file, including ones past the batch limit."""
    settings = coordinator.settings
    return [
        SampleInfo(name=p.name, path=str(p))
        for p in list_samples(settings.samples_dir, settings.sample_extensions)
    ]
