"""Mix job coordinator — single-flight state machine around the pipeline.

    idle/completed/failed ──trigger──▶ processing ──▶ completed | failed

A trigger while processing is rejected, never queued. Pipeline failures are
recorded on the job with a degraded track listing (gain/pan unset) instead
of propagating; the process keeps serving.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path

import structlog

from aimix.brain.backends import MixBackend, MixParameters
from aimix.config import Settings
from aimix.console.store import JobStatus, MixJob, MixParameterStore, Track
from aimix.ear.loader import list_samples
from aimix.ear.vocabulary import same_genre, slot_label
from aimix.errors import ConcurrencyConflict, InputError, MixError

logger = structlog.get_logger()

NO_SAMPLES_MESSAGE = "No audio samples found"

Listener = Callable[[MixJob], Awaitable[None]]


def build_tracks(paths: list[Path], params: MixParameters | None = None) -> list[Track]:
    """Tracks for ``paths`` in slot order; gain/pan unset when ``params`` is None."""
    tracks = []
    for i, path in enumerate(paths):
        gain = params.gains[i] if params and i < len(params.gains) else None
        pan = params.pans[i] if params and i < len(params.pans) else None
        tracks.append(
            Track(
                id=str(i + 1),
                name=path.name,
                instrument=slot_label(i),
                source_path=str(path),
                gain=gain,
                pan=pan,
            )
        )
    return tracks


class MixJobCoordinator:
    """Owns the live job: triggering, running, and recording its outcome."""

    def __init__(
        self,
        backend: MixBackend,
        settings: Settings,
        store: MixParameterStore | None = None,
    ) -> None:
        self.backend = backend
        self.settings = settings
        self.store = store or MixParameterStore()
        self._task: asyncio.Task[MixJob] | None = None
        self._listeners: list[Listener] = []

    # ── Samples ──────────────────────────────────────────

    def sample_paths(self) -> list[Path]:
        """Sample files eligible for the next job, capped at the batch size."""
        paths = list_samples(self.settings.samples_dir, self.settings.sample_extensions)
        return paths[: self.settings.max_tracks]

    # ── Listeners ────────────────────────────────────────

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _notify(self, job: MixJob) -> None:
        for listener in list(self._listeners):
            try:
                await listener(job)
            except Exception as e:
                logger.warning("mix.listener.failed", error=str(e))

    # ── Transitions ──────────────────────────────────────

    def trigger(self, genre: str | None) -> asyncio.Task[MixJob]:
        """Start a job for ``genre`` in the background.

        Must be called from a running event loop.

        Raises:
            InputError: if ``genre`` is missing or blank.
            ConcurrencyConflict: if a job is already processing.
        """
        loop = asyncio.get_running_loop()
        genre = (genre or "").strip()
        if not genre:
            msg = "Genre is required"
            raise InputError(msg)

        if not self.store.try_begin(genre):
            current = self.store.snapshot().genre
            msg = f"A mix job for '{current}' is already processing"
            raise ConcurrencyConflict(msg)

        logger.info("mix.job.started", genre=genre, backend=self.backend.name)
        self._task = loop.create_task(self._run(genre))
        return self._task

    async def _run(self, genre: str) -> MixJob:
        await self._notify(self.store.snapshot())
        paths: list[Path] = []
        try:
            paths = self.sample_paths()
            if not paths:
                raise InputError(NO_SAMPLES_MESSAGE)

            params = await asyncio.wait_for(
                asyncio.to_thread(self.backend.predict, genre, paths),
                timeout=self.settings.job_timeout_seconds,
            )
        except MixError as e:
            job = self._fail(genre, str(e), e.code, paths)
        except TimeoutError:
            msg = f"Mix job timed out after {self.settings.job_timeout_seconds:.0f}s"
            job = self._fail(genre, msg, "timeout", paths)
        except Exception as e:
            logger.exception("mix.job.crashed", genre=genre)
            job = self._fail(genre, f"Unexpected error: {e}", "internal", paths)
        else:
            job = self.store.complete(build_tracks(paths, params), params.source)
            logger.info(
                "mix.job.completed",
                genre=genre,
                source=params.source,
                n_tracks=len(job.tracks),
            )

        await self._notify(job)
        return job

    def _fail(self, genre: str, error: str, code: str, paths: list[Path]) -> MixJob:
        logger.error("mix.job.failed", genre=genre, error=error, code=code)
        return self.store.fail(error, code, build_tracks(paths))

    # ── Queries ──────────────────────────────────────────

    def status(self, genre: str | None = None) -> MixJob:
        """Current job snapshot.

        A genre naming something other than the last one triggers a new job,
        unless one is already processing. While idle, tracks list the available samples.
        """
        genre = (genre or "").strip()
        job = self.store.snapshot()
        if genre and not job.is_processing and not same_genre(genre, self.store.last_genre):
            try:
                self.trigger(genre)
            except ConcurrencyConflict:
                pass  # another poll got there first
            job = self.store.snapshot()

        if job.status is JobStatus.IDLE and not job.tracks:
            return MixJob(tracks=tuple(build_tracks(self.sample_paths())))
        return job

    def last_parameters(self) -> MixParameters | None:
        """Ordered (gain, pan) of the last completed job, for downstream apply."""
        job = self.store.snapshot()
        if job.status is not JobStatus.COMPLETED:
            return None
        return MixParameters(
            gains=[t.gain for t in job.tracks if t.gain is not None],
            pans=[t.pan for t in job.tracks if t.pan is not None],
            source=job.source or "",
        )

    async def wait(self) -> MixJob:
        """Wait for the in-flight job, if any, and return the latest snapshot."""
        if self._task is not None and not self._task.done():
            return await asyncio.shield(self._task)
        return self.store.snapshot()
