"""Mix parameter store: the live job and its latest results.

Single writer (the running job), many readers (status polls). Readers only
ever get frozen snapshots; every write happens under one lock so the
processing flag is a real check-and-set.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from aimix.brain.denorm import parameter_units


class JobStatus(StrEnum):
    """Lifecycle of the live mix job."""

    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Track:
    """One stem slot in the mix.

    ``gain`` and ``pan`` units depend on the job's ``source``: normalized gain
    and [-1, 1] pan from the model, dB and a -100..100 spread from the
    fallback tables. Serialized job snapshots carry them under ``units``.
    """

    id: str
    name: str
    instrument: str
    source_path: str
    gain: float | None = None
    pan: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "instrument": self.instrument,
            "filePath": self.source_path,
            "gain": self.gain,
            "pan": self.pan,
        }


@dataclass(frozen=True)
class MixJob:
    """Immutable snapshot of the live job."""

    status: JobStatus = JobStatus.IDLE
    genre: str = ""
    tracks: tuple[Track, ...] = ()
    error: str | None = None
    error_code: str | None = None
    source: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def is_processing(self) -> bool:
        return self.status is JobStatus.PROCESSING

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "isProcessing": self.is_processing,
            "genre": self.genre,
            "tracks": [t.to_dict() for t in self.tracks],
            "error": self.error,
            "errorCode": self.error_code,
            "source": self.source,
            "units": parameter_units(self.source),
            "startedAt": self.started_at.isoformat() if self.started_at else None,
            "finishedAt": self.finished_at.isoformat() if self.finished_at else None,
        }


@dataclass
class MixParameterStore:
    """Holds the one live MixJob plus the genre of the last finished job."""

    _job: MixJob = field(default_factory=MixJob)
    _last_genre: str = ""
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def snapshot(self) -> MixJob:
        with self._lock:
            return self._job

    @property
    def last_genre(self) -> str:
        with self._lock:
            return self._last_genre

    def try_begin(self, genre: str) -> bool:
        """Atomically move to PROCESSING; False if a job is already running."""
        with self._lock:
            if self._job.is_processing:
                return False
            self._job = replace(
                self._job,
                status=JobStatus.PROCESSING,
                genre=genre,
                error=None,
                error_code=None,
                started_at=datetime.now(UTC),
                finished_at=None,
            )
            return True

    def complete(self, tracks: list[Track], source: str) -> MixJob:
        with self._lock:
            self._job = replace(
                self._job,
                status=JobStatus.COMPLETED,
                tracks=tuple(tracks),
                error=None,
                error_code=None,
                source=source,
                finished_at=datetime.now(UTC),
            )
            self._last_genre = self._job.genre
            return self._job

    def fail(self, error: str, code: str, tracks: list[Track]) -> MixJob:
        with self._lock:
            self._job = replace(
                self._job,
                status=JobStatus.FAILED,
                tracks=tuple(tracks),
                error=error,
                error_code=code,
                source=None,
                finished_at=datetime.now(UTC),
            )
            self._last_genre = self._job.genre
            return self._job
