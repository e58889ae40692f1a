"""CONSOLE — mix job coordination layer.

- Store: the live job snapshot and its results
- Coordinator: single-flight trigger / run / record state machine
"""

from aimix.console.coordinator import MixJobCoordinator, build_tracks
from aimix.console.store import JobStatus, MixJob, MixParameterStore, Track

__all__ = [
    "MixJobCoordinator",
    "build_tracks",
    "JobStatus",
    "MixJob",
    "MixParameterStore",
    "Track",
]
