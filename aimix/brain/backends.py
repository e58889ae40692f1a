"""Mix parameter backends — model inference or deterministic fallback.

One backend is selected at startup by probing for the ONNX runtime and the
model artifact. When either is missing, every job uses the fallback tables
instead; that is a capability decision, not an error.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from aimix.brain.denorm import denorm_gain, denorm_pan, parameter_units
from aimix.brain.engine import OnnxInferenceEngine, probe_model_runtime
from aimix.brain.tensors import MAX_TRACKS, build_feature_tensors
from aimix.config import Settings
from aimix.ear.loader import WINDOW_LENGTH, load_samples
from aimix.ear.vocabulary import canonical_genre

logger = structlog.get_logger()


@dataclass
class MixParameters:
    """Per-track gain and pan, aligned with the input sample order."""

    gains: list[float] = field(default_factory=list)
    pans: list[float] = field(default_factory=list)
    source: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "gains": self.gains,
            "pans": self.pans,
            "source": self.source,
            "units": parameter_units(self.source),
        }


class MixBackend(ABC):
    """Turns a genre and an ordered list of stems into mix parameters."""

    name: str = ""

    @abstractmethod
    def predict(self, genre: str, sample_paths: list[Path]) -> MixParameters:
        """Return one (gain, pan) per sample path."""

    def describe(self) -> dict[str, Any]:
        return {"backend": self.name}


# ── Model path ───────────────────────────────────────────


class ModelBackend(MixBackend):
    """Decode stems, run the ONNX model, denormalize its outputs."""

    name = "model"

    def __init__(
        self,
        engine: OnnxInferenceEngine,
        max_tracks: int = MAX_TRACKS,
        window_length: int = WINDOW_LENGTH,
    ) -> None:
        self.engine = engine
        self.max_tracks = max_tracks
        self.window_length = window_length

    def predict(self, genre: str, sample_paths: list[Path]) -> MixParameters:
        buffers = load_samples(sample_paths, self.window_length)
        tensors = build_feature_tensors(
            buffers,
            genre,
            [p.name for p in sample_paths],
            max_tracks=self.max_tracks,
            length=self.window_length,
        )
        raw = self.engine.infer(
            tensors.genre, tensors.tracks, tensors.instruments, tensors.valid_mask
        )

        n = tensors.n_tracks
        raw_gains = raw[:MAX_TRACKS][:n]
        raw_pans = raw[MAX_TRACKS : 2 * MAX_TRACKS][:n]
        return MixParameters(
            gains=[round(denorm_gain(float(v)), 4) for v in raw_gains],
            pans=[round(denorm_pan(float(v)), 4) for v in raw_pans],
            source=self.name,
        )

    def describe(self) -> dict[str, Any]:
        return {"backend": self.name, "model": self.engine.describe()}


# ── Fallback path ────────────────────────────────────────

# Gain in dB per slot, Vocal..Percussion
FALLBACK_GAINS: dict[str, list[float]] = {
    "Classical": [-6, -4, -5, -8, -2, -1, -9, -7],
    "Electronic/Fusion": [-4, -6, -1, -1, -5, -7, -2, -3],
    "Jazz": [-3, -2, -2, -4, -1, -5, -6, -5],
    "Musical Theatre": [-1, -5, -4, -4, -3, -2, -6, -5],
    "Pop": [-2, -3, -1, -2, -4, -5, -3, -4],
    "Rap": [-1, -6, 0, -1, -5, -7, -3, -3],
    "Rock": [-3, -1, -2, -1, -5, -6, -4, -4],
    "Singer/Songwriter": [-1, -2, -4, -5, -3, -4, -7, -6],
    "World/Folk": [-2, -2, -3, -4, -4, -3, -6, -2],
}
DEFAULT_FALLBACK_GENRE = "Pop"

# L/R spread per slot, -100 (hard left) .. 100 (hard right)
FALLBACK_PANS: list[float] = [-30, 30, 0, 0, -15, 15, -45, 45]


class FallbackBackend(MixBackend):
    """Deterministic per-genre tables; never touches audio or the model."""

    name = "fallback"

    def predict(self, genre: str, sample_paths: list[Path]) -> MixParameters:
        table = FALLBACK_GAINS.get(canonical_genre(genre), FALLBACK_GAINS[DEFAULT_FALLBACK_GENRE])
        n = min(len(sample_paths), MAX_TRACKS)
        return MixParameters(
            gains=[float(g) for g in table[:n]],
            pans=[float(p) for p in FALLBACK_PANS[:n]],
            source=self.name,
        )


def select_backend(settings: Settings) -> MixBackend:
    """Pick the backend once, at startup."""
    if probe_model_runtime(settings.model_path):
        logger.info("backend.model_selected", model_path=str(settings.model_path))
        engine = OnnxInferenceEngine(settings.model_path, settings.onnx_providers)
        return ModelBackend(
            engine,
            max_tracks=settings.max_tracks,
            window_length=settings.window_length,
        )

    logger.info("backend.fallback_selected", model_path=str(settings.model_path))
    return FallbackBackend()
