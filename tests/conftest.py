"""Shared fixtures: tiny WAV stems and fake backends."""

from __future__ import annotations

import math
import struct
import threading
import wave
from pathlib import Path

import pytest

from aimix.brain.backends import MixBackend, MixParameters


def write_wav(
    path: Path,
    n_samples: int = 256,
    channels: int = 2,
    sr: int = 44100,
    freq: float = 440.0,
) -> Path:
    """Write a 16-bit sine WAV with the stdlib ``wave`` module."""
    with wave.open(str(path), "w") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(2)
        wf.setframerate(sr)
        frames = bytearray()
        for i in range(n_samples):
            val = int(16000 * math.sin(2 * math.pi * freq * i / sr))
            frames += struct.pack("<" + "h" * channels, *([val] * channels))
        wf.writeframes(bytes(frames))
    return path


@pytest.fixture
def make_samples(tmp_path: Path):
    """Factory: ``make_samples(n)`` writes n stems and returns their directory."""

    def _make(n: int, names: list[str] | None = None) -> Path:
        sample_dir = tmp_path / "downloads"
        sample_dir.mkdir(exist_ok=True)
        names = names or [f"stem{i:02d}.wav" for i in range(n)]
        for name in names[:n]:
            write_wav(sample_dir / name)
        return sample_dir

    return _make


class StaticBackend(MixBackend):
    """Returns ramp values for every path and counts its calls."""

    name = "static"

    def __init__(self) -> None:
        self.calls = 0

    def predict(self, genre: str, sample_paths: list[Path]) -> MixParameters:
        self.calls += 1
        n = len(sample_paths)
        return MixParameters(
            gains=[round(i / 10, 2) for i in range(n)],
            pans=[0.0] * n,
            source=self.name,
        )


class GatedBackend(StaticBackend):
    """Blocks inside ``predict`` until the gate is opened."""

    name = "gated"

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.gate = threading.Event()

    def predict(self, genre: str, sample_paths: list[Path]) -> MixParameters:
        self.entered.set()
        self.gate.wait(timeout=10)
        return super().predict(genre, sample_paths)


class FailingBackend(MixBackend):
    """Raises the given exception from ``predict``."""

    name = "failing"

    def __init__(self, error: Exception) -> None:
        self.error = error

    def predict(self, genre: str, sample_paths: list[Path]) -> MixParameters:
        raise self.error
