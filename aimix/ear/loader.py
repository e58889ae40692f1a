"""Sample loader — decodes stems into fixed-length stereo buffers.

The model consumes a fixed window of samples per channel. Every stem is
zero-padded or truncated to that window; mono stems are duplicated into
both channels. No resampling is done, so the window covers a different
duration for sources recorded at different rates.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import soundfile as sf
import structlog

from aimix.errors import SampleIOError

logger = structlog.get_logger()

WINDOW_LENGTH = 485052
N_CHANNELS = 2


@dataclass
class AudioBuffer:
    """One decoded stem, shaped ``(2, length)`` float32."""

    path: Path
    samples: np.ndarray
    sample_rate: int

    @property
    def n_channels(self) -> int:
        return int(self.samples.shape[0])

    @property
    def length(self) -> int:
        return int(self.samples.shape[1])


def list_samples(
    samples_dir: Path,
    extensions: list[str] | tuple[str, ...] = (".wav",),
) -> list[Path]:
    """List supported sample files, sorted by name.

    A missing directory yields an empty list.
    """
    if not samples_dir.is_dir():
        return []
    allowed = {ext.lower() for ext in extensions}
    return sorted(
        (p for p in samples_dir.iterdir() if p.is_file() and p.suffix.lower() in allowed),
        key=lambda p: p.name,
    )


def fit_to_window(data: np.ndarray, length: int = WINDOW_LENGTH) -> np.ndarray:
    """Fit ``(frames, channels)`` audio into a ``(2, length)`` stereo window."""
    if data.ndim == 1:
        data = data[:, np.newaxis]
    channels = data.T
    if channels.shape[0] == 1:
        channels = np.repeat(channels, N_CHANNELS, axis=0)
    channels = channels[:N_CHANNELS]

    out = np.zeros((N_CHANNELS, length), dtype=np.float32)
    n = min(length, channels.shape[1])
    out[:, :n] = channels[:, :n]
    return out


def load_sample(path: Path, length: int = WINDOW_LENGTH) -> AudioBuffer:
    """Decode a single sample file."""
    try:
        data, sr = sf.read(str(path), dtype="float32", always_2d=True)
    except (RuntimeError, OSError, ValueError) as e:
        msg = f"Cannot decode sample {path.name}: {e}"
        raise SampleIOError(msg) from e

    if data.shape[1] == 0:
        msg = f"Sample {path.name} has no audio channels"
        raise SampleIOError(msg)

    return AudioBuffer(path=path, samples=fit_to_window(data, length), sample_rate=int(sr))


def load_samples(paths: list[Path], length: int = WINDOW_LENGTH) -> list[AudioBuffer]:
    """Decode a batch of samples, all or nothing.

    Raises:
        SampleIOError: if any file cannot be read; no partial batch is returned.
    """
    buffers = [load_sample(p, length) for p in paths]

    rates = sorted({b.sample_rate for b in buffers})
    if len(rates) > 1:
        logger.warning(
            "loader.mixed_sample_rates",
            sample_rates=rates,
            files=[b.path.name for b in buffers],
        )
    return buffers
