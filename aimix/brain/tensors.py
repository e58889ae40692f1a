"""Feature tensor builder — assembles the model's four named inputs.

Shapes (T = track count, L = window length):
    genre        int64   [1, 1]
    tracks       float32 [1, T, 2, L]
    instruments  int64   [1, T]
    valid_mask   bool    [1, T]

The validity mask is always all-true; it is reserved for partially filled
batches and carries no information today.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from aimix.ear.loader import N_CHANNELS, WINDOW_LENGTH, AudioBuffer
from aimix.ear.vocabulary import encode_genre, encode_instrument
from aimix.errors import ShapeError

MAX_TRACKS = 8


@dataclass(frozen=True)
class FeatureTensors:
    """Validated model inputs for a single batch."""

    genre: np.ndarray
    tracks: np.ndarray
    instruments: np.ndarray
    valid_mask: np.ndarray

    @property
    def n_tracks(self) -> int:
        return int(self.tracks.shape[1])

    def as_feeds(self) -> dict[str, np.ndarray]:
        """Named inputs in the layout the ONNX session expects."""
        return {
            "genre": self.genre,
            "tracks": self.tracks,
            "instruments": self.instruments,
            "valid_mask": self.valid_mask,
        }


def build_feature_tensors(
    buffers: list[AudioBuffer],
    genre: str,
    instrument_names: list[str],
    max_tracks: int = MAX_TRACKS,
    length: int = WINDOW_LENGTH,
) -> FeatureTensors:
    """Build model inputs from decoded stems.

    Args:
        buffers: Decoded stems, in batch order.
        genre: Genre label; unknown labels map to the Unknown code.
        instrument_names: One file name (or label) per buffer, used for the
            instrument code lookup.
        max_tracks: Largest batch the model accepts.
        length: Samples per channel every buffer must hold.

    Raises:
        ShapeError: on an empty or oversized batch, a name/buffer count
            mismatch, or a buffer that is not ``(2, length)``.
    """
    n_tracks = len(buffers)
    if n_tracks == 0:
        msg = "Cannot build tensors for an empty batch"
        raise ShapeError(msg)
    if n_tracks > max_tracks:
        msg = f"Batch of {n_tracks} tracks exceeds the limit of {max_tracks}"
        raise ShapeError(msg)
    if len(instrument_names) != n_tracks:
        msg = f"Got {len(instrument_names)} instrument names for {n_tracks} tracks"
        raise ShapeError(msg)

    for buf in buffers:
        if buf.samples.shape != (N_CHANNELS, length):
            msg = (
                f"Buffer {buf.path.name} has shape {tuple(buf.samples.shape)}, "
                f"expected {(N_CHANNELS, length)}"
            )
            raise ShapeError(msg)

    tracks = np.stack([b.samples for b in buffers]).astype(np.float32, copy=False)
    tracks = tracks[np.newaxis, ...]

    return FeatureTensors(
        genre=np.array([[encode_genre(genre)]], dtype=np.int64),
        tracks=tracks,
        instruments=np.array(
            [[encode_instrument(name) for name in instrument_names]], dtype=np.int64
        ),
        valid_mask=np.ones((1, n_tracks), dtype=np.bool_),
    )
