"""Tests for the feature tensor builder."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from aimix.brain.tensors import build_feature_tensors
from aimix.ear.loader import AudioBuffer
from aimix.errors import ShapeError

LENGTH = 32


def _buffers(n: int, length: int = LENGTH) -> list[AudioBuffer]:
    return [
        AudioBuffer(
            path=Path(f"stem{i}.wav"),
            samples=np.full((2, length), i, dtype=np.float32),
            sample_rate=44100,
        )
        for i in range(n)
    ]


# ── Shapes ───────────────────────────────────────────────


def test_tensor_shapes_and_dtypes() -> None:
    names = ["Vocal_Lead.wav", "Guitar_Rhythm.wav", "take.wav"]
    t = build_feature_tensors(_buffers(3), "Rock", names, length=LENGTH)

    assert t.genre.shape == (1, 1)
    assert t.genre.dtype == np.int64
    assert t.tracks.shape == (1, 3, 2, LENGTH)
    assert t.tracks.dtype == np.float32
    assert t.instruments.shape == (1, 3)
    assert t.instruments.dtype == np.int64
    assert t.valid_mask.shape == (1, 3)
    assert t.valid_mask.dtype == np.bool_
    assert t.n_tracks == 3


def test_tensor_values() -> None:
    names = ["Vocal_Lead.wav", "Guitar_Rhythm.wav", "take.wav"]
    t = build_feature_tensors(_buffers(3), "Rock", names, length=LENGTH)

    assert int(t.genre[0, 0]) == 6
    assert t.instruments.tolist() == [[16, 5, 8]]
    assert t.valid_mask.all()
    # Tracks keep input order
    assert [float(t.tracks[0, i, 0, 0]) for i in range(3)] == [0.0, 1.0, 2.0]


def test_unknown_genre_code() -> None:
    t = build_feature_tensors(_buffers(1), "Reggae", ["x.wav"], length=LENGTH)
    assert int(t.genre[0, 0]) == 9


def test_as_feeds_names() -> None:
    t = build_feature_tensors(_buffers(2), "Pop", ["a.wav", "b.wav"], length=LENGTH)
    feeds = t.as_feeds()
    assert list(feeds) == ["genre", "tracks", "instruments", "valid_mask"]
    assert feeds["tracks"] is t.tracks


def test_full_batch_of_eight() -> None:
    names = [f"s{i}.wav" for i in range(8)]
    t = build_feature_tensors(_buffers(8), "Jazz", names, length=LENGTH)
    assert t.tracks.shape == (1, 8, 2, LENGTH)


# ── Validation ───────────────────────────────────────────


def test_empty_batch_rejected() -> None:
    with pytest.raises(ShapeError, match="empty"):
        build_feature_tensors([], "Pop", [], length=LENGTH)


def test_oversized_batch_rejected() -> None:
    names = [f"s{i}.wav" for i in range(9)]
    with pytest.raises(ShapeError):
        build_feature_tensors(_buffers(9), "Pop", names, length=LENGTH)


def test_name_count_mismatch_rejected() -> None:
    with pytest.raises(ShapeError):
        build_feature_tensors(_buffers(2), "Pop", ["only_one.wav"], length=LENGTH)


def test_wrong_buffer_length_rejected() -> None:
    buffers = _buffers(1) + _buffers(1, length=LENGTH + 1)
    with pytest.raises(ShapeError, match="expected"):
        build_feature_tensors(buffers, "Pop", ["a.wav", "b.wav"], length=LENGTH)


def test_wrong_channel_count_rejected() -> None:
    mono = AudioBuffer(Path("m.wav"), np.zeros((1, LENGTH), dtype=np.float32), 44100)
    with pytest.raises(ShapeError):
        build_feature_tensors([mono], "Pop", ["m.wav"], length=LENGTH)
