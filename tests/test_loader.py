"""Tests for the sample loader."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from aimix.ear.loader import fit_to_window, list_samples, load_sample, load_samples
from aimix.errors import SampleIOError

from conftest import write_wav


# ── Listing ──────────────────────────────────────────────


def test_list_samples_sorted_and_filtered(tmp_path: Path) -> None:
    for name in ("b_take.wav", "a_take.WAV", "c_take.wav"):
        write_wav(tmp_path / name)
    (tmp_path / "notes.txt").write_text("not audio")
    (tmp_path / "sub.wav").mkdir()

    names = [p.name for p in list_samples(tmp_path)]
    assert names == ["a_take.WAV", "b_take.wav", "c_take.wav"]


def test_list_samples_missing_dir(tmp_path: Path) -> None:
    assert list_samples(tmp_path / "nope") == []


def test_list_samples_custom_extensions(tmp_path: Path) -> None:
    write_wav(tmp_path / "one.wav")
    (tmp_path / "two.flac").write_bytes(b"")
    names = [p.name for p in list_samples(tmp_path, [".flac"])]
    assert names == ["two.flac"]


# ── Windowing ────────────────────────────────────────────


def test_fit_to_window_pads_short_audio() -> None:
    data = np.ones((10, 2), dtype=np.float32)
    out = fit_to_window(data, length=16)
    assert out.shape == (2, 16)
    assert out.dtype == np.float32
    assert np.all(out[:, :10] == 1.0)
    assert np.all(out[:, 10:] == 0.0)


def test_fit_to_window_truncates_long_audio() -> None:
    data = np.arange(40, dtype=np.float32).reshape(20, 2)
    out = fit_to_window(data, length=5)
    assert out.shape == (2, 5)
    assert list(out[0]) == [0, 2, 4, 6, 8]
    assert list(out[1]) == [1, 3, 5, 7, 9]


def test_fit_to_window_duplicates_mono() -> None:
    data = np.linspace(-1, 1, 8, dtype=np.float32)
    out = fit_to_window(data, length=8)
    assert np.array_equal(out[0], out[1])


def test_fit_to_window_drops_extra_channels() -> None:
    data = np.stack([np.full(4, c, dtype=np.float32) for c in range(4)], axis=1)
    out = fit_to_window(data, length=4)
    assert out.shape == (2, 4)
    assert list(out[:, 0]) == [0.0, 1.0]


# ── Decoding ─────────────────────────────────────────────


def test_load_sample_mono_wav(tmp_path: Path) -> None:
    path = write_wav(tmp_path / "vocal.wav", n_samples=100, channels=1, sr=22050)
    buf = load_sample(path, length=256)

    assert buf.samples.shape == (2, 256)
    assert buf.n_channels == 2
    assert buf.length == 256
    assert buf.sample_rate == 22050
    assert np.array_equal(buf.samples[0], buf.samples[1])
    assert np.any(buf.samples[:, :100] != 0.0)
    assert np.all(buf.samples[:, 100:] == 0.0)


def test_load_sample_keeps_source_rate(tmp_path: Path) -> None:
    """No resampling: the window is filled with raw source samples."""
    path = write_wav(tmp_path / "bass.wav", n_samples=300, sr=8000)
    buf = load_sample(path, length=200)
    assert buf.sample_rate == 8000
    assert buf.samples.shape == (2, 200)


def test_load_sample_undecodable(tmp_path: Path) -> None:
    bad = tmp_path / "broken.wav"
    bad.write_bytes(b"RIFF....not really a wave file")
    with pytest.raises(SampleIOError, match="broken.wav"):
        load_sample(bad)


def test_load_samples_is_all_or_nothing(tmp_path: Path) -> None:
    good = write_wav(tmp_path / "a.wav")
    bad = tmp_path / "b.wav"
    bad.write_bytes(b"garbage")
    with pytest.raises(OSError):
        load_samples([good, bad], length=64)


def test_load_samples_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SampleIOError):
        load_samples([tmp_path / "gone.wav"], length=64)


def test_load_samples_mixed_rates_accepted(tmp_path: Path) -> None:
    a = write_wav(tmp_path / "a.wav", sr=44100)
    b = write_wav(tmp_path / "b.wav", sr=48000)
    buffers = load_samples([a, b], length=64)
    assert [buf.sample_rate for buf in buffers] == [44100, 48000]
    assert all(buf.samples.shape == (2, 64) for buf in buffers)
