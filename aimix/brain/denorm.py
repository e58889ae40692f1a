"""Map raw model outputs (all in [0, 1]) to engineering units.

The model was trained on gains in -48..+12 dB but the deployed fader range is
-48..+6 dB. Gains are first mapped back to the training range and then
re-expressed on the deployed scale, so anything above +6 dB hits the ceiling.
"""

from __future__ import annotations

TRAIN_MIN_DB = -48.0
TRAIN_MAX_DB = 12.0
TARGET_MIN_DB = -48.0
TARGET_MAX_DB = 6.0


def denorm_gain(v: float) -> float:
    """Raw gain output → normalized gain on the deployed -48..+6 dB scale."""
    db_old = TRAIN_MIN_DB + v * (TRAIN_MAX_DB - TRAIN_MIN_DB)
    g = (db_old - TARGET_MIN_DB) / (TARGET_MAX_DB - TARGET_MIN_DB)
    return min(max(g, 0.0), 1.0)


def denorm_pan(v: float) -> float:
    """Raw pan output in [0, 1] → stereo position in [-1, 1]."""
    return v * 2.0 - 1.0


def gain_to_db(g: float) -> float:
    """Normalized deployed gain → dB."""
    return TARGET_MIN_DB + g * (TARGET_MAX_DB - TARGET_MIN_DB)


# Units of the per-track values, keyed by the backend that produced them
PARAMETER_UNITS: dict[str, dict[str, str]] = {
    "model": {"gain": "normalized", "pan": "bipolar"},
    "fallback": {"gain": "dB", "pan": "percent"},
}


def parameter_units(source: str | None) -> dict[str, str] | None:
    """Gain/pan units for a result ``source``; None when there is no result.

    ``normalized`` is [0, 1] on the -48..+6 dB scale, ``bipolar`` is [-1, 1],
    ``percent`` is -100 (hard left) .. 100 (hard right).
    """
    if not source:
        return None
    return PARAMETER_UNITS.get(source)
