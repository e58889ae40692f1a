"""Closed label vocabularies shared with the trained model.

Codes are fixed by the model's embedding tables and must never be reordered.
Both lookups are total: unrecognized input falls back to a reserved code.
"""

from __future__ import annotations

from pathlib import PurePath

# ── Genres ───────────────────────────────────────────────

GENRES: tuple[str, ...] = (
    "Classical",
    "Electronic/Fusion",
    "Jazz",
    "Musical Theatre",
    "Pop",
    "Rap",
    "Rock",
    "Singer/Songwriter",
    "World/Folk",
    "Unknown",
)

UNKNOWN_GENRE = "Unknown"

_GENRE_CODES: dict[str, int] = {name.lower(): code for code, name in enumerate(GENRES)}


def canonical_genre(genre: str | None) -> str:
    """Return the vocabulary spelling of ``genre``, or ``"Unknown"``."""
    if not genre:
        return UNKNOWN_GENRE
    code = _GENRE_CODES.get(genre.strip().lower())
    return UNKNOWN_GENRE if code is None else GENRES[code]


def same_genre(a: str | None, b: str | None) -> bool:
    """True if two labels name the same genre.

    Vocabulary genres compare by their canonical spelling. Other labels compare
    trimmed and lowercased, so distinct unknown labels stay distinct.
    """
    return _genre_key(a) == _genre_key(b)


def _genre_key(genre: str | None) -> str:
    label = (genre or "").strip().lower()
    return GENRES[_GENRE_CODES[label]] if label in _GENRE_CODES else label


def encode_genre(genre: str | None) -> int:
    """Map a genre label to its model code (case-insensitive)."""
    if not genre:
        return _GENRE_CODES["unknown"]
    return _GENRE_CODES.get(genre.strip().lower(), _GENRE_CODES["unknown"])


# ── Instruments ──────────────────────────────────────────

INSTRUMENT_CODES: dict[str, int] = {
    "aux_perc": 0,
    "bass": 1,
    "brass": 2,
    "drum": 3,
    "fx": 4,
    "guitar": 5,
    "keys": 6,
    "kick": 7,
    "misc": 8,
    "organ": 9,
    "percussion": 10,
    "room": 11,
    "silence": 12,
    "snare": 13,
    "string": 14,
    "synth": 15,
    "vocal": 16,
    "woodwind": 17,
}

MISC_INSTRUMENT = "misc"

# Filename prefixes that stem exporters commonly use for the same category.
# Prefixes stop at the first underscore, so "aux_perc_01.wav" arrives as "aux".
_INSTRUMENT_ALIASES: dict[str, str] = {
    "aux": "aux_perc",
    "vocals": "vocal",
    "vox": "vocal",
    "drums": "drum",
    "strings": "string",
    "guitars": "guitar",
    "synths": "synth",
    "piano": "keys",
    "perc": "percussion",
}

# Display labels handed out by slot position
SLOT_LABELS: tuple[str, ...] = (
    "Vocal",
    "Guitar",
    "Bass",
    "Drums",
    "Piano",
    "Strings",
    "Synth",
    "Percussion",
)

OTHER_LABEL = "Other"


def filename_prefix(name: str) -> str:
    """Lowercased file stem up to the first underscore.

    ``"Vocal_Lead.wav"`` → ``"vocal"``, ``"kick.wav"`` → ``"kick"``.
    """
    stem = PurePath(name).stem
    return stem.split("_", 1)[0].strip().lower()


def instrument_key(name: str) -> str:
    """Resolve a file name (or bare label) to an instrument vocabulary key."""
    prefix = filename_prefix(name)
    prefix = _INSTRUMENT_ALIASES.get(prefix, prefix)
    return prefix if prefix in INSTRUMENT_CODES else MISC_INSTRUMENT


def encode_instrument(name: str) -> int:
    """Map a file name to its instrument model code."""
    return INSTRUMENT_CODES[instrument_key(name)]


def slot_label(index: int) -> str:
    """Display label for the track in slot ``index``."""
    if 0 <= index < len(SLOT_LABELS):
        return SLOT_LABELS[index]
    return OTHER_LABEL
