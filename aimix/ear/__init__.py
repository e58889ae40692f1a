"""EAR — sample ingestion layer.

- Loader: decode stems into fixed-length stereo windows
- Vocabulary: genre and instrument label codes shared with the model
"""

from aimix.ear.loader import (
    WINDOW_LENGTH,
    AudioBuffer,
    list_samples,
    load_sample,
    load_samples,
)
from aimix.ear.vocabulary import (
    GENRES,
    INSTRUMENT_CODES,
    SLOT_LABELS,
    canonical_genre,
    encode_genre,
    encode_instrument,
    instrument_key,
    same_genre,
    slot_label,
)

__all__ = [
    "WINDOW_LENGTH",
    "AudioBuffer",
    "list_samples",
    "load_sample",
    "load_samples",
    "GENRES",
    "INSTRUMENT_CODES",
    "SLOT_LABELS",
    "canonical_genre",
    "encode_genre",
    "encode_instrument",
    "instrument_key",
    "same_genre",
    "slot_label",
]
