"""AIMIX error taxonomy.

Every pipeline failure carries a short ``code`` that is recorded on the job
snapshot and used by the API layer to pick a status code.
"""

from __future__ import annotations


class MixError(Exception):
    """Base class for all mix pipeline errors."""

    code = "internal"


class InputError(MixError):
    """Missing/blank genre or no eligible sample files."""

    code = "input"


class SampleIOError(MixError, OSError):
    """A sample file could not be read or decoded."""

    code = "io"


class ShapeError(MixError):
    """Tensor batch does not match the model's shape contract."""

    code = "shape"


class ModelLoadError(MixError):
    """Model artifact is absent or malformed."""

    code = "model_load"


class ModelExecutionError(MixError):
    """The forward pass failed or returned too few values."""

    code = "model_execution"


class ConcurrencyConflict(MixError):
    """A job is already processing."""

    code = "conflict"
