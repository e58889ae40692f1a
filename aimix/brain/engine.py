"""ONNX inference engine for the mix parameter model.

The session is created lazily on first use and shared for the life of the
process. A failed load is remembered, so every later call fails fast with
the same ModelLoadError instead of re-reading the artifact.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

import numpy as np
import structlog

from aimix.errors import ModelExecutionError, ModelLoadError

logger = structlog.get_logger()

N_OUTPUTS = 16  # gain0..gain7, pan0..pan7


# ── Availability checks ─────────────────────────────────


def _check_onnxruntime_available() -> bool:
    """Check if onnxruntime can be imported."""
    try:
        import onnxruntime  # noqa: F401

        return True
    except ImportError:
        return False


def probe_model_runtime(model_path: Path) -> bool:
    """True when both the runtime and the model artifact are present."""
    return _check_onnxruntime_available() and model_path.is_file()


# ── Engine ───────────────────────────────────────────────


class OnnxInferenceEngine:
    """Owns one ONNX Runtime session and runs forward passes on it."""

    def __init__(
        self,
        model_path: Path,
        providers: list[str] | None = None,
    ) -> None:
        self.model_path = model_path
        self.providers = providers or ["CPUExecutionProvider"]
        self._session: Any | None = None
        self._load_error: ModelLoadError | None = None
        self._lock = threading.Lock()

    def _create_session(self) -> Any:
        import onnxruntime as ort

        return ort.InferenceSession(str(self.model_path), providers=self.providers)

    def _get_session(self) -> Any:
        # Caller must hold self._lock
        if self._session is not None:
            return self._session
        if self._load_error is not None:
            raise self._load_error

        if not self.model_path.is_file():
            self._load_error = ModelLoadError(f"Model artifact not found: {self.model_path}")
            logger.error("engine.model_load_failed", path=str(self.model_path), error="missing")
            raise self._load_error

        try:
            self._session = self._create_session()
        except Exception as e:
            self._load_error = ModelLoadError(f"Cannot load model {self.model_path.name}: {e}")
            logger.error("engine.model_load_failed", path=str(self.model_path), error=str(e))
            raise self._load_error from e

        logger.info(
            "engine.model_loaded",
            path=str(self.model_path),
            inputs=[i.name for i in self._session.get_inputs()],
            outputs=[o.name for o in self._session.get_outputs()],
        )
        return self._session

    @property
    def available(self) -> bool:
        """False once a load attempt has failed."""
        return self._load_error is None

    def infer(
        self,
        genre: np.ndarray,
        tracks: np.ndarray,
        instruments: np.ndarray,
        valid_mask: np.ndarray,
    ) -> np.ndarray:
        """Run one forward pass.

        Returns:
            Flat float32 array with at least 16 values: ``[0:8]`` raw gains and
            ``[8:16]`` raw pans, in [0, 1], aligned with the track order.

        Raises:
            ModelLoadError: if the artifact is missing or malformed.
            ModelExecutionError: if the forward pass fails or yields
                too few or non-finite values.
        """
        with self._lock:
            session = self._get_session()
            feeds = {
                "genre": _match_rank(genre, session, "genre"),
                "tracks": tracks,
                "instruments": instruments,
                "valid_mask": valid_mask,
            }
            try:
                results = session.run(None, feeds)
            except Exception as e:
                msg = f"Model forward pass failed: {e}"
                raise ModelExecutionError(msg) from e

        output = np.asarray(results[0], dtype=np.float32).reshape(-1)
        if output.size < N_OUTPUTS:
            msg = f"Model returned {output.size} values, expected at least {N_OUTPUTS}"
            raise ModelExecutionError(msg)
        if not np.isfinite(output[:N_OUTPUTS]).all():
            msg = "Model returned non-finite values"
            raise ModelExecutionError(msg)
        return output

    def describe(self) -> dict[str, Any]:
        """Input/output metadata of the loaded model."""
        with self._lock:
            session = self._get_session()
        return {
            "path": str(self.model_path),
            "providers": self.providers,
            "inputs": [
                {"name": i.name, "type": i.type, "shape": list(i.shape)}
                for i in session.get_inputs()
            ],
            "outputs": [
                {"name": o.name, "type": o.type, "shape": list(o.shape)}
                for o in session.get_outputs()
            ],
        }


def _match_rank(array: np.ndarray, session: Any, name: str) -> np.ndarray:
    """Reshape ``array`` to the rank the model declares for input ``name``.

    Exported models disagree on whether the genre code is a scalar, ``[1]``
    or ``[1, 1]``; the value is the same in all three cases.
    """
    for meta in session.get_inputs():
        if meta.name != name:
            continue
        rank = len(meta.shape)
        if rank != array.ndim and array.size == 1:
            return array.reshape((1,) * rank)
    return array
