"""BRAIN — mix parameter inference layer.

- Tensors: validated model inputs
- Engine: lazily loaded ONNX Runtime session
- Denorm: raw outputs → gain/pan units
- Backends: model path or deterministic fallback, chosen at startup
"""

from aimix.brain.backends import (
    FallbackBackend,
    MixBackend,
    MixParameters,
    ModelBackend,
    select_backend,
)
from aimix.brain.denorm import denorm_gain, denorm_pan, gain_to_db, parameter_units
from aimix.brain.engine import OnnxInferenceEngine, probe_model_runtime
from aimix.brain.tensors import FeatureTensors, build_feature_tensors

__all__ = [
    "FallbackBackend",
    "MixBackend",
    "MixParameters",
    "ModelBackend",
    "select_backend",
    "denorm_gain",
    "denorm_pan",
    "gain_to_db",
    "parameter_units",
    "OnnxInferenceEngine",
    "probe_model_runtime",
    "FeatureTensors",
    "build_feature_tensors",
]
