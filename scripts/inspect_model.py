#!/usr/bin/env python3
"""Load the mix model and print its input/output layout."""

import json
import sys
from pathlib import Path

from aimix.brain.engine import OnnxInferenceEngine, probe_model_runtime
from aimix.config import settings
from aimix.errors import ModelLoadError

model_path = Path(sys.argv[1]) if len(sys.argv) > 1 else settings.model_path

print(f"Model: {model_path}")
if not probe_model_runtime(model_path):
    print("  Runtime or artifact missing; the server will use the fallback tables")
    sys.exit(1)

engine = OnnxInferenceEngine(model_path, settings.onnx_providers)
try:
    meta = engine.describe()
except ModelLoadError as e:
    print(f"  Load failed: {e}")
    sys.exit(1)

for kind in ("inputs", "outputs"):
    print(f"  {kind}:")
    for item in meta[kind]:
        print(f"    {item['name']:<12} {item['type']:<20} {json.dumps(item['shape'])}")
