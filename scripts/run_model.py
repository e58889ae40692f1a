#!/usr/bin/env python3
"""Run one mix job on the sample directory and print gains and pans.

Usage:
    python scripts/run_model.py [genre]
"""

import asyncio
import sys

from aimix.brain.backends import select_backend
from aimix.brain.denorm import gain_to_db
from aimix.config import settings
from aimix.console.coordinator import MixJobCoordinator
from aimix.console.store import JobStatus

genre = sys.argv[1] if len(sys.argv) > 1 else "Pop"


async def main() -> int:
    coordinator = MixJobCoordinator(select_backend(settings), settings)
    print(f"Backend: {coordinator.backend.name} | Genre: {genre}")
    print(f"Samples: {settings.samples_dir}")

    job = await coordinator.trigger(genre)
    if job.status is JobStatus.FAILED:
        print(f"FAILED ({job.error_code}): {job.error}")
        return 1

    for t in job.tracks:
        if job.source == "model":
            gain = f"{t.gain:.3f} ({gain_to_db(t.gain):+.1f} dB)"
        else:
            gain = f"{t.gain:+.1f} dB"
        print(f"  [{t.id}] {t.name:<32} {t.instrument:<11} gain={gain:<20} pan={t.pan:+.2f}")

    params = coordinator.last_parameters()
    print(f"\nPOSTGAINS={','.join(str(g) for g in params.gains)}")
    print(f"PANS={','.join(str(p) for p in params.pans)}")
    return 0


sys.exit(asyncio.run(main()))
