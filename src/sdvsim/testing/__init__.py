"""Deterministic test support for the SDV simulator.

Key classes:
- ManualScheduler: Virtual clock; callbacks fire only when time is advanced
- ScriptedRandom: Random source that replays scripted draws
- BatchResults: Aggregate outcome of many headless runs

Usage:
    from sdvsim.testing import ManualScheduler, ScriptedRandom, run_headless

    scheduler = ManualScheduler()
    rng = ScriptedRandom.outcomes([True, False, True])
    report = run_headless(artifact, "parking", seed=7)
"""

from .clock import ManualScheduler, ScriptedRandom
from .runner import BatchResults, run_batch, run_headless

__all__ = [
    "ManualScheduler",
    "ScriptedRandom",
    "BatchResults",
    "run_batch",
    "run_headless",
]
