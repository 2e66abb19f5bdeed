"""Simulation engine for the SDV simulator.

This module contains the timed run logic:
- scheduler: Timer abstraction (asyncio-backed in production)
- sequencer: Step-by-step run state machine with pass/fail judgment
- motion: Fixed-rate actor animation synchronized to the run
- simulation: Facade wiring sequencer, motion and report export

Usage:
    from sdvsim.engine import Simulation
    from sdvsim.models import GeneratedArtifact, Language

    artifact = GeneratedArtifact(language=Language.CPP, filename="brake.cpp", code=source)
    sim = Simulation(artifact, scenario="parking")
    sim.start()

    # ... later, once every step is judged
    if sim.can_export:
        report = sim.build_report()
"""

from sdvsim.engine.motion import (
    TRAJECTORIES,
    MotionGenerator,
    clamp,
    initial_actors,
    primary_pose,
)
from sdvsim.engine.scheduler import AsyncioScheduler, Scheduler, TimerHandle
from sdvsim.engine.sequencer import EventType, StepEvent, StepSequencer
from sdvsim.engine.simulation import Simulation

__all__ = [
    # Scheduling
    "Scheduler",
    "AsyncioScheduler",
    "TimerHandle",
    # Sequencer
    "StepSequencer",
    "StepEvent",
    "EventType",
    # Motion
    "MotionGenerator",
    "TRAJECTORIES",
    "clamp",
    "initial_actors",
    "primary_pose",
    # Facade
    "Simulation",
]
