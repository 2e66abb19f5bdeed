"""SDV simulator models.

This module exports the core data structures shared by the engine and the
report synthesizer.
"""

from .artifact import (
    DEFAULT_STANDARDS,
    ComponentType,
    GeneratedArtifact,
    Language,
)
from .motion import Actor, MotionState, Weather
from .run import Run
from .steps import (
    MetricTemplate,
    Step,
    StepCategory,
    StepDefinition,
    StepMetrics,
    StepStatus,
)

__all__ = [
    # Enums
    "ComponentType",
    "Language",
    "StepCategory",
    "StepStatus",
    "Weather",
    # Step Models
    "MetricTemplate",
    "Step",
    "StepDefinition",
    "StepMetrics",
    # Run Models
    "Run",
    # Motion Models
    "Actor",
    "MotionState",
    # Artifact
    "GeneratedArtifact",
    "DEFAULT_STANDARDS",
]
