"""Step models for simulation runs.

A step is one named, timed unit of a run. Its status only moves forward:

    PENDING -> RUNNING -> PASSED | FAILED

PASSED and FAILED are terminal. A FAILED step is a normal run outcome and is
reported like any other result.
"""

from __future__ import annotations

import random
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StepCategory(Enum):
    """Which section of a run a step belongs to."""

    SETUP = "setup"
    ANALYSIS = "analysis"
    SCENARIO = "scenario"
    VALIDATION = "validation"


class StepStatus(Enum):
    """Live status of a step."""

    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (StepStatus.PASSED, StepStatus.FAILED)


class StepMetrics(BaseModel):
    """Synthetic metrics attached to a resolved step."""

    model_config = ConfigDict(frozen=True)

    latency_ms: float | None = Field(default=None, ge=0.0)
    accuracy_pct: float | None = Field(default=None, ge=0.0, le=100.0)
    coverage_pct: float | None = Field(default=None, ge=0.0, le=100.0)

    def as_dict(self) -> dict[str, float]:
        """Return only the metrics that are present, keyed in camelCase."""
        values = {
            "latencyMs": self.latency_ms,
            "accuracyPct": self.accuracy_pct,
            "coveragePct": self.coverage_pct,
        }
        return {key: value for key, value in values.items() if value is not None}


class MetricTemplate(BaseModel):
    """Ranges from which a step's synthetic metrics are drawn.

    Each range is an inclusive (low, high) pair; a missing range means the
    metric is not reported for the step.
    """

    model_config = ConfigDict(frozen=True)

    latency_ms: tuple[float, float] | None = None
    accuracy_pct: tuple[float, float] | None = None
    coverage_pct: tuple[float, float] | None = None

    @model_validator(mode="after")
    def check_ranges(self) -> MetricTemplate:
        for name in ("latency_ms", "accuracy_pct", "coverage_pct"):
            bounds = getattr(self, name)
            if bounds is not None and bounds[0] > bounds[1]:
                raise ValueError(f"{name} range is inverted: {bounds}")
        return self

    def sample(self, rng: random.Random) -> StepMetrics:
        """Draw one set of metrics, rounded to one decimal place."""

        def draw(bounds: tuple[float, float] | None) -> float | None:
            if bounds is None:
                return None
            return round(rng.uniform(*bounds), 1)

        return StepMetrics(
            latency_ms=draw(self.latency_ms),
            accuracy_pct=draw(self.accuracy_pct),
            coverage_pct=draw(self.coverage_pct),
        )


class StepDefinition(BaseModel):
    """Static catalog entry for a step, before numbering."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: StepCategory
    nominal_duration_ms: int = Field(gt=0)
    description: str
    metric_template: MetricTemplate | None = None


class Step(BaseModel):
    """A numbered step inside a run.

    Attributes:
        id: 1-based position within the run
        name: Display name
        category: Section of the run
        nominal_duration_ms: How long the step takes before it is judged
        description: Short explanation shown next to the name
        metric_template: Ranges for synthetic metrics (not exported)
        metrics: Metrics sampled when the step resolved
        status: Live status
    """

    id: int = Field(ge=1)
    name: str
    category: StepCategory
    nominal_duration_ms: int = Field(gt=0)
    description: str
    metric_template: MetricTemplate | None = None
    metrics: StepMetrics | None = None
    status: StepStatus = StepStatus.PENDING

    @classmethod
    def from_definition(cls, step_id: int, definition: StepDefinition) -> Step:
        return cls(
            id=step_id,
            name=definition.name,
            category=definition.category,
            nominal_duration_ms=definition.nominal_duration_ms,
            description=definition.description,
            metric_template=definition.metric_template,
        )

    def mark_running(self) -> None:
        """Move a pending step to RUNNING."""
        if self.status != StepStatus.PENDING:
            raise ValueError(f"Step {self.id} cannot start from {self.status.value}")
        self.status = StepStatus.RUNNING

    def resolve(self, passed: bool, metrics: StepMetrics | None = None) -> None:
        """Record the terminal judgment for a running step."""
        if self.status != StepStatus.RUNNING:
            raise ValueError(f"Step {self.id} cannot resolve from {self.status.value}")
        self.status = StepStatus.PASSED if passed else StepStatus.FAILED
        self.metrics = metrics
