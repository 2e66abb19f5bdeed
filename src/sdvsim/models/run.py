"""Run model and its derived progress queries."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from sdvsim.models.steps import Step, StepStatus


class Run(BaseModel):
    """One execution attempt over a scenario's step sequence.

    Invariants:
        current_index == passed_count + failed_count
        is_complete implies not is_running

    Attributes:
        scenario: Scenario id the steps were drawn from
        steps: Steps in execution order
        current_index: Index of the step being executed (len(steps) when done)
        is_running: Whether the run is actively advancing
        frame_count: Motion frames rendered during the run
        elapsed_sim_ms: Simulated time accumulated by the motion ticks
    """

    scenario: str
    steps: list[Step] = Field(default_factory=list)
    current_index: int = Field(default=0, ge=0)
    is_running: bool = False
    frame_count: int = Field(default=0, ge=0)
    elapsed_sim_ms: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_index(self) -> Run:
        if self.current_index > len(self.steps):
            raise ValueError(
                f"current_index {self.current_index} exceeds step count {len(self.steps)}"
            )
        ids = [step.id for step in self.steps]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Step ids must be unique, got {ids}")
        return self

    @property
    def passed_count(self) -> int:
        return sum(1 for step in self.steps if step.status == StepStatus.PASSED)

    @property
    def failed_count(self) -> int:
        return sum(1 for step in self.steps if step.status == StepStatus.FAILED)

    @property
    def pending_count(self) -> int:
        """Steps not yet judged (includes the one currently running)."""
        return len(self.steps) - self.passed_count - self.failed_count

    @property
    def progress_pct(self) -> float:
        if not self.steps:
            return 0.0
        return (self.passed_count + self.failed_count) / len(self.steps) * 100

    @property
    def is_complete(self) -> bool:
        return self.pending_count == 0

    @property
    def current_step(self) -> Step | None:
        if self.current_index >= len(self.steps):
            return None
        return self.steps[self.current_index]
