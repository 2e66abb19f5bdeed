"""Unit tests for step, run and motion models."""

import random

import pytest
from pydantic import ValidationError

from sdvsim.catalog import steps_for
from sdvsim.models import (
    Actor,
    MetricTemplate,
    MotionState,
    Run,
    Step,
    StepCategory,
    StepMetrics,
    StepStatus,
)


def make_step(step_id=1, **overrides):
    fields = dict(
        id=step_id,
        name="Lane Keep",
        category=StepCategory.SCENARIO,
        nominal_duration_ms=1000,
        description="Hold the lane",
    )
    fields.update(overrides)
    return Step(**fields)


class TestStepTransitions:
    def test_forward_path(self):
        step = make_step()
        step.mark_running()
        assert step.status == StepStatus.RUNNING
        step.resolve(True)
        assert step.status == StepStatus.PASSED
        assert step.status.is_terminal

    def test_failure_is_terminal(self):
        step = make_step()
        step.mark_running()
        step.resolve(False)
        assert step.status == StepStatus.FAILED
        assert step.status.is_terminal

    def test_cannot_resolve_pending(self):
        with pytest.raises(ValueError, match="cannot resolve from pending"):
            make_step().resolve(True)

    def test_cannot_restart_terminal(self):
        step = make_step()
        step.mark_running()
        step.resolve(True)
        with pytest.raises(ValueError, match="cannot start from passed"):
            step.mark_running()

    def test_cannot_resolve_twice(self):
        step = make_step()
        step.mark_running()
        step.resolve(False)
        with pytest.raises(ValueError):
            step.resolve(True)

    def test_rejects_non_positive_duration(self):
        with pytest.raises(ValidationError):
            make_step(nominal_duration_ms=0)

    def test_rejects_zero_id(self):
        with pytest.raises(ValidationError):
            make_step(step_id=0)


class TestMetrics:
    def test_as_dict_skips_missing(self):
        metrics = StepMetrics(latency_ms=12.3)
        assert metrics.as_dict() == {"latencyMs": 12.3}

    def test_template_sample_in_range(self):
        template = MetricTemplate(latency_ms=(8.0, 24.0), accuracy_pct=(96.0, 99.8))
        rng = random.Random(3)
        for _ in range(200):
            metrics = template.sample(rng)
            assert 8.0 <= metrics.latency_ms <= 24.0
            assert 96.0 <= metrics.accuracy_pct <= 99.8
            assert metrics.coverage_pct is None
            assert metrics.latency_ms == round(metrics.latency_ms, 1)

    def test_template_rejects_inverted_range(self):
        with pytest.raises(ValidationError, match="inverted"):
            MetricTemplate(coverage_pct=(99.0, 90.0))


class TestRunQueries:
    def test_fresh_run(self):
        run = Run(scenario="parking", steps=steps_for("parking"))
        assert run.pending_count == 9
        assert run.progress_pct == 0.0
        assert not run.is_complete
        assert run.current_step.id == 1

    def test_empty_run_is_complete(self):
        run = Run(scenario="full")
        assert run.pending_count == 0
        assert run.is_complete
        assert run.progress_pct == 0.0
        assert run.current_step is None

    def test_counts_after_resolution(self):
        steps = steps_for("parking")
        for step, passed in zip(steps[:3], [True, False, True]):
            step.mark_running()
            step.resolve(passed)
        run = Run(scenario="parking", steps=steps, current_index=3)
        assert run.passed_count == 2
        assert run.failed_count == 1
        assert run.pending_count == 6
        assert run.progress_pct == pytest.approx(100 * 3 / 9)

    def test_running_step_counts_as_pending(self):
        steps = steps_for("parking")
        steps[0].mark_running()
        run = Run(scenario="parking", steps=steps, is_running=True)
        assert run.pending_count == 9

    def test_index_past_end_rejected(self):
        with pytest.raises(ValidationError, match="exceeds step count"):
            Run(scenario="parking", steps=steps_for("parking"), current_index=10)

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError, match="unique"):
            Run(scenario="full", steps=[make_step(1), make_step(1)])


class TestMotionState:
    def test_primary_lookup(self):
        state = MotionState(actors=[Actor(id="npc-1", x=5, y=5), Actor(id="ego", x=50, y=50, is_primary=True)])
        assert state.primary.id == "ego"
        assert [actor.id for actor in state.secondary] == ["npc-1"]

    def test_missing_primary(self):
        with pytest.raises(LookupError):
            MotionState(actors=[]).primary

    def test_actor_bounds(self):
        with pytest.raises(ValidationError):
            Actor(id="npc-9", x=101, y=50)
