"""Integration tests for the simulation facade on the virtual clock.

Tests verify:
1. Runs are refused without code
2. A full run finishes with consistent counters and exportable report
3. Motion stops with the sequencer on pause, reset and completion
4. Scenario switching mid-run restarts under the new scenario
5. Headless and batch runners
"""

from datetime import datetime, timezone

import pytest

from sdvsim.catalog import ScenarioId, steps_for
from sdvsim.engine import Simulation
from sdvsim.models.steps import StepStatus
from sdvsim.testing import ManualScheduler, ScriptedRandom, run_batch, run_headless


def make_simulation(artifact, scenario="parking", passes=(), **kwargs):
    scheduler = ManualScheduler()
    simulation = Simulation(
        artifact,
        scenario=scenario,
        scheduler=scheduler,
        rng=ScriptedRandom.outcomes(passes),
        **kwargs,
    )
    return simulation, scheduler


class TestStartRefusal:
    def test_no_artifact(self, scheduler):
        simulation = Simulation(scheduler=scheduler)
        assert not simulation.can_start
        assert not simulation.start()
        assert not simulation.is_running
        assert scheduler.pending == 0

    def test_blank_code(self, empty_artifact):
        simulation, scheduler = make_simulation(empty_artifact)
        assert not simulation.start()
        assert simulation.snapshot().current_index == 0
        assert simulation.motion.state.frame_count == 0
        assert scheduler.pending == 0

    def test_whitespace_code_runs(self, whitespace_artifact):
        simulation, scheduler = make_simulation(whitespace_artifact)
        assert simulation.can_start
        assert simulation.start()
        scheduler.run_until_idle()
        assert simulation.build_report() is not None


class TestCompleteRun:
    def test_parking_run(self, sample_artifact):
        simulation, scheduler = make_simulation(sample_artifact, passes=[True, True, False])
        assert simulation.start()
        scheduler.run_until_idle()

        run = simulation.snapshot()
        total_ms = sum(step.nominal_duration_ms for step in steps_for("parking"))
        assert total_ms == 14200
        assert run.is_complete
        assert not run.is_running
        assert run.passed_count == 8
        assert run.failed_count == 1
        assert run.steps[2].status == StepStatus.FAILED
        assert run.frame_count == total_ms // 16
        assert run.elapsed_sim_ms == run.frame_count * 16
        assert not simulation.motion.is_active

    def test_report_after_completion(self, sample_artifact):
        simulation, scheduler = make_simulation(sample_artifact)
        assert simulation.build_report() is None

        simulation.start()
        scheduler.advance(5000)
        assert not simulation.can_export
        assert simulation.build_report() is None

        scheduler.run_until_idle()
        stamp = datetime(2025, 1, 1, tzinfo=timezone.utc)
        report = simulation.build_report(timestamp=stamp)
        assert report is not None
        assert report.summary.status == "PASSED"
        assert report.metadata.total_frames == simulation.motion.state.frame_count
        assert report.metadata.map == "Town05 Parking"
        assert report.generated_at == stamp

    def test_time_scale_shortens_run(self, sample_artifact):
        simulation, scheduler = make_simulation(sample_artifact, time_scale=10.0)
        simulation.start()
        scheduler.run_until_idle()
        assert simulation.can_export
        assert scheduler.now_ms == pytest.approx(1420, abs=1)


class TestPauseResetToggle:
    def test_pause_freezes_motion(self, sample_artifact):
        simulation, scheduler = make_simulation(sample_artifact)
        simulation.start()
        scheduler.advance(2000)
        assert simulation.pause()

        frames = simulation.motion.state.frame_count
        index = simulation.snapshot().current_index
        scheduler.advance(10_000)

        assert simulation.motion.state.frame_count == frames
        assert simulation.snapshot().current_index == index
        assert scheduler.pending == 0

    def test_reset_clears_everything(self, sample_artifact):
        simulation, scheduler = make_simulation(sample_artifact)
        simulation.start()
        scheduler.advance(3000)
        simulation.reset()

        run = simulation.snapshot()
        assert run.current_index == 0
        assert run.frame_count == 0
        assert all(step.status == StepStatus.PENDING for step in run.steps)
        assert simulation.motion.state.primary.x == 50.0

    def test_toggle(self, sample_artifact):
        simulation, scheduler = make_simulation(sample_artifact)
        assert simulation.toggle()
        assert simulation.is_running
        scheduler.advance(1000)
        assert simulation.toggle()
        assert not simulation.is_running

        # Starting again is a fresh run, not a resume
        assert simulation.toggle()
        assert simulation.snapshot().current_index == 0


class TestScenarioSwitch:
    def test_switch_while_running_restarts(self, sample_artifact):
        simulation, scheduler = make_simulation(sample_artifact)
        simulation.start()
        scheduler.advance(3500)
        simulation.select_scenario("highway")

        assert simulation.scenario == ScenarioId.HIGHWAY
        assert simulation.is_running
        run = simulation.snapshot()
        assert run.current_index == 0
        assert run.steps[0].status == StepStatus.RUNNING
        assert len(run.steps) == len(steps_for("highway"))

        scheduler.run_until_idle()
        assert simulation.build_report().metadata.map == "Town04 Highway"

    def test_switch_while_idle_stays_idle(self, sample_artifact):
        simulation, scheduler = make_simulation(sample_artifact)
        simulation.select_scenario(ScenarioId.LANE_CHANGE)
        assert not simulation.is_running
        assert simulation.motion.scenario == ScenarioId.LANE_CHANGE
        assert simulation.presentation.display_name == "Lane Change"

    def test_set_artifact_discards_run(self, sample_artifact, empty_artifact):
        simulation, scheduler = make_simulation(sample_artifact)
        simulation.start()
        scheduler.run_until_idle()
        simulation.set_artifact(empty_artifact)
        assert not simulation.can_export
        assert not simulation.can_start


class TestHeadless:
    def test_run_headless(self, sample_artifact):
        report = run_headless(sample_artifact, "intersection", seed=42)
        assert report.summary.total_tests == len(steps_for("intersection"))
        assert report.summary.passed + report.summary.failed == report.summary.total_tests

    def test_seeded_runs_repeat(self, sample_artifact):
        first = run_headless(sample_artifact, "full", seed=7).to_document()
        second = run_headless(sample_artifact, "full", seed=7).to_document()
        first["metadata"].pop("timestamp")
        second["metadata"].pop("timestamp")
        assert first == second

    def test_headless_refuses_empty(self, empty_artifact):
        with pytest.raises(ValueError):
            run_headless(empty_artifact)

    @pytest.mark.slow
    def test_batch_pass_rate(self, sample_artifact):
        results = run_batch(sample_artifact, "parking", runs=100, seed=1)
        assert results.runs == 100
        assert results.total_steps == 900
        assert 0.9 <= results.step_pass_rate <= 1.0
        assert results.to_dict()["scenario"] == "parking"

    def test_batch_rejects_zero_runs(self, sample_artifact):
        with pytest.raises(ValueError):
            run_batch(sample_artifact, "full", runs=0)
