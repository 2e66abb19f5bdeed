"""Simulation facade tying the sequencer, motion and report together.

The facade owns one StepSequencer and one MotionGenerator on a shared
Scheduler. The two timers are independent; the only coupling is the motion
generator reading the sequencer's is_running flag. The facade stops motion
eagerly when the sequencer pauses, resets or completes.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Optional

from sdvsim.catalog import ScenarioId, ScenarioPresentation, parse_scenario_id, presentation_for
from sdvsim.engine.motion import MotionGenerator
from sdvsim.engine.scheduler import AsyncioScheduler, Scheduler
from sdvsim.engine.sequencer import EventType, StepEvent, StepSequencer
from sdvsim.models.artifact import ComponentType, GeneratedArtifact
from sdvsim.models.run import Run
from sdvsim.report.synthesizer import Report, ReportMeta, synthesize

logger = logging.getLogger(__name__)


class Simulation:
    """One validation run environment for a generated artifact.

    Attributes:
        sequencer: Step state machine (owns the Run)
        motion: Actor animation (owns the MotionState)
        artifact: Code under validation, if any
        component_type: Component kind stamped onto reports
    """

    def __init__(
        self,
        artifact: Optional[GeneratedArtifact] = None,
        scenario: str | ScenarioId = ScenarioId.FULL,
        component_type: ComponentType = ComponentType.SERVICE,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        metrics_rng: Optional[random.Random] = None,
        motion_rng: Optional[random.Random] = None,
        time_scale: float = 1.0,
    ) -> None:
        """Create an idle simulation.

        Args:
            artifact: Code to validate; start() is refused without it
            scenario: Initial scenario
            component_type: Component kind for reports
            scheduler: Timer source (default: the running asyncio loop)
            rng: Random source for step judgments
            metrics_rng: Random source for synthetic step metrics
            motion_rng: Random source for weather, frame rate and jitter
            time_scale: Step speed-up factor
        """
        self.artifact = artifact
        self.component_type = component_type
        self.scheduler = scheduler or AsyncioScheduler()
        scenario_id = parse_scenario_id(scenario)

        self.sequencer = StepSequencer(
            self.scheduler,
            scenario=scenario_id,
            rng=rng,
            metrics_rng=metrics_rng,
            time_scale=time_scale,
        )
        self.motion = MotionGenerator(
            self.scheduler,
            is_running=lambda: self.sequencer.is_running,
            scenario=scenario_id,
            rng=motion_rng,
        )
        self.sequencer.subscribe(self._on_sequencer_event)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def scenario(self) -> ScenarioId:
        return self.sequencer.scenario

    @property
    def presentation(self) -> ScenarioPresentation:
        return presentation_for(self.scenario)

    @property
    def is_running(self) -> bool:
        return self.sequencer.is_running

    @property
    def can_start(self) -> bool:
        return self.artifact is not None and self.artifact.has_code

    @property
    def can_export(self) -> bool:
        return self.sequencer.is_complete

    def snapshot(self) -> Run:
        """Run snapshot with the motion frame counters merged in."""
        run = self.sequencer.snapshot()
        run.frame_count = self.motion.state.frame_count
        run.elapsed_sim_ms = self.motion.state.elapsed_sim_ms
        return run

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def start(self) -> bool:
        """Start a fresh run; returns False if there is no code to validate."""
        code = self.artifact.code if self.artifact is not None else ""
        if not self.sequencer.start(code):
            return False
        self.motion.start(self.scenario)
        return True

    def pause(self) -> bool:
        return self.sequencer.pause()

    def reset(self) -> None:
        self.sequencer.reset()

    def toggle(self) -> bool:
        """Pause when running, otherwise start a fresh run."""
        if self.is_running:
            return self.pause()
        return self.start()

    def select_scenario(self, scenario: str | ScenarioId) -> None:
        """Switch scenario, discarding all step state.

        An active run restarts from step 1 under the new scenario; an idle
        one stays idle.
        """
        scenario_id = parse_scenario_id(scenario)
        was_running = self.is_running
        self.sequencer.reset(scenario_id)
        logger.info(f"Scenario selected: {scenario_id.value}")
        if was_running:
            self.start()

    def set_artifact(self, artifact: Optional[GeneratedArtifact]) -> None:
        """Replace the artifact; any run for the previous one is discarded."""
        self.artifact = artifact
        self.sequencer.reset()

    def build_report(self, timestamp: Optional[datetime] = None) -> Optional[Report]:
        """Synthesize the report, or None while the run is incomplete."""
        if not self.can_export or self.artifact is None:
            logger.warning("Report requested before run completed")
            return None
        meta = ReportMeta(
            artifact=self.artifact,
            component_type=self.component_type,
            timestamp=timestamp,
        )
        return synthesize(self.snapshot(), meta)

    def _on_sequencer_event(self, event: StepEvent) -> None:
        if event.type == EventType.RESET:
            self.motion.reset(event.run.scenario)
        elif event.type in (EventType.PAUSED, EventType.RUN_COMPLETED):
            self.motion.stop()
