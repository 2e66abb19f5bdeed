"""Scenario step sequencer.

The sequencer owns the Run and is its only writer. It advances one step at a
time: the current step is marked RUNNING, a deferred callback fires after the
step's nominal duration, the step is judged, and the next step begins.

Run lifecycle:
1. start() - fresh run, first step begins (refused without code)
2. step resolution - one deferred callback per step
3. completion - the index reaches the end and the run stops
4. pause() / reset() - stop and discard any in-flight resolution

Every start/pause/reset bumps a generation counter. Deferred callbacks carry
the generation they were scheduled under and are dropped if it no longer
matches, so a superseded timer can never touch the current run.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from sdvsim.catalog import ScenarioId, parse_scenario_id, steps_for
from sdvsim.engine.scheduler import Scheduler, TimerHandle
from sdvsim.models.run import Run
from sdvsim.models.steps import Step
from sdvsim.parameters import PASS_PROBABILITY

logger = logging.getLogger(__name__)


class EventType(Enum):
    """State transitions reported to sequencer listeners."""

    RUN_STARTED = "run_started"
    STEP_STARTED = "step_started"
    STEP_RESOLVED = "step_resolved"
    RUN_COMPLETED = "run_completed"
    PAUSED = "paused"
    RESET = "reset"


@dataclass
class StepEvent:
    """Notification sent after a sequencer transition.

    Attributes:
        type: What happened
        run: The live run (read-only for listeners)
        step: The step involved, for STEP_STARTED and STEP_RESOLVED
    """

    type: EventType
    run: Run
    step: Optional[Step] = None


StepsProvider = Callable[[ScenarioId], list[Step]]
Listener = Callable[[StepEvent], None]


class StepSequencer:
    """Timed state machine driving a run through its steps.

    Attributes:
        run: Current run state
    """

    def __init__(
        self,
        scheduler: Scheduler,
        scenario: str | ScenarioId = ScenarioId.FULL,
        rng: Optional[random.Random] = None,
        metrics_rng: Optional[random.Random] = None,
        pass_probability: float = PASS_PROBABILITY,
        time_scale: float = 1.0,
        steps_provider: StepsProvider = steps_for,
    ) -> None:
        """Create an idle sequencer for a scenario.

        Args:
            scheduler: Timer source for step resolution
            scenario: Initial scenario
            rng: Random source for pass/fail judgments (unseeded if None)
            metrics_rng: Random source for synthetic metrics, kept separate so
                metric draws never shift the judgment stream
            pass_probability: Chance that a step passes
            time_scale: Divides every step duration (2.0 runs twice as fast)
            steps_provider: Builds the step list for a scenario

        Raises:
            ValueError: If pass_probability or time_scale is out of range
        """
        if not 0.0 <= pass_probability <= 1.0:
            raise ValueError(f"pass_probability must be in [0, 1], got {pass_probability}")
        if time_scale <= 0:
            raise ValueError(f"time_scale must be positive, got {time_scale}")

        self._scheduler = scheduler
        self._rng = rng if rng is not None else random.Random()
        self._metrics_rng = metrics_rng if metrics_rng is not None else random.Random()
        self._pass_probability = pass_probability
        self._time_scale = time_scale
        self._steps_provider = steps_provider

        self._generation = 0
        self._pending: Optional[TimerHandle] = None
        self._listeners: list[Listener] = []

        self.run = self._fresh_run(parse_scenario_id(scenario))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def scenario(self) -> ScenarioId:
        return ScenarioId(self.run.scenario)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_running(self) -> bool:
        return self.run.is_running

    @property
    def is_complete(self) -> bool:
        return self.run.is_complete

    @property
    def passed_count(self) -> int:
        return self.run.passed_count

    @property
    def failed_count(self) -> int:
        return self.run.failed_count

    @property
    def pending_count(self) -> int:
        return self.run.pending_count

    @property
    def progress_pct(self) -> float:
        return self.run.progress_pct

    def snapshot(self) -> Run:
        """Deep copy of the run, safe to hand to other components."""
        return self.run.model_copy(deep=True)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def start(self, code: str, scenario: str | ScenarioId | None = None) -> bool:
        """Begin a fresh run.

        A later start never resumes a paused run; it always starts over.

        Args:
            code: Artifact code under validation; must be non-empty
            scenario: Scenario to run (default: the current one)

        Returns:
            False if the run was refused because there is no code
        """
        if not code:
            logger.warning("Refusing to start run: no code to validate")
            return False

        scenario_id = parse_scenario_id(scenario) if scenario is not None else self.scenario
        self._supersede()
        self.run = self._fresh_run(scenario_id)
        self.run.is_running = True
        logger.info(f"Run started: scenario={scenario_id.value}, steps={len(self.run.steps)}")
        self._notify(StepEvent(EventType.RUN_STARTED, self.run))
        self.tick()
        return True

    def pause(self) -> bool:
        """Stop advancing without touching step statuses.

        Returns:
            False if the run was not running
        """
        if not self.run.is_running:
            return False
        self._supersede()
        self.run.is_running = False
        logger.info(f"Run paused at step {self.run.current_index + 1}/{len(self.run.steps)}")
        self._notify(StepEvent(EventType.PAUSED, self.run))
        return True

    def reset(self, scenario: str | ScenarioId | None = None) -> None:
        """Replace the run with an idle one, all steps pending."""
        scenario_id = parse_scenario_id(scenario) if scenario is not None else self.scenario
        self._supersede()
        self.run = self._fresh_run(scenario_id)
        logger.debug(f"Run reset: scenario={scenario_id.value}")
        self._notify(StepEvent(EventType.RESET, self.run))

    def tick(self) -> None:
        """Advance the run by one cycle.

        Marks the current step RUNNING and schedules its resolution. When the
        index has reached the end, stops the run. Does nothing while idle,
        paused, or while a resolution is already in flight.
        """
        if not self.run.is_running:
            return
        if self.run.current_index >= len(self.run.steps):
            self.run.is_running = False
            logger.info(
                f"Run completed: passed={self.run.passed_count}, failed={self.run.failed_count}"
            )
            self._notify(StepEvent(EventType.RUN_COMPLETED, self.run))
            return
        if self._pending is not None:
            return

        step = self.run.steps[self.run.current_index]
        step.mark_running()
        self._notify(StepEvent(EventType.STEP_STARTED, self.run, step))

        generation = self._generation
        delay_s = step.nominal_duration_ms / 1000.0 / self._time_scale
        self._pending = self._scheduler.call_later(delay_s, lambda: self._resolve(generation))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _fresh_run(self, scenario: ScenarioId) -> Run:
        return Run(scenario=scenario.value, steps=self._steps_provider(scenario))

    def _supersede(self) -> None:
        """Invalidate every callback scheduled for the current run."""
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _resolve(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug(f"Dropping stale step resolution (generation {generation} != {self._generation})")
            return
        self._pending = None

        step = self.run.steps[self.run.current_index]
        passed = self._rng.random() < self._pass_probability
        metrics = step.metric_template.sample(self._metrics_rng) if step.metric_template else None
        step.resolve(passed, metrics)
        self.run.current_index += 1

        if not passed:
            logger.info(f"Step {step.id} '{step.name}' failed")
        self._notify(StepEvent(EventType.STEP_RESOLVED, self.run, step))
        self.tick()

    def _notify(self, event: StepEvent) -> None:
        for listener in list(self._listeners):
            listener(event)
