"""Procedural motion for the run visualization.

The primary actor follows a closed-form trajectory chosen by scenario, as a
function of the wall-clock seconds since the run started:

- full / highway:  x = 50 + 30 sin(0.3t), y = 50 + 20 cos(0.2t), heading = 15 sin(0.3t)
- lane-change:     x = 20 + 6 (t mod 10), y = 50 + 15 sin(0.5t), heading = 10 sin(0.5t)
- parking:         x = 50 + 10 sin(0.3t), y = 50 + 15 cos(0.2t), heading = 20t mod 360
- intersection:    a circle of radius 25, heading tangent to the circle

Primary positions are clamped to [10, 90]. Secondary actors random-walk by up
to one unit per tick, clamped to [5, 95]. Motion is cosmetic and has no
ordering relationship with step outcomes.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Callable, Optional

from sdvsim.catalog import ScenarioId, parse_scenario_id, presentation_for
from sdvsim.engine.scheduler import Scheduler, TimerHandle
from sdvsim.models.motion import Actor, MotionState, Weather
from sdvsim.parameters import (
    FPS_MAX,
    FPS_MIN,
    PRIMARY_BOUNDS,
    PRIMARY_START,
    SECONDARY_BOUNDS,
    SECONDARY_STARTS,
    SECONDARY_STEP,
    TICK_PERIOD_MS,
)

logger = logging.getLogger(__name__)

Pose = tuple[float, float, float]


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value to the specified range."""
    return max(min_val, min(max_val, value))


def _cruise(t: float) -> Pose:
    return (
        50 + 30 * math.sin(0.3 * t),
        50 + 20 * math.cos(0.2 * t),
        15 * math.sin(0.3 * t),
    )


def _lane_change(t: float) -> Pose:
    return (
        20 + 6 * (t % 10),
        50 + 15 * math.sin(0.5 * t),
        10 * math.sin(0.5 * t),
    )


def _parking(t: float) -> Pose:
    return (
        50 + 10 * math.sin(0.3 * t),
        50 + 15 * math.cos(0.2 * t),
        (20 * t) % 360,
    )


def _intersection(t: float) -> Pose:
    return (
        50 + 25 * math.sin(0.4 * t),
        50 + 25 * math.cos(0.4 * t),
        math.degrees(math.atan2(math.cos(0.4 * t), -math.sin(0.4 * t))),
    )


TRAJECTORIES: dict[ScenarioId, Callable[[float], Pose]] = {
    ScenarioId.FULL: _cruise,
    ScenarioId.HIGHWAY: _cruise,
    ScenarioId.LANE_CHANGE: _lane_change,
    ScenarioId.PARKING: _parking,
    ScenarioId.INTERSECTION: _intersection,
}


def primary_pose(scenario: str | ScenarioId, t: float) -> Pose:
    """Clamped (x, y, heading) of the primary actor at t seconds."""
    x, y, heading = TRAJECTORIES[parse_scenario_id(scenario)](t)
    low, high = PRIMARY_BOUNDS
    return clamp(x, low, high), clamp(y, low, high), heading


def initial_actors() -> list[Actor]:
    """Primary actor at the viewport center plus the fixed secondary set."""
    x, y = PRIMARY_START
    actors = [Actor(id="ego", x=x, y=y, heading=0.0, is_primary=True)]
    for index, (sx, sy) in enumerate(SECONDARY_STARTS, start=1):
        actors.append(Actor(id=f"npc-{index}", x=sx, y=sy))
    return actors


class MotionGenerator:
    """Fixed-rate tick loop animating the viewport actors.

    The generator only reads the sequencer through the is_running probe. It
    ticks while the probe is true and stops on the first tick that sees it
    false, leaving every actor where it was.

    Attributes:
        state: Current frame counters, weather and actors
    """

    def __init__(
        self,
        scheduler: Scheduler,
        is_running: Callable[[], bool],
        scenario: str | ScenarioId = ScenarioId.FULL,
        rng: Optional[random.Random] = None,
        tick_period_ms: int = TICK_PERIOD_MS,
    ) -> None:
        if tick_period_ms <= 0:
            raise ValueError(f"tick_period_ms must be positive, got {tick_period_ms}")
        self._scheduler = scheduler
        self._is_running = is_running
        self._rng = rng if rng is not None else random.Random()
        self._tick_period_ms = tick_period_ms
        self._scenario = parse_scenario_id(scenario)
        self._generation = 0
        self._handle: Optional[TimerHandle] = None
        self._started_at = 0.0
        self.state = self._fresh_state()

    @property
    def scenario(self) -> ScenarioId:
        return self._scenario

    @property
    def is_active(self) -> bool:
        return self._handle is not None

    def reset(self, scenario: str | ScenarioId | None = None) -> None:
        """Stop ticking and return actors to their starting positions."""
        self.stop()
        if scenario is not None:
            self._scenario = parse_scenario_id(scenario)
        self.state = self._fresh_state()

    def start(self, scenario: str | ScenarioId | None = None) -> None:
        """Reset, draw the run's weather, and begin ticking."""
        self.reset(scenario)
        self.state.weather = self._rng.choice(list(Weather))
        self._started_at = self._scheduler.monotonic()
        generation = self._generation
        self._handle = self._scheduler.call_every(
            self._tick_period_ms / 1000.0, lambda: self._on_tick(generation)
        )
        logger.debug(f"Motion started: scenario={self._scenario.value}, weather={self.state.weather.value}")

    def stop(self) -> None:
        """Stop ticking; the current state stays frozen."""
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def advance(self, t: float) -> None:
        """Render one frame for t seconds since the run started."""
        self.state.frame_count += 1
        self.state.elapsed_sim_ms += self._tick_period_ms
        self.state.fps = self._rng.randint(FPS_MIN, FPS_MAX)

        primary = self.state.primary
        primary.x, primary.y, primary.heading = primary_pose(self._scenario, t)

        low, high = SECONDARY_BOUNDS
        for actor in self.state.secondary:
            actor.x = clamp(actor.x + self._rng.uniform(-SECONDARY_STEP, SECONDARY_STEP), low, high)
            actor.y = clamp(actor.y + self._rng.uniform(-SECONDARY_STEP, SECONDARY_STEP), low, high)

    def _on_tick(self, generation: int) -> None:
        if generation != self._generation:
            return
        if not self._is_running():
            self.stop()
            return
        self.advance(self._scheduler.monotonic() - self._started_at)

    def _fresh_state(self) -> MotionState:
        return MotionState(
            weather=presentation_for(self._scenario).default_weather,
            actors=initial_actors(),
        )
