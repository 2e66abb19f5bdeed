"""Actor and motion state models for the run visualization."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from sdvsim.parameters import NOMINAL_FPS


class Weather(Enum):
    """Presentation-only weather condition."""

    CLEAR = "clear"
    RAIN = "rain"
    FOG = "fog"


class Actor(BaseModel):
    """A vehicle drawn in the viewport.

    Attributes:
        id: Stable identifier ("ego" for the primary actor)
        x: Horizontal position, percent of viewport width
        y: Vertical position, percent of viewport height
        heading: Heading in degrees
        is_primary: Whether the scenario trajectory drives this actor
    """

    id: str
    x: float = Field(ge=0.0, le=100.0)
    y: float = Field(ge=0.0, le=100.0)
    heading: float = 0.0
    is_primary: bool = False


class MotionState(BaseModel):
    """Everything the motion generator owns for one run."""

    frame_count: int = Field(default=0, ge=0)
    elapsed_sim_ms: int = Field(default=0, ge=0)
    fps: int = NOMINAL_FPS
    weather: Weather = Weather.CLEAR
    actors: list[Actor] = Field(default_factory=list)

    @property
    def primary(self) -> Actor:
        for actor in self.actors:
            if actor.is_primary:
                return actor
        raise LookupError("Motion state has no primary actor")

    @property
    def secondary(self) -> list[Actor]:
        return [actor for actor in self.actors if not actor.is_primary]
