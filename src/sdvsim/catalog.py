"""Scenario catalog for the SDV simulator.

Every scenario's step list is assembled from three sections:

1. SETUP - compilation, static analysis, environment and sensor bring-up
2. SCENARIO - driving situations specific to the scenario
3. VALIDATION - the closing safety check

The sections are concatenated and numbered 1..N in order. Ids are never
stored in the static definitions.

Usage:
    from sdvsim.catalog import ScenarioId, steps_for, presentation_for

    steps = steps_for(ScenarioId.PARKING)
    presentation = presentation_for(ScenarioId.PARKING)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sdvsim.models.motion import Weather
from sdvsim.models.steps import MetricTemplate, Step, StepCategory, StepDefinition


class ScenarioId(Enum):
    """Scenarios a run can be configured with."""

    FULL = "full"
    INTERSECTION = "intersection"
    LANE_CHANGE = "lane-change"
    PARKING = "parking"
    HIGHWAY = "highway"


@dataclass(frozen=True)
class ScenarioPresentation:
    """How a scenario is labelled in the viewport and in reports."""

    display_name: str
    map_name: str
    default_weather: Weather


def _step(
    name: str,
    category: StepCategory,
    duration_ms: int,
    description: str,
    metrics: MetricTemplate | None = None,
) -> StepDefinition:
    return StepDefinition(
        name=name,
        category=category,
        nominal_duration_ms=duration_ms,
        description=description,
        metric_template=metrics,
    )


# =============================================================================
# Shared sections
# =============================================================================

SETUP_STEPS: tuple[StepDefinition, ...] = (
    _step("Code Compilation", StepCategory.SETUP, 1200, "Compiling with safety flags"),
    _step(
        "Static Analysis",
        StepCategory.ANALYSIS,
        1500,
        "MISRA C++ compliance check",
        MetricTemplate(coverage_pct=(92.0, 99.5)),
    ),
    _step("Environment Init", StepCategory.SETUP, 800, "Loading simulation map and actors"),
    _step(
        "Sensor Fusion",
        StepCategory.SETUP,
        2000,
        "8 cameras + LiDAR + Radar",
        MetricTemplate(latency_ms=(8.0, 24.0), accuracy_pct=(96.0, 99.8)),
    ),
)

VALIDATION_STEPS: tuple[StepDefinition, ...] = (
    _step(
        "Safety Validation",
        StepCategory.VALIDATION,
        1000,
        "ISO 26262 ASIL-D check",
        MetricTemplate(coverage_pct=(95.0, 100.0)),
    ),
)


# =============================================================================
# Scenario sections
# =============================================================================

_REACTION = MetricTemplate(latency_ms=(45.0, 120.0), accuracy_pct=(94.0, 99.9))
_TRACKING = MetricTemplate(latency_ms=(10.0, 35.0), accuracy_pct=(95.0, 99.9))

SCENARIO_STEPS: dict[ScenarioId, tuple[StepDefinition, ...]] = {
    ScenarioId.FULL: (
        _step("Scenario: Normal", StepCategory.SCENARIO, 2500, "Highway cruise control", _TRACKING),
        _step("Scenario: Emergency", StepCategory.SCENARIO, 2200, "Pedestrian crossing test", _REACTION),
        _step("Scenario: Edge Case", StepCategory.SCENARIO, 1800, "Adverse weather driving", _TRACKING),
        _step("Scenario: Intersection", StepCategory.SCENARIO, 2000, "Unprotected left turn", _REACTION),
        _step("Scenario: Lane Change", StepCategory.SCENARIO, 1900, "Merge into dense traffic", _TRACKING),
        _step("Scenario: Parking", StepCategory.SCENARIO, 1600, "Parallel parking manoeuvre", _TRACKING),
    ),
    ScenarioId.INTERSECTION: (
        _step("Signal Detection", StepCategory.SCENARIO, 1500, "Traffic light state recognition", _TRACKING),
        _step("Right of Way", StepCategory.SCENARIO, 2000, "Four-way stop arbitration", _REACTION),
        _step("Unprotected Left Turn", StepCategory.SCENARIO, 2400, "Gap acceptance with oncoming traffic", _REACTION),
        _step("Pedestrian Crosswalk", StepCategory.SCENARIO, 2200, "Yield to crossing pedestrians", _REACTION),
    ),
    ScenarioId.LANE_CHANGE: (
        _step("Blind Spot Monitoring", StepCategory.SCENARIO, 1600, "Rear radar occupancy check", _TRACKING),
        _step("Gap Assessment", StepCategory.SCENARIO, 1800, "Target lane gap estimation", _TRACKING),
        _step("Merge Execution", StepCategory.SCENARIO, 2300, "Smooth lateral transition", _TRACKING),
        _step("Abort Manoeuvre", StepCategory.SCENARIO, 1700, "Cut-in vehicle abort and return", _REACTION),
    ),
    ScenarioId.PARKING: (
        _step("Space Detection", StepCategory.SCENARIO, 1500, "Ultrasonic slot measurement", _TRACKING),
        _step("Parallel Parking", StepCategory.SCENARIO, 2600, "Reverse into curbside slot", _TRACKING),
        _step("Perpendicular Parking", StepCategory.SCENARIO, 2200, "Bay parking with tight clearance", _TRACKING),
        _step("Obstacle Stop", StepCategory.SCENARIO, 1400, "Emergency stop for rolling object", _REACTION),
    ),
    ScenarioId.HIGHWAY: (
        _step("Adaptive Cruise", StepCategory.SCENARIO, 2500, "Gap keeping at 120 km/h", _TRACKING),
        _step("Lane Keeping", StepCategory.SCENARIO, 2000, "Curved lane centering", _TRACKING),
        _step("Cut-in Response", StepCategory.SCENARIO, 2100, "Braking for merging vehicle", _REACTION),
        _step("Emergency Braking", StepCategory.SCENARIO, 1800, "Stationary obstacle ahead", _REACTION),
    ),
}

PRESENTATIONS: dict[ScenarioId, ScenarioPresentation] = {
    ScenarioId.FULL: ScenarioPresentation("Full Validation Suite", "Town03 Urban", Weather.CLEAR),
    ScenarioId.INTERSECTION: ScenarioPresentation("Urban Intersection", "Town10HD Downtown", Weather.CLEAR),
    ScenarioId.LANE_CHANGE: ScenarioPresentation("Lane Change", "Town06 Multi-lane", Weather.RAIN),
    ScenarioId.PARKING: ScenarioPresentation("Parking Lot", "Town05 Parking", Weather.CLEAR),
    ScenarioId.HIGHWAY: ScenarioPresentation("Highway Cruise", "Town04 Highway", Weather.FOG),
}


def parse_scenario_id(value: str | ScenarioId) -> ScenarioId:
    """Resolve a scenario id from its string value.

    Accepts underscores in place of hyphens and any letter case.

    Raises:
        ValueError: If the scenario is unknown
    """
    if isinstance(value, ScenarioId):
        return value
    normalized = value.strip().lower().replace("_", "-")
    try:
        return ScenarioId(normalized)
    except ValueError:
        valid = [scenario.value for scenario in ScenarioId]
        raise ValueError(f"Unknown scenario '{value}'. Valid scenarios: {valid}") from None


def steps_for(scenario: str | ScenarioId) -> list[Step]:
    """Return a fresh, numbered, all-pending step list for a scenario."""
    scenario_id = parse_scenario_id(scenario)
    definitions = SETUP_STEPS + SCENARIO_STEPS[scenario_id] + VALIDATION_STEPS
    return [Step.from_definition(index, definition) for index, definition in enumerate(definitions, start=1)]


def presentation_for(scenario: str | ScenarioId) -> ScenarioPresentation:
    return PRESENTATIONS[parse_scenario_id(scenario)]


def list_scenarios() -> list[dict[str, str]]:
    """List scenarios with their display metadata, in catalog order."""
    return [
        {
            "id": scenario.value,
            "name": PRESENTATIONS[scenario].display_name,
            "map": PRESENTATIONS[scenario].map_name,
        }
        for scenario in ScenarioId
    ]
