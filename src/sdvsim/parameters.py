"""Simulation parameters for the SDV validation simulator.

This module is the SINGLE SOURCE OF TRUTH for the tunable constants used by
the step sequencer, the motion generator and the report synthesizer.

Parameter Categories:
- Judgment: Synthetic pass/fail decision
- Timing: Frame tick and frame-rate display
- Motion: Viewport bounds and trajectory coefficients
- Reporting: Version strings and compliance labels

Usage:
    from sdvsim.parameters import PASS_PROBABILITY, TICK_PERIOD_MS
"""

# =============================================================================
# JUDGMENT PARAMETERS
# =============================================================================

PASS_PROBABILITY = 0.95
"""Probability that a step resolves to PASSED.

Current: 0.95

Each step is judged independently with a uniform draw from the injected
random source. A draw strictly below this value passes.
"""


# =============================================================================
# TIMING PARAMETERS
# =============================================================================

TICK_PERIOD_MS = 16
"""Motion tick period in milliseconds (~60 Hz)."""

NOMINAL_FPS = 60
"""Frame rate shown while idle."""

FPS_MIN = 58
FPS_MAX = 62
"""Bounds of the displayed frame-rate jitter (inclusive)."""


# =============================================================================
# MOTION PARAMETERS
# =============================================================================

PRIMARY_BOUNDS = (10.0, 90.0)
"""Clamp range for the primary actor on both axes (percent of viewport)."""

SECONDARY_BOUNDS = (5.0, 95.0)
"""Clamp range for secondary actors on both axes (percent of viewport)."""

SECONDARY_STEP = 1.0
"""Maximum random-walk displacement per tick for secondary actors."""

PRIMARY_START = (50.0, 50.0)

SECONDARY_STARTS = (
    (25.0, 30.0),
    (70.0, 35.0),
    (60.0, 75.0),
)
"""Initial positions of the fixed set of secondary actors."""


# =============================================================================
# REPORTING PARAMETERS
# =============================================================================

SIMULATOR_VERSION = "CARLA 0.9.15"

COMPLIANCE_LABELS = {
    "iso26262": "ASIL-D safety validation executed",
    "autosar": "Adaptive Platform service patterns",
    "misra": "MISRA C++ static analysis executed",
    "soa": "Service-oriented architecture ready",
}
"""Fixed compliance section of every exported report."""

SHORT_HASH_LENGTH = 8
