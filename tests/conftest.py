"""Shared pytest fixtures and markers for all tests."""

import random

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "cli: marks Textual application tests"
    )


SAMPLE_CODE = """#include <ara/com/types.h>

namespace brake {
class BrakeControlService {
 public:
  void OnWheelSpeed(const WheelSpeeds& speeds);
};
}  // namespace brake
"""


@pytest.fixture
def sample_artifact():
    """Provide a generated C++ artifact with code."""
    from sdvsim.models.artifact import GeneratedArtifact, Language
    return GeneratedArtifact(
        language=Language.CPP,
        filename="brake_control_service.cpp",
        code=SAMPLE_CODE,
        explanation="Brake control service skeleton",
        standards=["AUTOSAR Adaptive", "ISO 26262"],
    )


@pytest.fixture
def empty_artifact():
    """Provide an artifact whose code is empty."""
    from sdvsim.models.artifact import GeneratedArtifact, Language
    return GeneratedArtifact(language=Language.RUST, filename="empty.rs", code="")


@pytest.fixture
def whitespace_artifact():
    """Provide an artifact whose code is only whitespace."""
    from sdvsim.models.artifact import GeneratedArtifact, Language
    return GeneratedArtifact(language=Language.RUST, filename="blank.rs", code="  \n\t")


@pytest.fixture
def scheduler():
    """Provide a virtual-clock scheduler."""
    from sdvsim.testing import ManualScheduler
    return ManualScheduler()


@pytest.fixture
def metrics_rng():
    """Provide a seeded random source for synthetic metrics."""
    return random.Random(1234)
