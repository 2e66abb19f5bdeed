"""Report synthesis for completed runs.

synthesize() is a pure function of a completed Run plus side metadata. It
never reads a clock unless no timestamp is supplied, and it never mutates the
run. Both export renderings are derived from the Report it returns, so they
cannot disagree on counts or status.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sdvsim.catalog import presentation_for
from sdvsim.models.artifact import ComponentType, GeneratedArtifact
from sdvsim.models.run import Run
from sdvsim.parameters import COMPLIANCE_LABELS, SIMULATOR_VERSION


class IncompleteRunError(ValueError):
    """Raised when a report is requested before every step is judged."""


class _DocumentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ReportMetadata(_DocumentModel):
    timestamp: str
    simulator_version: str
    scenario: str
    map: str
    language: str
    component_type: str
    total_frames: int
    simulation_time_ms: int


class ReportSummary(_DocumentModel):
    total_tests: int
    passed: int
    failed: int
    pass_rate: str
    status: Literal["PASSED", "FAILED"]


class StepResult(_DocumentModel):
    id: int
    name: str
    category: str
    status: str
    duration: int
    details: str
    metrics: dict[str, float] = Field(default_factory=dict)


class CodeInfo(_DocumentModel):
    language: str
    component_type: str
    lines_of_code: int
    short_hash: str


class Report(_DocumentModel):
    """Exportable summary of a completed run.

    Attributes:
        metadata: Run configuration and frame counters
        summary: Totals and overall status
        test_results: Per-step breakdown in execution order
        compliance: Fixed compliance labels
        code_info: Size and fingerprint of the validated code
        generated_at: Timestamp the document was stamped with
    """

    metadata: ReportMetadata
    summary: ReportSummary
    test_results: list[StepResult]
    compliance: dict[str, str]
    code_info: CodeInfo
    generated_at: datetime = Field(exclude=True)

    @property
    def passed(self) -> bool:
        return self.summary.status == "PASSED"

    def to_document(self) -> dict:
        """Structured document with camelCase keys, ready for JSON."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class ReportMeta:
    """Side information stamped onto a report.

    Attributes:
        artifact: The code that was validated
        component_type: Kind of component the code implements
        timestamp: Report time (default: now, UTC)
    """

    artifact: GeneratedArtifact
    component_type: ComponentType = ComponentType.SERVICE
    timestamp: Optional[datetime] = None


def format_pass_rate(passed: int, total: int) -> str:
    """Pass rate as a percentage string with one decimal, e.g. '88.9%'."""
    if total == 0:
        return "0.0%"
    return f"{passed / total * 100:.1f}%"


def synthesize(run: Run, meta: ReportMeta) -> Report:
    """Fold a completed run into a Report.

    Args:
        run: Run snapshot; every step must be PASSED or FAILED
        meta: Artifact, component type and timestamp

    Returns:
        Immutable Report

    Raises:
        IncompleteRunError: If the run still has pending steps
    """
    if not run.is_complete:
        raise IncompleteRunError(
            f"Cannot report on incomplete run: {run.pending_count} of {len(run.steps)} steps pending"
        )

    timestamp = meta.timestamp or datetime.now(timezone.utc)
    presentation = presentation_for(run.scenario)
    artifact = meta.artifact

    total = len(run.steps)
    passed = run.passed_count
    failed = run.failed_count

    results = [
        StepResult(
            id=step.id,
            name=step.name,
            category=step.category.value,
            status=step.status.value,
            duration=step.nominal_duration_ms,
            details=step.description,
            metrics=step.metrics.as_dict() if step.metrics else {},
        )
        for step in run.steps
    ]

    return Report(
        metadata=ReportMetadata(
            timestamp=timestamp.isoformat(),
            simulator_version=SIMULATOR_VERSION,
            scenario=presentation.display_name,
            map=presentation.map_name,
            language=artifact.language.label,
            component_type=meta.component_type.label,
            total_frames=run.frame_count,
            simulation_time_ms=run.elapsed_sim_ms,
        ),
        summary=ReportSummary(
            total_tests=total,
            passed=passed,
            failed=failed,
            pass_rate=format_pass_rate(passed, total),
            status="PASSED" if failed == 0 else "FAILED",
        ),
        test_results=results,
        compliance=dict(COMPLIANCE_LABELS),
        code_info=CodeInfo(
            language=artifact.language.label,
            component_type=meta.component_type.label,
            lines_of_code=artifact.lines_of_code,
            short_hash=artifact.short_hash,
        ),
        generated_at=timestamp,
    )
