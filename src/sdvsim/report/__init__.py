"""Report synthesis and export.

Usage:
    from sdvsim.report import ReportMeta, synthesize, render_text

    report = synthesize(run, ReportMeta(artifact=artifact))
    print(render_text(report))
"""

from sdvsim.report.render import (
    ExportFormat,
    export_filename,
    render,
    render_json,
    render_text,
    write_report,
)
from sdvsim.report.synthesizer import (
    CodeInfo,
    IncompleteRunError,
    Report,
    ReportMeta,
    ReportMetadata,
    ReportSummary,
    StepResult,
    format_pass_rate,
    synthesize,
)

__all__ = [
    # Models
    "Report",
    "ReportMeta",
    "ReportMetadata",
    "ReportSummary",
    "StepResult",
    "CodeInfo",
    "IncompleteRunError",
    # Synthesis
    "format_pass_rate",
    "synthesize",
    # Rendering
    "ExportFormat",
    "export_filename",
    "render",
    "render_json",
    "render_text",
    "write_report",
]
