"""Renderings and file export for simulation reports.

Both renderings start from Report.to_document(). The plain-text layout only
reads values out of that document, so every value it shows is present,
unchanged, in the JSON export.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path

from sdvsim.report.synthesizer import Report

logger = logging.getLogger(__name__)

RULE_WIDTH = 70
LABEL_WIDTH = 18


class ExportFormat(Enum):
    """Available export renderings."""

    JSON = "json"
    TEXT = "txt"


# Section title -> (label, document section, document key)
TEXT_FIELDS: dict[str, list[tuple[str, str, str]]] = {
    "CONFIGURATION": [
        ("Scenario", "metadata", "scenario"),
        ("Map", "metadata", "map"),
        ("Language", "metadata", "language"),
        ("Component Type", "metadata", "componentType"),
        ("Total Frames", "metadata", "totalFrames"),
        ("Simulation Time", "metadata", "simulationTimeMs"),
    ],
    "SUMMARY": [
        ("Total Tests", "summary", "totalTests"),
        ("Passed", "summary", "passed"),
        ("Failed", "summary", "failed"),
        ("Pass Rate", "summary", "passRate"),
        ("Status", "summary", "status"),
    ],
    "CODE INFORMATION": [
        ("Language", "codeInfo", "language"),
        ("Component Type", "codeInfo", "componentType"),
        ("Lines of Code", "codeInfo", "linesOfCode"),
        ("Short Hash", "codeInfo", "shortHash"),
    ],
}

UNITS = {"simulationTimeMs": " ms"}


def render_json(report: Report) -> str:
    return json.dumps(report.to_document(), indent=2)


def _field(label: str, value: object, unit: str = "") -> str:
    return f"{label + ':':<{LABEL_WIDTH}}{value}{unit}"


def _section(title: str) -> list[str]:
    return ["", title, "-" * RULE_WIDTH]


def render_text(report: Report) -> str:
    """Human-readable report with a fixed section layout."""
    document = report.to_document()
    metadata = document["metadata"]

    lines = [
        "=" * RULE_WIDTH,
        "SDV SIMULATION VALIDATION REPORT",
        "=" * RULE_WIDTH,
        _field("Generated", metadata["timestamp"]),
        _field("Simulator", metadata["simulatorVersion"]),
    ]

    def add_fields(title: str) -> None:
        lines.extend(_section(title))
        for label, section, key in TEXT_FIELDS[title]:
            lines.append(_field(label, document[section][key], UNITS.get(key, "")))

    add_fields("CONFIGURATION")
    add_fields("SUMMARY")

    lines.extend(_section("TEST RESULTS"))
    for result in document["testResults"]:
        lines.append(
            f"{result['id']:>3}. [{result['status']}] {result['name']} "
            f"({result['category']}, {result['duration']} ms)"
        )
        lines.append(f"     {result['details']}")
        for name, value in result["metrics"].items():
            lines.append(f"     {name}: {value}")

    lines.extend(_section("COMPLIANCE"))
    for key, label in document["compliance"].items():
        lines.append(_field(key, label))

    add_fields("CODE INFORMATION")
    lines.append("=" * RULE_WIDTH)
    return "\n".join(lines) + "\n"


def export_filename(prefix: str, report: Report, fmt: ExportFormat) -> str:
    """'<prefix>-report-<unixMillis>.<ext>' using the report's timestamp."""
    unix_millis = int(report.generated_at.timestamp() * 1000)
    return f"{prefix}-report-{unix_millis}.{fmt.value}"


def render(report: Report, fmt: ExportFormat) -> str:
    if fmt == ExportFormat.JSON:
        return render_json(report)
    return render_text(report)


def write_report(report: Report, directory: Path, prefix: str, fmt: ExportFormat = ExportFormat.JSON) -> Path:
    """Write a rendering to directory and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(prefix, report, fmt)
    path.write_text(render(report, fmt), encoding="utf-8")
    logger.info(f"Report written: {path}")
    return path
