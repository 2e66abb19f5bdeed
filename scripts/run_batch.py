#!/usr/bin/env python3
"""
Batch Validation Runs for the SDV Simulator

Runs a scenario many times on the virtual clock (no real waiting) and prints
how often runs came out clean and which steps failed most.

Usage:
    # 200 runs of the full suite with a bare source file
    python scripts/run_batch.py brake_service.cpp

    # Specific scenario, seeded, with the last report exported
    python scripts/run_batch.py response.json --scenario parking --runs 50 --seed 7 --export
"""

import argparse
import json
import sys
from pathlib import Path

from sdvsim.catalog import ScenarioId
from sdvsim.config import configure_logging, get_settings
from sdvsim.models.artifact import GeneratedArtifact, Language
from sdvsim.report.render import ExportFormat, write_report
from sdvsim.testing import run_batch, run_headless


def main():
    parser = argparse.ArgumentParser(description="Run headless validation batches")
    parser.add_argument("artifact", type=Path, help="Generated code (JSON response or source file)")
    parser.add_argument("--scenario", default=ScenarioId.FULL.value,
                        choices=[scenario.value for scenario in ScenarioId])
    parser.add_argument("--language", default=Language.CPP.value,
                        choices=[language.value for language in Language])
    parser.add_argument("--runs", type=int, default=200, help="Number of runs")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--export", action="store_true", help="Also export one report (JSON and text)")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)

    if not args.artifact.exists():
        print(f"Artifact not found: {args.artifact}", file=sys.stderr)
        return 1
    artifact = GeneratedArtifact.from_response(args.artifact.read_text(encoding="utf-8"), Language(args.language))
    if not artifact.has_code:
        print("Artifact has no code to validate", file=sys.stderr)
        return 1

    results = run_batch(artifact, args.scenario, args.runs, seed=args.seed)
    print(json.dumps(results.to_dict(), indent=2))

    if args.export:
        report = run_headless(artifact, args.scenario, seed=args.seed)
        for fmt in ExportFormat:
            path = write_report(report, settings.export_dir, settings.report_prefix, fmt)
            print(f"Exported {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
