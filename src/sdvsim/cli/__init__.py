"""SDV Simulator CLI module.

Provides a Textual-based terminal interface for watching validation runs.

Usage:
    sdvsim path/to/response.json --scenario parking

Or directly:
    python -m sdvsim.cli.app
"""

from sdvsim.cli.app import SimulatorApp, main

__all__ = ["SimulatorApp", "main"]
