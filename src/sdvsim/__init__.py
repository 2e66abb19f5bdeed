"""SDV Simulator - simulated validation runs for generated automotive code."""

__version__ = "0.1.0"
