"""Runtime configuration for the SDV simulator.

Settings are read from environment variables, each with a default:

- SDVSIM_EXPORT_DIR: directory reports are written to (default: reports)
- SDVSIM_REPORT_PREFIX: filename prefix for exports (default: sdv-simulation)
- SDVSIM_TIME_SCALE: step speed-up factor, > 0 (default: 1.0)
- SDVSIM_LOG_LEVEL: logging level name (default: WARNING)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_EXPORT_DIR = "reports"
DEFAULT_REPORT_PREFIX = "sdv-simulation"
DEFAULT_TIME_SCALE = 1.0
DEFAULT_LOG_LEVEL = "WARNING"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration values."""

    export_dir: Path
    report_prefix: str
    time_scale: float
    log_level: str


def get_export_dir() -> Path:
    """Get configured export directory from environment."""
    return Path(os.environ.get("SDVSIM_EXPORT_DIR", DEFAULT_EXPORT_DIR))


def get_report_prefix() -> str:
    """Get configured report filename prefix from environment."""
    prefix = os.environ.get("SDVSIM_REPORT_PREFIX", DEFAULT_REPORT_PREFIX).strip()
    if not prefix:
        raise ValueError("SDVSIM_REPORT_PREFIX must not be empty")
    return prefix


def get_time_scale() -> float:
    """Get configured step time scale from environment.

    Raises:
        ValueError: If the value is not a positive number
    """
    raw = os.environ.get("SDVSIM_TIME_SCALE")
    if raw is None:
        return DEFAULT_TIME_SCALE
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"SDVSIM_TIME_SCALE must be a number, got '{raw}'") from None
    if value <= 0:
        raise ValueError(f"SDVSIM_TIME_SCALE must be positive, got {value}")
    return value


def get_log_level() -> str:
    """Get configured log level name from environment."""
    level = os.environ.get("SDVSIM_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if level not in logging.getLevelNamesMapping():
        raise ValueError(f"Unknown SDVSIM_LOG_LEVEL '{level}'")
    return level


def get_settings() -> Settings:
    return Settings(
        export_dir=get_export_dir(),
        report_prefix=get_report_prefix(),
        time_scale=get_time_scale(),
        log_level=get_log_level(),
    )


def configure_logging(level: str | None = None, handlers: list[logging.Handler] | None = None) -> None:
    """Install root handlers (stderr by default) at the configured level."""
    logging.basicConfig(level=level or get_log_level(), format=LOG_FORMAT, handlers=handlers)
