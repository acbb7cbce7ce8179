"""Logging Configuration.

Log levels, output formats and the slow-call threshold.
"""

from dataclasses import dataclass
from enum import Enum


class LogLevel(str, Enum):
    """Log level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


@dataclass
class LoggingConfig:
    """Structured logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    include_caller: bool = True
    # Routing calls are bounded by the 3s per-venue timeout
    slow_threshold_ms: float = 2500.0
    service_name: str = "dex-routing"


DEFAULT_LOGGING_CONFIG = LoggingConfig()
