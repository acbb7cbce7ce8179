"""Logging Setup.

One-call configuration of the root logger: JSON lines for production,
colored console output for development.
"""

import json
import logging
import os
import sys
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from src.logging_config.config import DEFAULT_LOGGING_CONFIG, LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import get_context_dict

# Extra attributes copied from a LogRecord when callers pass them via `extra=`
RECORD_EXTRAS = ("duration_ms", "venue", "error_kind", "venues", "extra_data")


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter.

    One JSON object per line: timestamp, level, logger, message, service,
    the bound route context and any known extras.
    """

    def __init__(self, service_name: str = "dex-routing", include_caller: bool = True):
        super().__init__()
        self.service_name = service_name
        self.include_caller = include_caller

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }

        if self.include_caller:
            entry["module"] = record.module
            entry["function"] = record.funcName
            entry["line"] = record.lineno

        ctx = get_context_dict()
        if ctx:
            entry.update(ctx)

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        for key in RECORD_EXTRAS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored, human-readable formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S.%f")[:-3]

        ctx = get_context_dict()
        ctx_str = ""
        if ctx:
            ctx_str = " [" + ", ".join(f"{k}={v}" for k, v in ctx.items()) + "]"

        line = (
            f"{color}{timestamp} {record.levelname:8s}{self.RESET} "
            f"{record.name}: {record.getMessage()}{ctx_str}"
        )
        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def resolve_config(config: Optional[LoggingConfig] = None) -> LoggingConfig:
    """Apply DEXROUTE_LOG_LEVEL / DEXROUTE_LOG_FORMAT overrides."""
    config = config or DEFAULT_LOGGING_CONFIG

    env_level = os.environ.get("DEXROUTE_LOG_LEVEL", "").upper()
    if env_level in LogLevel.__members__:
        config = replace(config, level=LogLevel(env_level))

    env_format = os.environ.get("DEXROUTE_LOG_FORMAT", "").lower()
    if env_format in {f.value for f in LogFormat}:
        config = replace(config, format=LogFormat(env_format))

    return config


def configure_logging(config: Optional[LoggingConfig] = None) -> LoggingConfig:
    """Configure the root logger. Call once at startup.

    Returns:
        The effective configuration after environment overrides.
    """
    config = resolve_config(config)

    if config.format == LogFormat.JSON:
        formatter: logging.Formatter = StructuredFormatter(
            service_name=config.service_name,
            include_caller=config.include_caller,
        )
    else:
        formatter = ConsoleFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.level.value))

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    return config


def get_logger(name: str) -> logging.Logger:
    """Standard library logger; formatted by whatever configure_logging set up."""
    return logging.getLogger(name)
