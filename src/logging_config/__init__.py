"""Structured logging for the swap routing engine.

JSON or console output, per-call route context bound to every log line,
and timing of routing calls.
"""

from src.logging_config.config import LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import RouteContext, generate_route_id
from src.logging_config.performance import log_performance
from src.logging_config.setup import configure_logging, get_logger

__all__ = [
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "RouteContext",
    "configure_logging",
    "generate_route_id",
    "get_logger",
    "log_performance",
]
