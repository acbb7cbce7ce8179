"""Performance Logging.

Decorator that times sync or async callables and flags slow calls.
"""

import inspect
import functools
import logging
import time
from typing import Any, Callable, Optional

from src.logging_config.config import DEFAULT_LOGGING_CONFIG


def log_performance(
    threshold_ms: Optional[float] = None,
    logger_name: Optional[str] = None,
) -> Callable:
    """Log execution time of the decorated function.

    Calls under the threshold are logged at DEBUG, slower ones at WARNING,
    failures at ERROR (the exception is re-raised).

    Example:
        @log_performance(threshold_ms=3500)
        async def get_best_routes(self, request):
            ...
    """
    if threshold_ms is None:
        threshold_ms = DEFAULT_LOGGING_CONFIG.slow_threshold_ms

    def decorator(func: Callable) -> Callable:
        _logger = logging.getLogger(logger_name or func.__module__)
        func_name = func.__qualname__

        def _report(start: float, failed: Optional[BaseException]) -> None:
            duration_ms = (time.perf_counter() - start) * 1000
            extra = {"duration_ms": round(duration_ms, 2)}
            if failed is not None:
                _logger.error(
                    f"{func_name} failed after {duration_ms:.1f}ms: {type(failed).__name__}",
                    extra=extra,
                )
            elif duration_ms >= threshold_ms:
                _logger.warning(f"Slow operation: {func_name} took {duration_ms:.1f}ms", extra=extra)
            else:
                _logger.debug(f"{func_name} completed in {duration_ms:.1f}ms", extra=extra)

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                start = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:
                    _report(start, exc)
                    raise
                _report(start, None)
                return result
            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _report(start, exc)
                raise
            _report(start, None)
            return result
        return sync_wrapper

    return decorator
