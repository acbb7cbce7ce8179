"""Cumulative performance metrics for a route aggregator."""

import logging
import threading
from datetime import datetime, timezone

from .config import LATENCY_SMOOTHING_ALPHA
from .models import PerformanceMetrics

logger = logging.getLogger(__name__)


class MetricsTracker:
    """Lock-guarded counters updated once per routing call.

    Average latency is exponentially smoothed:
    ``avg = (1 - alpha) * avg + alpha * latency``, seeded with the first
    call's latency.
    """

    def __init__(self, alpha: float = LATENCY_SMOOTHING_ALPHA):
        if not 0 < alpha <= 1:
            raise ValueError("alpha must be in (0, 1]")
        self.alpha = alpha
        self._lock = threading.Lock()
        self._total_requests = 0
        self._total_timeouts = 0
        self._total_venue_queries = 0
        self._avg_latency_ms = 0.0
        self._last_request_at = None

    def record(self, latency_ms: float, venues_queried: int, timeouts: int = 0) -> None:
        with self._lock:
            if self._total_requests == 0:
                self._avg_latency_ms = latency_ms
            else:
                self._avg_latency_ms = (
                    (1 - self.alpha) * self._avg_latency_ms + self.alpha * latency_ms
                )
            self._total_requests += 1
            self._total_timeouts += timeouts
            self._total_venue_queries += venues_queried
            self._last_request_at = datetime.now(timezone.utc)

    def snapshot(self) -> PerformanceMetrics:
        with self._lock:
            return PerformanceMetrics(
                total_requests=self._total_requests,
                total_timeouts=self._total_timeouts,
                total_venue_queries=self._total_venue_queries,
                average_latency_ms=self._avg_latency_ms,
                last_request_at=self._last_request_at,
            )

    def reset(self) -> None:
        with self._lock:
            self._total_requests = 0
            self._total_timeouts = 0
            self._total_venue_queries = 0
            self._avg_latency_ms = 0.0
            self._last_request_at = None
        logger.info("Performance metrics reset")
