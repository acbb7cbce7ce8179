"""Data models for swap quote routing."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .config import Badge, ErrorKind, Preference, Urgency


@dataclass(frozen=True)
class VenueQuote:
    """Raw quote produced by a venue provider.

    Carries pricing data only. Score and badge are assigned later by
    the scorer, so this type has no field for them.
    """

    venue_name: str
    path: Tuple[str, ...] = ()
    price_impact_percent: float = 0.0
    fee_percent: float = 0.0
    estimated_execution_time: str = "N/A"
    expected_seconds: Optional[float] = None
    liquidity_usd: float = 0.0
    estimated_output: int = 0
    note: str = ""
    error_kind: Optional[ErrorKind] = None
    error_detail: Optional[str] = None

    def __post_init__(self):
        if (self.error_kind is None) != (self.error_detail is None):
            raise ValueError("error_kind and error_detail must be set together")

    @property
    def is_error(self) -> bool:
        return self.error_kind is not None

    @classmethod
    def failure(
        cls,
        venue_name: str,
        kind: ErrorKind,
        detail: str,
        path: Tuple[str, ...] = (),
    ) -> "VenueQuote":
        return cls(
            venue_name=venue_name,
            path=path,
            note=f"{venue_name} unavailable",
            error_kind=kind,
            error_detail=detail,
        )


@dataclass
class Quote:
    """Normalized, scored quote for one venue in one routing call."""

    venue_name: str
    path: Tuple[str, ...] = ()
    price_impact_percent: float = 0.0
    fee_percent: float = 0.0
    estimated_execution_time: str = "N/A"
    expected_seconds: Optional[float] = None
    liquidity_usd: float = 0.0
    estimated_output: int = 0
    score: float = 0.0
    badge: Optional[Badge] = None
    rationale: str = ""
    error_kind: Optional[ErrorKind] = None
    error_detail: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error_kind is not None

    @property
    def hops(self) -> int:
        return max(len(self.path) - 1, 0)

    def fail(self, kind: ErrorKind, detail: str) -> None:
        """Turn this quote into an error entry."""
        self.error_kind = kind
        self.error_detail = detail
        self.score = 0.0
        self.badge = None

    @classmethod
    def from_venue_quote(cls, vq: VenueQuote) -> "Quote":
        return cls(
            venue_name=vq.venue_name,
            path=tuple(vq.path),
            price_impact_percent=vq.price_impact_percent,
            fee_percent=vq.fee_percent,
            estimated_execution_time=vq.estimated_execution_time,
            expected_seconds=vq.expected_seconds,
            liquidity_usd=vq.liquidity_usd,
            estimated_output=vq.estimated_output,
            rationale=vq.note,
            error_kind=vq.error_kind,
            error_detail=vq.error_detail,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "venue_name": self.venue_name,
            "path": list(self.path),
            "price_impact_percent": self.price_impact_percent,
            "fee_percent": self.fee_percent,
            "estimated_execution_time": self.estimated_execution_time,
            "expected_seconds": self.expected_seconds,
            "liquidity_usd": self.liquidity_usd,
            "estimated_output": self.estimated_output,
            "score": self.score,
            "badge": self.badge.value if self.badge else None,
            "rationale": self.rationale,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error_detail": self.error_detail,
        }


@dataclass
class RouteRequest:
    """A caller's trade intent.

    ``amount`` is in the source asset's smallest denomination.
    """

    from_asset: str
    to_asset: str
    amount: int
    urgency: Urgency = Urgency.MEDIUM
    preference: Optional[Preference] = None
    slippage_tolerance_percent: Optional[float] = None

    def __post_init__(self):
        if not self.from_asset or not self.to_asset:
            raise ValueError("from_asset and to_asset are required")
        if self.from_asset == self.to_asset:
            raise ValueError(f"Cannot route {self.from_asset} to itself")
        self.urgency = Urgency(self.urgency) if self.urgency is not None else Urgency.MEDIUM
        if self.preference is not None:
            self.preference = Preference(self.preference)
        if self.slippage_tolerance_percent is not None and self.slippage_tolerance_percent < 0:
            raise ValueError("slippage_tolerance_percent must be non-negative")

    @property
    def pair(self) -> str:
        return f"{self.from_asset}/{self.to_asset}"


@dataclass
class PerformanceMetrics:
    """Snapshot of aggregator performance counters."""

    total_requests: int = 0
    total_timeouts: int = 0
    total_venue_queries: int = 0
    average_latency_ms: float = 0.0
    last_request_at: Optional[datetime] = None

    @property
    def timeout_rate_percent(self) -> float:
        if self.total_venue_queries <= 0:
            return 0.0
        return self.total_timeouts / self.total_venue_queries * 100

    @property
    def uptime_percent(self) -> float:
        return 100.0 - self.timeout_rate_percent

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "total_timeouts": self.total_timeouts,
            "total_venue_queries": self.total_venue_queries,
            "average_latency_ms": round(self.average_latency_ms, 2),
            "timeout_rate_percent": round(self.timeout_rate_percent, 2),
            "uptime_percent": round(self.uptime_percent, 2),
            "last_request_at": self.last_request_at.isoformat() if self.last_request_at else None,
        }
