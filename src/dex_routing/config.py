"""Configuration for swap quote routing."""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Optional


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Preference(str, Enum):
    FASTEST = "fastest"
    LOWEST_COST = "lowest_cost"
    MOST_LIQUID = "most_liquid"


class Badge(str, Enum):
    RECOMMENDED = "RECOMMENDED"
    CHEAPEST = "CHEAPEST"
    FASTEST = "FASTEST"
    ADVANCED = "ADVANCED"


class ErrorKind(str, Enum):
    """Why a venue could not produce a usable quote."""

    UNSUPPORTED_PAIR = "unsupported_pair"
    VENUE_UNAVAILABLE = "venue_unavailable"
    NO_EXCHANGE_RATE = "no_exchange_rate"
    NO_LIQUIDITY_DATA = "no_liquidity_data"
    INVALID_AMOUNT = "invalid_amount"
    TIMEOUT = "timeout"
    INTERNAL_FAULT = "internal_fault"
    CONSTRAINT_VIOLATION = "constraint_violation"
    VENUE_NOT_FOUND = "venue_not_found"


# Per-venue budget for is_available() + get_quote()
QUOTE_TIMEOUT_MS = 3000.0

# Exponential smoothing factor for average call latency
LATENCY_SMOOTHING_ALPHA = 0.1

# Impact values at or above this mean "no usable liquidity"
UNAVAILABLE_IMPACT_SENTINEL = 999.0

# Execution faster than this earns the FASTEST badge
FASTEST_THRESHOLD_SECONDS = 2.0

# Additive preference boosts
URGENCY_SPEED_BOOST = 0.3
LOWEST_COST_BOOST = 0.2
MOST_LIQUID_BOOST = 0.2

# Default scoring weights
DEFAULT_WEIGHTS: Dict[str, float] = {
    "price_impact": 0.35,
    "fee": 0.35,
    "speed": 0.20,
    "liquidity_depth": 0.05,
    "availability": 0.05,
}

# Heuristic speed scores for qualitative execution labels
SPEED_LABEL_SCORES: Dict[str, float] = {
    "orderbook": 85.0,
    "instant": 100.0,
    "fast": 90.0,
}
DEFAULT_SPEED_SCORE = 75.0


@dataclass
class ScoringWeights:
    """Weights for the five scoring factors.

    Conventionally sum to 1.0, but this is not enforced.
    """

    price_impact: float = DEFAULT_WEIGHTS["price_impact"]
    fee: float = DEFAULT_WEIGHTS["fee"]
    speed: float = DEFAULT_WEIGHTS["speed"]
    liquidity_depth: float = DEFAULT_WEIGHTS["liquidity_depth"]
    availability: float = DEFAULT_WEIGHTS["availability"]

    def __post_init__(self):
        for f in fields(self):
            _check_weight(f.name, getattr(self, f.name))

    @property
    def total(self) -> float:
        return sum(getattr(self, f.name) for f in fields(self))

    def merged(self, **partial: float) -> "ScoringWeights":
        """Return a copy with the given weights replaced.

        Raises:
            ValueError: On an unknown weight name or a negative value.
        """
        known = {f.name for f in fields(self)}
        unknown = set(partial) - known
        if unknown:
            raise ValueError(f"Unknown scoring weight(s): {sorted(unknown)}")
        return replace(self, **partial)

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _check_weight(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Scoring weight '{name}' must be a number, got {value!r}")
    if value < 0:
        raise ValueError(f"Scoring weight '{name}' must be non-negative, got {value}")


@dataclass
class RoutingConfig:
    """Master routing configuration."""

    quote_timeout_ms: float = QUOTE_TIMEOUT_MS
    diagnostic_timeout_ms: Optional[float] = None
    latency_alpha: float = LATENCY_SMOOTHING_ALPHA
    weights: ScoringWeights = field(default_factory=ScoringWeights)

    def __post_init__(self):
        if self.quote_timeout_ms <= 0:
            raise ValueError("quote_timeout_ms must be positive")
        if self.diagnostic_timeout_ms is not None and self.diagnostic_timeout_ms <= 0:
            raise ValueError("diagnostic_timeout_ms must be positive when set")
        if not 0 < self.latency_alpha <= 1:
            raise ValueError("latency_alpha must be in (0, 1]")

    @property
    def quote_timeout_s(self) -> float:
        return self.quote_timeout_ms / 1000.0

    @property
    def diagnostic_timeout_s(self) -> Optional[float]:
        if self.diagnostic_timeout_ms is None:
            return None
        return self.diagnostic_timeout_ms / 1000.0

    @classmethod
    def from_settings(cls, settings: Any) -> "RoutingConfig":
        """Build from a ``src.settings.Settings`` instance."""
        return cls(
            quote_timeout_ms=settings.quote_timeout_ms,
            diagnostic_timeout_ms=settings.diagnostic_timeout_ms,
            latency_alpha=settings.latency_alpha,
            weights=ScoringWeights(
                price_impact=settings.weight_price_impact,
                fee=settings.weight_fee,
                speed=settings.weight_speed,
                liquidity_depth=settings.weight_liquidity_depth,
                availability=settings.weight_availability,
            ),
        )
