"""Multi-venue swap quote aggregation and scoring."""

from .config import (
    Urgency,
    Preference,
    Badge,
    ErrorKind,
    ScoringWeights,
    RoutingConfig,
)
from .models import (
    VenueQuote,
    Quote,
    RouteRequest,
    PerformanceMetrics,
)
from .assets import AssetInfo, AssetBook
from .provider import QuoteProvider
from .amm import AmmPool, ConstantDepthAMMProvider
from .orderbook import OrderbookDepth, OrderbookProvider
from .flat import FlatRateProvider
from .registry import VenueRegistry
from .fanout import Outcome, fan_out, run_bounded
from .scoring import QuoteScorer, rank_quotes
from .constraints import SlippageFilter
from .preferences import PreferenceAdjuster
from .metrics import MetricsTracker
from .venues import default_providers
from .aggregator import RouteAggregator
from .report import quotes_to_frame, format_routes_table

__all__ = [
    # Config
    "Urgency",
    "Preference",
    "Badge",
    "ErrorKind",
    "ScoringWeights",
    "RoutingConfig",
    # Models
    "VenueQuote",
    "Quote",
    "RouteRequest",
    "PerformanceMetrics",
    # Providers
    "AssetInfo",
    "AssetBook",
    "QuoteProvider",
    "AmmPool",
    "ConstantDepthAMMProvider",
    "OrderbookDepth",
    "OrderbookProvider",
    "FlatRateProvider",
    "default_providers",
    # Core
    "VenueRegistry",
    "Outcome",
    "fan_out",
    "run_bounded",
    "QuoteScorer",
    "rank_quotes",
    "SlippageFilter",
    "PreferenceAdjuster",
    "MetricsTracker",
    "RouteAggregator",
    # Report
    "quotes_to_frame",
    "format_routes_table",
]
