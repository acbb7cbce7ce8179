"""Route aggregator: concurrent multi-venue quoting, scoring and ranking."""

import logging
import random
import time
from typing import Any, Dict, List, Optional

from src.logging_config import RouteContext, log_performance

from .config import ErrorKind, RoutingConfig, ScoringWeights
from .constraints import SlippageFilter
from .fanout import Outcome, fan_out, run_bounded
from .metrics import MetricsTracker
from .models import PerformanceMetrics, Quote, RouteRequest, VenueQuote
from .preferences import PreferenceAdjuster
from .provider import QuoteProvider
from .registry import VenueRegistry
from .scoring import QuoteScorer
from .venues import default_providers

logger = logging.getLogger(__name__)


class RouteAggregator:
    """Fans a swap request out to every registered venue and ranks the answers.

    Every registered venue yields exactly one Quote per call, whether it
    priced the trade, failed, or missed the deadline. The aggregator owns
    its registry, scorer and metrics; nothing is shared between instances.

    Example:
        aggregator = RouteAggregator.create_default()
        routes = await aggregator.get_best_routes(
            RouteRequest("ckBTC", "ckUSDC", 10_000_000)
        )
        best = routes[0]
    """

    def __init__(
        self,
        registry: Optional[VenueRegistry] = None,
        config: Optional[RoutingConfig] = None,
    ):
        self.config = config or RoutingConfig()
        self.registry = registry if registry is not None else VenueRegistry()
        self.scorer = QuoteScorer(self.config.weights)
        self.metrics = MetricsTracker(alpha=self.config.latency_alpha)
        self.slippage_filter = SlippageFilter()
        self.preferences = PreferenceAdjuster()

    @classmethod
    def create_default(
        cls,
        rng: Optional[random.Random] = None,
        settings: Any = None,
        simulate_latency: Optional[bool] = None,
    ) -> "RouteAggregator":
        """Aggregator wired with the ICPSwap, KongSwap and ICDEX reference venues."""
        config = RoutingConfig.from_settings(settings) if settings is not None else None
        if simulate_latency is None:
            simulate_latency = settings.simulate_latency if settings is not None else True
        registry = VenueRegistry(default_providers(rng=rng, simulate_latency=simulate_latency))
        return cls(registry=registry, config=config)

    # -- routing ------------------------------------------------------

    @log_performance(threshold_ms=3500)
    async def get_best_routes(self, request: RouteRequest) -> List[Quote]:
        """Quote ``request`` on every venue and return them best first."""
        providers = self.registry.snapshot()
        if not providers:
            logger.info(f"No venues registered; nothing to route for {request.pair}")
            return []

        order = {p.name: i for i, p in enumerate(providers)}
        timeout_s = self.config.quote_timeout_s

        with RouteContext(pair=request.pair) as ctx:
            ctx.bind(venues=len(providers))
            start = time.perf_counter()

            tasks = [
                self._query(p, request.from_asset, request.to_asset, request.amount)
                for p in providers
            ]
            outcomes = await fan_out(tasks, timeout_s)
            quotes = [
                self._to_quote(p, outcome, request)
                for p, outcome in zip(providers, outcomes)
            ]

            quotes = self.scorer.score_all(quotes, order)
            quotes = self.slippage_filter.apply(
                quotes, request.slippage_tolerance_percent, order
            )
            quotes = self.preferences.apply(quotes, request, order)

            latency_ms = (time.perf_counter() - start) * 1000
            timeouts = sum(1 for o in outcomes if o.timed_out)
            self.metrics.record(latency_ms, venues_queried=len(providers), timeouts=timeouts)

            usable = sum(1 for q in quotes if not q.is_error)
            logger.info(
                f"Routed {request.pair} amount={request.amount}: "
                f"{usable}/{len(quotes)} usable quotes, {timeouts} timeouts, "
                f"best={quotes[0].venue_name} ({quotes[0].score}) in {latency_ms:.0f}ms"
            )
        return quotes

    async def get_quote_from_venue(
        self, venue_name: str, from_asset: str, to_asset: str, amount: int
    ) -> Quote:
        """Quote a single venue, bypassing the fan-out.

        No deadline unless ``diagnostic_timeout_ms`` is configured. The
        quote is scored on its own, so it never carries a badge.
        """
        provider = self.registry.get(venue_name)
        if provider is None:
            logger.warning(f"Diagnostic quote for unknown venue: {venue_name}")
            return Quote.from_venue_quote(
                VenueQuote.failure(
                    venue_name,
                    ErrorKind.VENUE_NOT_FOUND,
                    f"Venue {venue_name} not found",
                    path=(from_asset, to_asset),
                )
            )

        timeout_s = self.config.diagnostic_timeout_s
        outcome = await run_bounded(
            self._query(provider, from_asset, to_asset, amount), timeout_s
        )
        timeout_ms = self.config.diagnostic_timeout_ms
        quote = self._convert(provider, outcome, from_asset, to_asset, timeout_ms)
        quote.score = self.scorer.score_quote(quote)
        quote.badge = None
        return quote

    get_quote_from_dex = get_quote_from_venue

    async def _query(
        self, provider: QuoteProvider, from_asset: str, to_asset: str, amount: int
    ) -> VenueQuote:
        # One availability draw per venue query
        if not await provider.is_available():
            return VenueQuote.failure(
                provider.name,
                ErrorKind.VENUE_UNAVAILABLE,
                f"{provider.name} temporarily unavailable",
                path=(from_asset, to_asset),
            )
        return await provider.get_quote(from_asset, to_asset, amount)

    def _to_quote(
        self, provider: QuoteProvider, outcome: Outcome, request: RouteRequest
    ) -> Quote:
        return self._convert(
            provider, outcome, request.from_asset, request.to_asset,
            self.config.quote_timeout_ms,
        )

    def _convert(
        self,
        provider: QuoteProvider,
        outcome: Outcome,
        from_asset: str,
        to_asset: str,
        timeout_ms: Optional[float],
    ) -> Quote:
        path = (from_asset, to_asset)
        if outcome.timed_out:
            logger.warning(
                f"{provider.name} timed out after {outcome.elapsed_ms:.0f}ms",
                extra={"venue": provider.name, "error_kind": ErrorKind.TIMEOUT.value},
            )
            vq = VenueQuote.failure(
                provider.name, ErrorKind.TIMEOUT,
                f"request timeout (>{timeout_ms:.0f}ms)", path=path,
            )
        elif outcome.error is not None:
            exc = outcome.error
            logger.warning(
                f"{provider.name} quote failed: {type(exc).__name__}: {exc}",
                extra={"venue": provider.name, "error_kind": ErrorKind.INTERNAL_FAULT.value},
            )
            vq = VenueQuote.failure(
                provider.name, ErrorKind.INTERNAL_FAULT,
                f"quote failed: {type(exc).__name__}: {exc}", path=path,
            )
        else:
            vq = outcome.value
            if vq.is_error:
                logger.debug(f"{provider.name}: {vq.error_kind.value}: {vq.error_detail}")
        return Quote.from_venue_quote(vq)

    # -- venues -------------------------------------------------------

    def get_available_venues(self) -> List[str]:
        return self.registry.list_venue_names()

    def register_provider(self, provider: QuoteProvider) -> None:
        self.registry.register(provider)

    def unregister_provider(self, name: str) -> bool:
        return self.registry.unregister(name)

    # -- weights ------------------------------------------------------

    def update_scoring_weights(
        self, partial: Optional[Dict[str, float]] = None, **kwargs: float
    ) -> ScoringWeights:
        """Merge new weight values over the current ones.

        Raises:
            ValueError: On an unknown weight name or a negative value.
        """
        updates = {**(partial or {}), **kwargs}
        weights = self.scorer.update_weights(**updates)
        self.config.weights = weights
        return weights

    def get_scoring_weights(self) -> ScoringWeights:
        return self.scorer.weights

    # -- metrics ------------------------------------------------------

    def get_performance_metrics(self) -> PerformanceMetrics:
        return self.metrics.snapshot()

    def reset_metrics(self) -> None:
        self.metrics.reset()

    def get_routing_status(self) -> Dict[str, Any]:
        venues = self.get_available_venues()
        return {
            "active_venues": len(venues),
            "venue_names": venues,
            "performance_metrics": self.get_performance_metrics().to_dict(),
            "scoring_weights": self.get_scoring_weights().to_dict(),
            "routing_features": {
                "parallel_execution": True,
                "timeout_protection": f"{self.config.quote_timeout_ms:.0f}ms",
                "slippage_filter": True,
                "dynamic_scoring": True,
                "trade_size_aware_pricing": True,
            },
        }
