"""Constant-depth AMM pricing model.

Price impact is extrapolated from one empirically observed
(trade size, impact) point per pair, scaling with the square root of
trade size. Pairs without a direct pool are routed through a hub asset.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .assets import pair_key
from .config import ErrorKind, UNAVAILABLE_IMPACT_SENTINEL
from .models import VenueQuote
from .provider import QuoteProvider

HUB_PENALTY = 1.2  # impact multiplier for a two-hop route


@dataclass(frozen=True)
class AmmPool:
    """Reference data for one pair on an AMM venue.

    ``reference_trade_usd``/``reference_impact_percent`` is None when the
    pair is listed but no usable liquidity has been observed.
    ``min_impact_percent`` overrides the venue-wide floor for this pair.
    """

    base: str
    quote: str
    liquidity_usd: float
    reference_trade_usd: Optional[float] = None
    reference_impact_percent: Optional[float] = None
    min_impact_percent: Optional[float] = None

    @property
    def key(self) -> Tuple[str, str]:
        return pair_key(self.base, self.quote)

    @property
    def has_reference(self) -> bool:
        return (
            self.reference_trade_usd is not None
            and self.reference_trade_usd > 0
            and self.reference_impact_percent is not None
        )


class ConstantDepthAMMProvider(QuoteProvider):
    """AMM venue priced from per-pair reference impact points."""

    def __init__(
        self,
        name: str,
        pools: Iterable[AmmPool],
        fee_percent: float = 0.3,
        min_impact_percent: float = 0.1,
        hub_asset: Optional[str] = None,
        direct_pairs: Optional[Iterable[Tuple[str, str]]] = None,
        execution_time: str = "1.5s",
        expected_seconds: float = 1.5,
        note: str = "",
        **kwargs,
    ):
        super().__init__(name, **kwargs)
        if fee_percent < 0:
            raise ValueError("fee_percent must be non-negative")
        self._pools: Dict[Tuple[str, str], AmmPool] = {p.key: p for p in pools}
        self.fee_percent = fee_percent
        self.min_impact_percent = min_impact_percent
        self.hub_asset = hub_asset
        # Without an explicit list every pool is a direct pair
        self._direct = (
            self._pair_keys(direct_pairs) if direct_pairs is not None else set(self._pools)
        )
        self.execution_time = execution_time
        self.expected_seconds = expected_seconds
        self.note = note or f"{name} AMM pool"

    def supported_pairs(self) -> List[Tuple[str, str]]:
        return [(p.base, p.quote) for p in self._pools.values()]

    def path_for(self, from_asset: str, to_asset: str) -> Tuple[str, ...]:
        if self.hub_asset is None or pair_key(from_asset, to_asset) in self._direct:
            return (from_asset, to_asset)
        if self.hub_asset in (from_asset, to_asset):
            return (from_asset, to_asset)
        return (from_asset, self.hub_asset, to_asset)

    def estimate_impact(self, from_asset: str, to_asset: str, trade_usd: float) -> float:
        """Impact in percent, or the unavailable sentinel for unseen pairs."""
        pool = self._pools.get(pair_key(from_asset, to_asset))
        if pool is None or not pool.has_reference:
            return UNAVAILABLE_IMPACT_SENTINEL
        scale = math.sqrt(trade_usd / pool.reference_trade_usd)
        floor = (
            pool.min_impact_percent if pool.min_impact_percent is not None
            else self.min_impact_percent
        )
        impact = max(floor, pool.reference_impact_percent * scale)
        if len(self.path_for(from_asset, to_asset)) > 2:
            impact *= HUB_PENALTY
        return impact

    def _price(self, from_asset: str, to_asset: str, amount: int, trade_usd: float) -> VenueQuote:
        impact = self.estimate_impact(from_asset, to_asset, trade_usd)
        if impact >= UNAVAILABLE_IMPACT_SENTINEL:
            return self._fail(
                ErrorKind.NO_LIQUIDITY_DATA,
                f"{self.name}: no liquidity data for {from_asset}/{to_asset}",
                from_asset, to_asset,
            )

        pool = self._pools[pair_key(from_asset, to_asset)]
        impact = round(impact, 3)
        return VenueQuote(
            venue_name=self.name,
            path=self.path_for(from_asset, to_asset),
            price_impact_percent=impact,
            fee_percent=self.fee_percent,
            estimated_execution_time=self.execution_time,
            expected_seconds=self.expected_seconds,
            liquidity_usd=pool.liquidity_usd,
            estimated_output=self._output(amount, from_asset, to_asset, impact, self.fee_percent),
            note=self.note,
        )
