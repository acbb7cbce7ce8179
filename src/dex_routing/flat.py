"""Flat-rate pricing model for demonstration and stub venues."""

from typing import Dict, List, Optional, Tuple

from .assets import pair_key
from .config import ErrorKind
from .models import VenueQuote
from .provider import QuoteProvider

SMALL_TRADE_USD = 25_000
SMALL_TRADE_DEDUCTION = 0.02
MIN_IMPACT = 0.06

# (min trade USD, label, expected seconds), descending
SPEED_TIERS: Tuple[Tuple[float, str, float], ...] = (
    (100_000, "15-30 seconds", 15.0),
    (10_000, "8-20 seconds", 8.0),
    (0, "5-15 seconds", 5.0),
)


class FlatRateProvider(QuoteProvider):
    """Fixed fee with a power-law impact curve.

    impact% = scale * (trade_usd / liquidity_usd) ** exponent, less a small
    deduction for trades under $25k, floored at 0.06%.
    """

    def __init__(
        self,
        name: str,
        liquidity_usd: Dict[Tuple[str, str], Optional[float]],
        fee_percent: float = 0.2,
        impact_scale: float = 100.0,
        impact_exponent: float = 0.9,
        note: str = "",
        **kwargs,
    ):
        super().__init__(name, **kwargs)
        if fee_percent < 0:
            raise ValueError("fee_percent must be non-negative")
        if impact_exponent <= 0:
            raise ValueError("impact_exponent must be positive")
        self._liquidity = {pair_key(a, b): v for (a, b), v in liquidity_usd.items()}
        self.fee_percent = fee_percent
        self.impact_scale = impact_scale
        self.impact_exponent = impact_exponent
        self.note = note or "Fast and efficient venue with competitive fees"

    def supported_pairs(self) -> List[Tuple[str, str]]:
        return list(self._liquidity)

    def estimate_impact(self, trade_usd: float, liquidity_usd: float) -> float:
        raw = self.impact_scale * (trade_usd / liquidity_usd) ** self.impact_exponent
        if trade_usd < SMALL_TRADE_USD:
            raw -= SMALL_TRADE_DEDUCTION
        return max(MIN_IMPACT, raw)

    def _price(self, from_asset: str, to_asset: str, amount: int, trade_usd: float) -> VenueQuote:
        liquidity = self._liquidity.get(pair_key(from_asset, to_asset))
        if not liquidity or liquidity <= 0:
            return self._fail(
                ErrorKind.NO_LIQUIDITY_DATA,
                f"{self.name}: no liquidity data for {from_asset}/{to_asset}",
                from_asset, to_asset,
            )

        impact = round(self.estimate_impact(trade_usd, liquidity), 3)
        label, seconds = next(
            (label, secs) for min_usd, label, secs in SPEED_TIERS if trade_usd > min_usd or min_usd == 0
        )

        return VenueQuote(
            venue_name=self.name,
            path=(from_asset, to_asset),
            price_impact_percent=impact,
            fee_percent=self.fee_percent,
            estimated_execution_time=label,
            expected_seconds=seconds,
            liquidity_usd=liquidity,
            estimated_output=self._output(amount, from_asset, to_asset, impact, self.fee_percent),
            note=self.note,
        )
