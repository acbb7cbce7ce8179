"""Orderbook-depth pricing model."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from .assets import pair_key
from .config import ErrorKind
from .models import VenueQuote
from .provider import QuoteProvider

# (max trade/depth ratio, impact %), ascending; beyond the last step the
# ceiling applies
IMPACT_STEPS: Sequence[Tuple[float, float]] = (
    (0.0005, 0.02),
    (0.005, 0.10),
    (0.02, 0.35),
    (0.05, 0.75),
    (0.10, 1.25),
    (0.25, 1.75),
)
IMPACT_CEILING = 2.0

# (min trade USD, fee %), descending; larger trades pay less
FEE_TIERS: Sequence[Tuple[float, float]] = (
    (100_000, 0.10),
    (50_000, 0.15),
    (10_000, 0.20),
)
BASE_FEE = 0.25


@dataclass(frozen=True)
class OrderbookDepth:
    """Top-of-book depth and activity for one pair, in USD."""

    base: str
    quote: str
    bid_depth_usd: float
    ask_depth_usd: float
    volume_24h_usd: float

    @property
    def key(self) -> Tuple[str, str]:
        return pair_key(self.base, self.quote)

    @property
    def is_dead(self) -> bool:
        return self.volume_24h_usd <= 0 or self.bid_depth_usd <= 0 or self.ask_depth_usd <= 0

    @property
    def thin_side_usd(self) -> float:
        return min(self.bid_depth_usd, self.ask_depth_usd)


def impact_for_ratio(ratio: float) -> float:
    for max_ratio, impact in IMPACT_STEPS:
        if ratio < max_ratio:
            return impact
    return IMPACT_CEILING


def fee_for_trade(trade_usd: float) -> float:
    for min_usd, fee in FEE_TIERS:
        if trade_usd > min_usd:
            return fee
    return BASE_FEE


class OrderbookProvider(QuoteProvider):
    """Central-limit-orderbook venue."""

    def __init__(
        self,
        name: str,
        books: Iterable[OrderbookDepth],
        min_trade_usd: float = 0.0,
        execution_time: str = "On-chain orderbook execution",
        expected_seconds: float = 1.5,
        **kwargs,
    ):
        super().__init__(name, **kwargs)
        self._books: Dict[Tuple[str, str], OrderbookDepth] = {b.key: b for b in books}
        self.min_trade_usd = min_trade_usd
        self.execution_time = execution_time
        self.expected_seconds = expected_seconds

    def supported_pairs(self) -> List[Tuple[str, str]]:
        return [(b.base, b.quote) for b in self._books.values()]

    def update_book(self, book: OrderbookDepth) -> None:
        self._books[book.key] = book

    def _price(self, from_asset: str, to_asset: str, amount: int, trade_usd: float) -> VenueQuote:
        book = self._books[pair_key(from_asset, to_asset)]
        if book.is_dead:
            return self._fail(
                ErrorKind.NO_LIQUIDITY_DATA,
                f"{self.name}: no liquidity data for {from_asset}/{to_asset} "
                f"(no 24h volume or empty book)",
                from_asset, to_asset,
            )

        if trade_usd < self.min_trade_usd:
            return self._fail(
                ErrorKind.INVALID_AMOUNT,
                f"{self.name}: trade ${trade_usd:,.2f} below minimum ${self.min_trade_usd:,.0f}",
                from_asset, to_asset,
            )

        impact = impact_for_ratio(trade_usd / book.thin_side_usd)
        fee = fee_for_trade(trade_usd)

        if trade_usd > 100_000:
            note = "Best execution for very large trades via deep orderbook"
        elif trade_usd > 25_000:
            note = "Minimal slippage through limit order execution"
        else:
            note = "Professional orderbook trading with price discovery"

        return VenueQuote(
            venue_name=self.name,
            path=(from_asset, to_asset),
            price_impact_percent=impact,
            fee_percent=fee,
            estimated_execution_time=self.execution_time,
            expected_seconds=self.expected_seconds,
            liquidity_usd=book.bid_depth_usd + book.ask_depth_usd,
            estimated_output=self._output(amount, from_asset, to_asset, impact, fee),
            note=note,
        )
