"""Quote provider interface shared by all venue pricing models.

A provider turns (from_asset, to_asset, amount) into a ``VenueQuote``.
Conditions such as an unsupported pair or missing liquidity data come
back as error quotes; only malformed input raises. Availability is
checked by the caller before quoting.
"""

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set, Tuple

from .assets import AssetBook, pair_key
from .config import ErrorKind
from .models import VenueQuote

logger = logging.getLogger(__name__)


class QuoteProvider(ABC):
    """Base class for venue integrations.

    Availability is either pinned with ``set_availability`` or, when an
    ``uptime`` probability is given, drawn from ``rng``. Passing a seeded
    ``random.Random`` makes both availability and simulated latency
    deterministic.

    Subclasses implement ``supported_pairs`` and ``_price``; the shared
    edge cases (bad amount, unsupported pair, unpriced asset)
    are handled here so every venue reports them the same way.
    """

    def __init__(
        self,
        name: str,
        assets: Optional[AssetBook] = None,
        rng: Optional[random.Random] = None,
        uptime: Optional[float] = None,
        latency_range_s: Tuple[float, float] = (0.0, 0.0),
    ):
        if not name:
            raise ValueError("Provider name is required")
        if uptime is not None and not 0.0 <= uptime <= 1.0:
            raise ValueError("uptime must be a probability in [0, 1]")
        lo, hi = latency_range_s
        if lo < 0 or hi < lo:
            raise ValueError(f"Invalid latency range {latency_range_s}")
        self._name = name
        self.assets = assets or AssetBook()
        self._rng = rng or random.Random()
        self._uptime = uptime
        self._forced_availability: Optional[bool] = None
        self.latency_range_s = (lo, hi)

    @property
    def name(self) -> str:
        return self._name

    # -- availability -------------------------------------------------

    def set_availability(self, available: Optional[bool]) -> None:
        """Pin availability, or pass None to return to simulated uptime."""
        self._forced_availability = available

    async def is_available(self) -> bool:
        if self._forced_availability is not None:
            return self._forced_availability
        if self._uptime is None:
            return True
        return self._rng.random() < self._uptime

    # -- pairs --------------------------------------------------------

    @abstractmethod
    def supported_pairs(self) -> List[Tuple[str, str]]:
        """Pairs this venue lists, order-insensitive."""

    def supports(self, from_asset: str, to_asset: str) -> bool:
        return pair_key(from_asset, to_asset) in self._pair_keys(self.supported_pairs())

    @staticmethod
    def _pair_keys(pairs: Iterable[Tuple[str, str]]) -> Set[Tuple[str, str]]:
        return {pair_key(a, b) for a, b in pairs}

    # -- quoting ------------------------------------------------------

    async def get_quote(self, from_asset: str, to_asset: str, amount: int) -> VenueQuote:
        """Quote a swap of ``amount`` base units of ``from_asset``.

        Availability is the caller's check; this never consults
        ``is_available``.

        Raises:
            TypeError: If ``amount`` is not an integer.
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise TypeError(f"amount must be an integer in base units, got {type(amount).__name__}")

        if amount <= 0:
            return self._fail(
                ErrorKind.INVALID_AMOUNT,
                f"Invalid amount {amount}: must be positive",
                from_asset, to_asset,
            )

        if not self.supports(from_asset, to_asset):
            return self._fail(
                ErrorKind.UNSUPPORTED_PAIR,
                f"{self.name}: unsupported trading pair {from_asset}/{to_asset}",
                from_asset, to_asset,
            )

        trade_usd = self.assets.to_usd(amount, from_asset)
        if trade_usd is None or not self.assets.has_price(to_asset):
            return self._fail(
                ErrorKind.NO_EXCHANGE_RATE,
                f"{self.name}: no exchange rate available for {from_asset}/{to_asset}",
                from_asset, to_asset,
            )

        await self._simulate_latency()
        quote = self._price(from_asset, to_asset, amount, trade_usd)
        logger.debug(
            f"{self.name} quoted {from_asset}/{to_asset} "
            f"(${trade_usd:,.2f}): impact={quote.price_impact_percent} fee={quote.fee_percent}"
        )
        return quote

    @abstractmethod
    def _price(
        self, from_asset: str, to_asset: str, amount: int, trade_usd: float
    ) -> VenueQuote:
        """Apply the venue's pricing model to a validated request."""

    # -- helpers ------------------------------------------------------

    async def _simulate_latency(self) -> None:
        lo, hi = self.latency_range_s
        if hi > 0:
            await asyncio.sleep(self._rng.uniform(lo, hi))

    def _fail(self, kind: ErrorKind, detail: str, from_asset: str, to_asset: str) -> VenueQuote:
        return VenueQuote.failure(self.name, kind, detail, path=(from_asset, to_asset))

    def _output(self, amount: int, from_asset: str, to_asset: str, impact: float, fee: float) -> int:
        return self.assets.estimate_output(amount, from_asset, to_asset, impact, fee)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
