"""Asset reference data: decimals and USD reference prices."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class AssetInfo:
    symbol: str
    decimals: int
    usd_price: Decimal


DEFAULT_ASSETS: List[AssetInfo] = [
    AssetInfo("ICP", 8, Decimal("12.0")),
    AssetInfo("ckBTC", 8, Decimal("115474.0")),
    AssetInfo("ckETH", 18, Decimal("3200.0")),
    AssetInfo("ckUSDC", 6, Decimal("1.0")),
    AssetInfo("ckUSDT", 6, Decimal("1.0")),
]


def pair_key(a: str, b: str) -> Tuple[str, str]:
    """Order-insensitive key for an asset pair."""
    return (a, b) if a <= b else (b, a)


class AssetBook:
    """Converts base-unit amounts to and from USD.

    Amounts are integers in each asset's smallest denomination; all
    arithmetic runs on Decimal so assets with different decimal places
    do not accumulate float rounding drift.
    """

    def __init__(self, assets: Optional[Iterable[AssetInfo]] = None):
        self._assets: Dict[str, AssetInfo] = {}
        for info in assets if assets is not None else DEFAULT_ASSETS:
            self._assets[info.symbol] = info

    def get(self, symbol: str) -> Optional[AssetInfo]:
        return self._assets.get(symbol)

    def symbols(self) -> List[str]:
        return list(self._assets)

    def set_price(self, symbol: str, usd_price: float, decimals: Optional[int] = None) -> None:
        current = self._assets.get(symbol)
        if decimals is None:
            if current is None:
                raise ValueError(f"Decimals required for new asset '{symbol}'")
            decimals = current.decimals
        self._assets[symbol] = AssetInfo(symbol, decimals, Decimal(str(usd_price)))

    def has_price(self, symbol: str) -> bool:
        info = self._assets.get(symbol)
        return info is not None and info.usd_price > 0

    def to_base_units(self, amount: str, symbol: str) -> int:
        """Human-readable amount ("0.05") to base units.

        Raises:
            ValueError: If the asset is unknown.
        """
        info = self._assets.get(symbol)
        if info is None:
            raise ValueError(f"Unknown asset '{symbol}'")
        return int(Decimal(str(amount)) * (Decimal(10) ** info.decimals))

    def to_usd(self, amount: int, symbol: str) -> Optional[float]:
        """USD value of ``amount`` base units, or None if unpriced."""
        info = self._assets.get(symbol)
        if info is None or info.usd_price <= 0:
            return None
        human = Decimal(amount) / (Decimal(10) ** info.decimals)
        return float(human * info.usd_price)

    def convert(self, amount: int, from_symbol: str, to_symbol: str) -> Optional[int]:
        """Convert base units at reference prices (no impact, no fee)."""
        src = self._assets.get(from_symbol)
        dst = self._assets.get(to_symbol)
        if src is None or dst is None or src.usd_price <= 0 or dst.usd_price <= 0:
            return None
        usd = Decimal(amount) / (Decimal(10) ** src.decimals) * src.usd_price
        return int(usd / dst.usd_price * (Decimal(10) ** dst.decimals))

    def estimate_output(
        self,
        amount: int,
        from_symbol: str,
        to_symbol: str,
        impact_percent: float,
        fee_percent: float,
    ) -> int:
        """Expected output in ``to_symbol`` base units after impact and fee."""
        gross = self.convert(amount, from_symbol, to_symbol)
        if gross is None:
            return 0
        keep = (Decimal(1) - Decimal(str(impact_percent)) / 100) * (
            Decimal(1) - Decimal(str(fee_percent)) / 100
        )
        return max(int(Decimal(gross) * keep), 0)
