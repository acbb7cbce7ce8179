"""Reference venue data for the Internet Computer DEX landscape.

Reference impact points, pool liquidity and orderbook depth are
point-in-time observations used to drive the three pricing models.
"""

import random
from typing import List, Optional

from .amm import AmmPool, ConstantDepthAMMProvider
from .assets import AssetBook
from .orderbook import OrderbookDepth, OrderbookProvider
from .provider import QuoteProvider

# name -> (min, max) simulated response time in seconds
LATENCY_RANGES = {
    "ICPSwap": (0.8, 1.2),
    "KongSwap": (0.4, 0.6),
    "ICDEX": (1.0, 1.5),
}

ICPSWAP_POOLS = [
    AmmPool("ckBTC", "ckETH", 150_000, 3_000.0, 0.5),
    # Severe price deviation: 80% of it as impact, never below 65%
    AmmPool("ckBTC", "ckUSDC", 300_000, 3_464.0, 65.416, min_impact_percent=65.0),
    AmmPool("ckETH", "ckUSDC", 200_000, 3_000.0, 0.5),
    # Listed, but price deviation too large to quote
    AmmPool("ckBTC", "ckUSDT", 150_000),
    AmmPool("ckETH", "ckUSDT", 150_000),
    AmmPool("ckBTC", "ICP", 1_200_000),
    AmmPool("ICP", "ckUSDC", 565_440),
    AmmPool("ckETH", "ICP", 800_000),
]

ICPSWAP_DIRECT_PAIRS = [
    ("ckBTC", "ckUSDC"), ("ckETH", "ckUSDC"), ("ckBTC", "ckETH"),
    ("ICP", "ckUSDC"), ("ICP", "ckBTC"), ("ICP", "ckETH"),
]

KONGSWAP_POOLS = [
    AmmPool("ckBTC", "ckUSDC", 250_000, 3_462.64, 3.85),
    AmmPool("ckBTC", "ckETH", 100_000, 3_462.64, 4.08),
    AmmPool("ckBTC", "ckUSDT", 100_000, 3_462.64, 1.67),
    AmmPool("ckETH", "ckUSDC", 180_000, 223.20, 0.61),
    AmmPool("ckETH", "ckUSDT", 100_000, 223.20, 0.47),
]

# Pairs routed without the ICP hub. None of them has a pool above, so they
# are not quotable on Kong; the list only decides which pairs hop through ICP
KONGSWAP_DIRECT_PAIRS = [
    ("ckBTC", "ICP"), ("ckETH", "ICP"), ("ckUSDC", "ICP"), ("ckUSDT", "ICP"),
]

ICDEX_BOOKS = [
    OrderbookDepth("ckBTC", "ckUSDC", 2_500_000, 2_300_000, 850_000),
    OrderbookDepth("ckETH", "ckUSDC", 1_800_000, 1_600_000, 620_000),
    OrderbookDepth("ICP", "ckUSDC", 1_200_000, 1_000_000, 410_000),
    OrderbookDepth("ckBTC", "ICP", 1_500_000, 1_400_000, 380_000),
]

ICDEX_MIN_TRADE_USD = 500.0


def _latency(name: str, simulate_latency: bool):
    return LATENCY_RANGES[name] if simulate_latency else (0.0, 0.0)


def default_providers(
    rng: Optional[random.Random] = None,
    assets: Optional[AssetBook] = None,
    simulate_latency: bool = True,
) -> List[QuoteProvider]:
    """ICPSwap, KongSwap and ICDEX, in that (registry) order.

    All three share ``rng`` and ``assets`` so a seeded generator makes the
    whole set deterministic.
    """
    rng = rng or random.Random()
    assets = assets or AssetBook()

    icpswap = ConstantDepthAMMProvider(
        "ICPSwap",
        ICPSWAP_POOLS,
        fee_percent=0.3,
        min_impact_percent=0.5,
        hub_asset="ICP",
        direct_pairs=ICPSWAP_DIRECT_PAIRS,
        execution_time="1.5s",
        expected_seconds=1.5,
        note="Established liquidity pools with concentrated-liquidity mechanics",
        assets=assets,
        rng=rng,
        latency_range_s=_latency("ICPSwap", simulate_latency),
    )
    kongswap = ConstantDepthAMMProvider(
        "KongSwap",
        KONGSWAP_POOLS,
        fee_percent=0.3,
        min_impact_percent=0.1,
        hub_asset="ICP",
        direct_pairs=KONGSWAP_DIRECT_PAIRS,
        execution_time="0.8s",
        expected_seconds=0.8,
        note="Fast execution with optimized AMM routing",
        assets=assets,
        rng=rng,
        latency_range_s=_latency("KongSwap", simulate_latency),
    )
    icdex = OrderbookProvider(
        "ICDEX",
        ICDEX_BOOKS,
        min_trade_usd=ICDEX_MIN_TRADE_USD,
        execution_time="On-chain orderbook",
        expected_seconds=1.5,
        assets=assets,
        rng=rng,
        latency_range_s=_latency("ICDEX", simulate_latency),
    )
    return [icpswap, kongswap, icdex]
