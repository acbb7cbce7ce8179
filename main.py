"""CLI entry point: python main.py --from ckBTC --to ckUSDC --amount 0.05"""

import argparse
import asyncio
import sys

from src.dex_routing import (
    AssetBook,
    FlatRateProvider,
    Preference,
    RouteAggregator,
    RouteRequest,
    Urgency,
    format_routes_table,
)
from src.logging_config import LogFormat, LoggingConfig, LogLevel, configure_logging
from src.settings import get_settings

# (from, to, human amount) sample trades across the reference venues
DEMO_TRADES = [
    ("ckBTC", "ckUSDC", "0.03"),
    ("ckETH", "ckUSDC", "1"),
    ("ckBTC", "ckETH", "0.5"),
    ("ICP", "ckUSDC", "250"),
]

STUB_LIQUIDITY = {
    ("ckBTC", "ckUSDC"): 2_000_000,
    ("ckETH", "ckUSDC"): 1_500_000,
    ("ckBTC", "ckETH"): 900_000,
    ("ICP", "ckUSDC"): 700_000,
}


def build_aggregator(with_stub: bool) -> RouteAggregator:
    settings = get_settings()
    aggregator = RouteAggregator.create_default(settings=settings)
    if with_stub:
        aggregator.register_provider(FlatRateProvider("StubSwap", STUB_LIQUIDITY))
    return aggregator


async def run_trades(aggregator: RouteAggregator, requests) -> None:
    for request in requests:
        print(f"\n{request.amount} base units {request.pair} "
              f"(urgency={request.urgency.value}, "
              f"preference={request.preference.value if request.preference else '-'})")
        routes = await aggregator.get_best_routes(request)
        print(format_routes_table(routes, request))

    metrics = aggregator.get_performance_metrics()
    print(f"\nRequests: {metrics.total_requests}  "
          f"Avg latency: {metrics.average_latency_ms:.0f}ms  "
          f"Uptime: {metrics.uptime_percent:.1f}%")


def main():
    parser = argparse.ArgumentParser(
        description="Compare swap quotes across Internet Computer DEX venues"
    )
    parser.add_argument("--from", dest="from_asset", help="Asset to sell (e.g. ckBTC)")
    parser.add_argument("--to", dest="to_asset", help="Asset to buy (e.g. ckUSDC)")
    parser.add_argument(
        "--amount", type=str,
        help="Amount to sell in whole units (e.g. 0.05)"
    )
    parser.add_argument(
        "--urgency", choices=[u.value for u in Urgency], default=Urgency.MEDIUM.value,
    )
    parser.add_argument(
        "--preference", choices=[p.value for p in Preference], default=None,
    )
    parser.add_argument(
        "--slippage", type=float, default=None,
        help="Reject venues whose price impact exceeds this percentage"
    )
    parser.add_argument(
        "--with-stub", action="store_true",
        help="Also register a flat-rate demonstration venue"
    )
    parser.add_argument(
        "--demo", action="store_true",
        help="Route a fixed set of sample trades"
    )
    parser.add_argument(
        "--log-format", choices=[f.value for f in LogFormat], default=None,
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(LoggingConfig(
        level=LogLevel(settings.log_level.upper()),
        format=LogFormat(args.log_format or settings.log_format),
    ))

    assets = AssetBook()
    if args.demo:
        trades = DEMO_TRADES
    elif args.from_asset and args.to_asset and args.amount:
        trades = [(args.from_asset, args.to_asset, args.amount)]
    else:
        parser.error("either --demo or all of --from, --to and --amount are required")

    try:
        requests = [
            RouteRequest(
                from_asset=f,
                to_asset=t,
                amount=assets.to_base_units(a, f),
                urgency=args.urgency,
                preference=args.preference,
                slippage_tolerance_percent=args.slippage,
            )
            for f, t, a in trades
        ]
    except ValueError as e:
        print(f"Invalid trade: {e}", file=sys.stderr)
        sys.exit(2)

    print("=" * 60)
    print("DEX ROUTING - SWAP QUOTE COMPARISON")
    print("=" * 60)

    asyncio.run(run_trades(build_aggregator(args.with_stub), requests))


if __name__ == "__main__":
    main()
