"""Tests for asset conversion and the venue pricing models."""

import asyncio
import random
from decimal import Decimal

import pytest

from src.dex_routing.amm import HUB_PENALTY, AmmPool, ConstantDepthAMMProvider
from src.dex_routing.assets import AssetBook, AssetInfo, pair_key
from src.dex_routing.config import ErrorKind, UNAVAILABLE_IMPACT_SENTINEL
from src.dex_routing.flat import FlatRateProvider, MIN_IMPACT
from src.dex_routing.models import VenueQuote
from src.dex_routing.orderbook import (
    IMPACT_CEILING,
    OrderbookDepth,
    OrderbookProvider,
    fee_for_trade,
    impact_for_ratio,
)
from src.dex_routing.provider import QuoteProvider
from src.dex_routing.venues import default_providers


def _run_async(coro):
    """Run an async coroutine synchronously."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


# Unit-priced, zero-decimal assets: amount == USD value
UNIT_ASSETS = AssetBook([
    AssetInfo("AAA", 0, Decimal("1")),
    AssetInfo("BBB", 0, Decimal("1")),
    AssetInfo("HUB", 0, Decimal("1")),
])


def _amm(**kwargs):
    params = dict(
        pools=[
            AmmPool("AAA", "BBB", 500_000, 1_000.0, 1.0),
            AmmPool("AAA", "HUB", 800_000),
        ],
        fee_percent=0.3,
        min_impact_percent=0.5,
        assets=UNIT_ASSETS,
    )
    params.update(kwargs)
    return ConstantDepthAMMProvider("TestAMM", **params)


def _book(volume=100_000.0):
    return OrderbookDepth("AAA", "BBB", 1_000_000, 500_000, volume)


# ── Assets ────────────────────────────────────────────────────────────


class TestAssetBook:
    def test_default_assets(self):
        book = AssetBook()
        assert set(book.symbols()) == {"ICP", "ckBTC", "ckETH", "ckUSDC", "ckUSDT"}
        assert book.get("ckETH").decimals == 18

    def test_to_usd_uses_decimals(self):
        book = AssetBook()
        assert book.to_usd(10_000_000, "ckBTC") == pytest.approx(11_547.4)
        assert book.to_usd(10**18, "ckETH") == pytest.approx(3_200.0)
        assert book.to_usd(2_500_000, "ckUSDC") == pytest.approx(2.5)

    def test_to_usd_unknown_asset(self):
        assert AssetBook().to_usd(100, "DOGE") is None

    def test_large_amounts_keep_precision(self):
        book = AssetBook()
        # 10 million ckETH in base units exceeds 2**64
        assert book.to_usd(10**25, "ckETH") == pytest.approx(32_000_000_000.0)

    def test_convert(self):
        assert AssetBook().convert(10_000_000, "ckBTC", "ckUSDC") == 11_547_400_000

    def test_estimate_output_applies_impact_and_fee(self):
        out = AssetBook().estimate_output(10_000_000, "ckBTC", "ckUSDC", 1.0, 0.3)
        assert out == 11_397_630_222

    def test_estimate_output_unpriced(self):
        assert AssetBook().estimate_output(100, "ckBTC", "DOGE", 0.1, 0.1) == 0

    def test_to_base_units(self):
        book = AssetBook()
        assert book.to_base_units("0.05", "ckBTC") == 5_000_000
        assert book.to_base_units("1", "ckETH") == 10**18

    def test_to_base_units_unknown(self):
        with pytest.raises(ValueError):
            AssetBook().to_base_units("1", "DOGE")

    def test_set_price(self):
        book = AssetBook()
        book.set_price("ICP", 10.0)
        assert book.to_usd(100_000_000, "ICP") == pytest.approx(10.0)

    def test_set_price_new_asset_needs_decimals(self):
        with pytest.raises(ValueError):
            AssetBook().set_price("NEW", 1.0)

    def test_pair_key_order_insensitive(self):
        assert pair_key("ckUSDC", "ckBTC") == pair_key("ckBTC", "ckUSDC")


# ── Provider base ─────────────────────────────────────────────────────


class TestQuoteProviderBase:
    def test_abstract(self):
        with pytest.raises(TypeError):
            QuoteProvider("x")

    def test_name_required(self):
        with pytest.raises(ValueError):
            FlatRateProvider("", {("AAA", "BBB"): 1.0})

    def test_invalid_uptime(self):
        with pytest.raises(ValueError):
            _amm(uptime=1.5)

    def test_invalid_latency_range(self):
        with pytest.raises(ValueError):
            _amm(latency_range_s=(1.0, 0.5))

    def test_supports_either_direction(self):
        p = _amm()
        assert p.supports("AAA", "BBB")
        assert p.supports("BBB", "AAA")
        assert not p.supports("BBB", "HUB")

    def test_non_integer_amount_raises(self):
        with pytest.raises(TypeError):
            _run_async(_amm().get_quote("AAA", "BBB", 10.5))

    def test_bool_amount_raises(self):
        with pytest.raises(TypeError):
            _run_async(_amm().get_quote("AAA", "BBB", True))

    @pytest.mark.parametrize("amount", [0, -5])
    def test_non_positive_amount(self, amount):
        q = _run_async(_amm().get_quote("AAA", "BBB", amount))
        assert q.error_kind == ErrorKind.INVALID_AMOUNT

    def test_unsupported_pair(self):
        q = _run_async(_amm().get_quote("BBB", "HUB", 100))
        assert q.error_kind == ErrorKind.UNSUPPORTED_PAIR
        assert "unsupported" in q.error_detail
        assert q.note == "TestAMM unavailable"

    def test_forced_unavailable(self):
        p = _amm()
        p.set_availability(False)
        assert _run_async(p.is_available()) is False

    def test_get_quote_leaves_availability_to_caller(self):
        p = _amm(uptime=0.0)
        q = _run_async(p.get_quote("AAA", "BBB", 100))
        assert not q.is_error

    def test_availability_override_cleared(self):
        p = _amm(uptime=0.0)
        p.set_availability(True)
        assert _run_async(p.is_available()) is True
        p.set_availability(None)
        assert _run_async(p.is_available()) is False

    def test_simulated_uptime_is_seeded(self):
        a = _amm(uptime=0.5, rng=random.Random(7))
        b = _amm(uptime=0.5, rng=random.Random(7))
        draws_a = [_run_async(a.is_available()) for _ in range(20)]
        draws_b = [_run_async(b.is_available()) for _ in range(20)]
        assert draws_a == draws_b
        assert True in draws_a and False in draws_a

    def test_unpriced_asset(self):
        book = AssetBook([AssetInfo("AAA", 0, Decimal("1")), AssetInfo("XYZ", 0, Decimal("0"))])
        p = FlatRateProvider("Flat", {("AAA", "XYZ"): 1_000_000.0}, assets=book)
        q = _run_async(p.get_quote("AAA", "XYZ", 100))
        assert q.error_kind == ErrorKind.NO_EXCHANGE_RATE

    def test_simulated_latency(self):
        p = _amm(latency_range_s=(0.02, 0.03), rng=random.Random(1))

        async def timed():
            loop = asyncio.get_running_loop()
            start = loop.time()
            await p.get_quote("AAA", "BBB", 100)
            return loop.time() - start

        assert _run_async(timed()) >= 0.015


# ── Constant-depth AMM ────────────────────────────────────────────────


class TestConstantDepthAMM:
    def test_sqrt_extrapolation(self):
        q = _run_async(_amm().get_quote("AAA", "BBB", 4_000))
        assert q.price_impact_percent == pytest.approx(2.0)
        assert q.fee_percent == 0.3
        assert q.path == ("AAA", "BBB")
        assert q.liquidity_usd == 500_000
        assert not q.is_error

    def test_impact_floor(self):
        q = _run_async(_amm().get_quote("AAA", "BBB", 10))
        assert q.price_impact_percent == 0.5

    def test_pool_floor_overrides_venue_floor(self):
        p = _amm(pools=[AmmPool("AAA", "BBB", 500_000, 1_000.0, 1.0, min_impact_percent=3.0)])
        assert _run_async(p.get_quote("AAA", "BBB", 10)).price_impact_percent == 3.0
        # Above the floor the reference point still drives the estimate
        assert _run_async(p.get_quote("AAA", "BBB", 16_000)).price_impact_percent == pytest.approx(4.0)

    def test_hub_route_penalty(self):
        p = _amm(hub_asset="HUB", direct_pairs=[])
        q = _run_async(p.get_quote("AAA", "BBB", 4_000))
        assert q.path == ("AAA", "HUB", "BBB")
        assert q.price_impact_percent == pytest.approx(2.0 * HUB_PENALTY)

    def test_direct_pair_skips_hub(self):
        p = _amm(hub_asset="HUB", direct_pairs=[("BBB", "AAA")])
        assert p.path_for("AAA", "BBB") == ("AAA", "BBB")

    def test_hub_leg_is_direct(self):
        p = _amm(hub_asset="HUB", direct_pairs=[])
        assert p.path_for("AAA", "HUB") == ("AAA", "HUB")

    def test_listed_pair_without_reference(self):
        p = _amm()
        assert p.estimate_impact("AAA", "HUB", 100) == UNAVAILABLE_IMPACT_SENTINEL
        q = _run_async(p.get_quote("AAA", "HUB", 100))
        assert q.error_kind == ErrorKind.NO_LIQUIDITY_DATA

    def test_estimated_output(self):
        q = _run_async(_amm().get_quote("AAA", "BBB", 4_000))
        # 4000 * (1 - 0.02) * (1 - 0.003)
        assert q.estimated_output == 3_908

    def test_negative_fee_rejected(self):
        with pytest.raises(ValueError):
            _amm(fee_percent=-0.1)

    def test_impact_grows_with_size(self):
        p = _amm()
        small = p.estimate_impact("AAA", "BBB", 2_000)
        large = p.estimate_impact("AAA", "BBB", 20_000)
        assert large > small


# ── Orderbook ─────────────────────────────────────────────────────────


class TestOrderbook:
    @pytest.mark.parametrize("ratio,impact", [
        (0.0001, 0.02),
        (0.002, 0.10),
        (0.01, 0.35),
        (0.04, 0.75),
        (0.08, 1.25),
        (0.2, 1.75),
        (0.5, IMPACT_CEILING),
        (5.0, IMPACT_CEILING),
    ])
    def test_impact_steps(self, ratio, impact):
        assert impact_for_ratio(ratio) == impact

    def test_impact_monotonic(self):
        ratios = [i / 1000 for i in range(0, 400)]
        impacts = [impact_for_ratio(r) for r in ratios]
        assert impacts == sorted(impacts)

    @pytest.mark.parametrize("trade,fee", [
        (150_000, 0.10),
        (60_000, 0.15),
        (20_000, 0.20),
        (10_000, 0.25),
        (500, 0.25),
    ])
    def test_fee_tiers(self, trade, fee):
        assert fee_for_trade(trade) == fee

    def test_quote_uses_thin_side(self):
        p = OrderbookProvider("Book", [_book()], assets=UNIT_ASSETS)
        q = _run_async(p.get_quote("AAA", "BBB", 1_000))
        # 1000 / 500k = 0.002
        assert q.price_impact_percent == 0.10
        assert q.fee_percent == 0.25
        assert q.liquidity_usd == 1_500_000
        assert q.expected_seconds == 1.5
        assert q.note == "Professional orderbook trading with price discovery"

    def test_very_large_trade(self):
        p = OrderbookProvider("Book", [_book()], assets=UNIT_ASSETS)
        q = _run_async(p.get_quote("BBB", "AAA", 600_000))
        assert q.price_impact_percent == IMPACT_CEILING
        assert q.fee_percent == 0.10
        assert "very large" in q.note

    def test_dead_book(self):
        p = OrderbookProvider("Book", [_book(volume=0)], assets=UNIT_ASSETS)
        q = _run_async(p.get_quote("AAA", "BBB", 1_000))
        assert q.error_kind == ErrorKind.NO_LIQUIDITY_DATA

    def test_below_minimum_trade(self):
        p = OrderbookProvider("Book", [_book()], min_trade_usd=500, assets=UNIT_ASSETS)
        q = _run_async(p.get_quote("AAA", "BBB", 100))
        assert q.error_kind == ErrorKind.INVALID_AMOUNT
        assert "minimum" in q.error_detail

    def test_update_book(self):
        p = OrderbookProvider("Book", [_book()], assets=UNIT_ASSETS)
        p.update_book(_book(volume=0))
        q = _run_async(p.get_quote("AAA", "BBB", 1_000))
        assert q.error_kind == ErrorKind.NO_LIQUIDITY_DATA


# ── Flat rate ─────────────────────────────────────────────────────────


class TestFlatRate:
    def _provider(self, liquidity=1_000_000.0):
        return FlatRateProvider("Flat", {("AAA", "BBB"): liquidity}, assets=UNIT_ASSETS)

    def test_power_law_with_small_trade_deduction(self):
        q = _run_async(self._provider().get_quote("AAA", "BBB", 10_000))
        # 100 * 0.01**0.9 - 0.02
        assert q.price_impact_percent == pytest.approx(1.565, abs=1e-3)
        assert q.fee_percent == 0.2
        assert q.estimated_execution_time == "5-15 seconds"
        assert q.expected_seconds == 5.0

    def test_no_deduction_above_threshold(self):
        q = _run_async(self._provider().get_quote("AAA", "BBB", 50_000))
        assert q.price_impact_percent == pytest.approx(6.746, abs=1e-3)
        assert q.estimated_execution_time == "8-20 seconds"

    def test_largest_tier(self):
        q = _run_async(self._provider().get_quote("AAA", "BBB", 200_000))
        assert q.estimated_execution_time == "15-30 seconds"
        assert q.expected_seconds == 15.0

    def test_impact_floor(self):
        q = _run_async(self._provider().get_quote("AAA", "BBB", 100))
        assert q.price_impact_percent == MIN_IMPACT

    @pytest.mark.parametrize("liquidity", [None, 0.0])
    def test_missing_liquidity(self, liquidity):
        q = _run_async(self._provider(liquidity).get_quote("AAA", "BBB", 100))
        assert q.error_kind == ErrorKind.NO_LIQUIDITY_DATA

    def test_invalid_exponent(self):
        with pytest.raises(ValueError):
            FlatRateProvider("Flat", {}, impact_exponent=0)


# ── Reference venues ──────────────────────────────────────────────────


class TestReferenceVenues:
    def _by_name(self):
        return {p.name: p for p in default_providers(rng=random.Random(0), simulate_latency=False)}

    def test_order_and_types(self):
        providers = default_providers(simulate_latency=False)
        assert [p.name for p in providers] == ["ICPSwap", "KongSwap", "ICDEX"]
        assert isinstance(providers[2], OrderbookProvider)

    def test_latency_ranges_applied(self):
        providers = default_providers()
        assert providers[1].latency_range_s == (0.4, 0.6)

    def test_kongswap_hub_routes_stable_pairs(self):
        q = _run_async(self._by_name()["KongSwap"].get_quote("ckBTC", "ckUSDC", 3_000_000))
        assert q.path == ("ckBTC", "ICP", "ckUSDC")
        assert q.price_impact_percent == pytest.approx(4.621, abs=1e-3)

    def test_icpswap_severe_pair_floor(self):
        # 0.001 ckBTC is about $115
        q = _run_async(self._by_name()["ICPSwap"].get_quote("ckBTC", "ckUSDC", 100_000))
        assert q.price_impact_percent == 65.0

    def test_icpswap_minor_deviation_pair(self):
        icpswap = self._by_name()["ICPSwap"]
        assert icpswap.estimate_impact("ckETH", "ckUSDC", 3_000.0) == pytest.approx(0.5)
        # 0.1 ckETH is $320, held at the 0.5% floor
        q = _run_async(icpswap.get_quote("ckETH", "ckUSDC", 10**17))
        assert q.price_impact_percent == 0.5

    def test_icpswap_broken_pair(self):
        q = _run_async(self._by_name()["ICPSwap"].get_quote("ckBTC", "ckUSDT", 3_000_000))
        assert q.error_kind == ErrorKind.NO_LIQUIDITY_DATA

    def test_icdex_minimum_trade(self):
        # 10 ICP is $120
        q = _run_async(self._by_name()["ICDEX"].get_quote("ICP", "ckUSDC", 10 * 10**8))
        assert q.error_kind == ErrorKind.INVALID_AMOUNT

    def test_venue_quote_has_no_score(self):
        q = _run_async(self._by_name()["ICDEX"].get_quote("ckBTC", "ckUSDC", 3_000_000))
        assert isinstance(q, VenueQuote)
        assert not hasattr(q, "score")
        assert not hasattr(q, "badge")
