"""Pytest configuration and shared fixtures."""

import random
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def reset_settings():
    """Clear the cached settings before and after each test."""
    from src.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def default_aggregator(rng):
    """Reference venues, always available, no simulated latency."""
    from src.dex_routing import RouteAggregator

    return RouteAggregator.create_default(rng=rng, simulate_latency=False)
