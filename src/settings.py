"""Centralized settings for the swap routing engine.

Uses pydantic-settings to load from environment variables (prefixed DEXROUTE_)
with defaults matching src/dex_routing/config.py.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Routing engine settings loaded from environment variables."""

    # --- Fan-out ---
    quote_timeout_ms: float = Field(default=3000.0, gt=0)
    diagnostic_timeout_ms: Optional[float] = Field(default=None, gt=0)  # None = no bound

    # --- Metrics ---
    latency_alpha: float = Field(default=0.1, gt=0, le=1)

    # --- Scoring weights ---
    weight_price_impact: float = Field(default=0.35, ge=0)
    weight_fee: float = Field(default=0.35, ge=0)
    weight_speed: float = Field(default=0.20, ge=0)
    weight_liquidity_depth: float = Field(default=0.05, ge=0)
    weight_availability: float = Field(default=0.05, ge=0)

    # --- Reference venues ---
    simulate_latency: bool = True  # sleep within each venue's latency range

    # --- Logging ---
    log_level: str = "INFO"
    log_format: str = "console"

    model_config = {
        "env_prefix": "DEXROUTE_",
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
