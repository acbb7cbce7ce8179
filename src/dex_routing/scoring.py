"""Quote scoring, badge assignment and ranking.

The scorer is the only place that assigns ``score`` and ``badge``.
"""

import logging
import re
from typing import Dict, List, Optional

from .config import (
    Badge,
    DEFAULT_SPEED_SCORE,
    FASTEST_THRESHOLD_SECONDS,
    SPEED_LABEL_SCORES,
    ScoringWeights,
)
from .models import Quote

logger = logging.getLogger(__name__)

# Leading number followed by a seconds unit: "1.5s", "0.8 sec", "15-30 seconds"
_SECONDS_RE = re.compile(
    r"^\s*(\d+(?:\.\d+)?)(?:\s*-\s*\d+(?:\.\d+)?)?\s*(?:s|secs?|seconds?)\b",
    re.IGNORECASE,
)


def parse_seconds(text: str) -> Optional[float]:
    """Seconds from an execution-time label, or None if not numeric."""
    if not text:
        return None
    match = _SECONDS_RE.match(text)
    return float(match.group(1)) if match else None


def speed_score(quote: Quote) -> float:
    """0-100 speed score; structured seconds take precedence over text."""
    seconds = quote.expected_seconds
    if seconds is None:
        seconds = parse_seconds(quote.estimated_execution_time)
    if seconds is not None:
        return max(0.0, 100.0 - seconds * 10)

    label = (quote.estimated_execution_time or "").lower()
    for keyword, score in SPEED_LABEL_SCORES.items():
        if keyword in label:
            return score
    return DEFAULT_SPEED_SCORE


def fee_score(quote: Quote) -> float:
    return max(0.0, 100.0 - quote.fee_percent * 100)


def liquidity_score(quote: Quote) -> float:
    return min(100.0, quote.liquidity_usd / 10_000)


def is_sub_two_seconds(quote: Quote) -> bool:
    seconds = quote.expected_seconds
    if seconds is None:
        seconds = parse_seconds(quote.estimated_execution_time)
    return seconds is not None and seconds < FASTEST_THRESHOLD_SECONDS


def rank_quotes(quotes: List[Quote], order: Optional[Dict[str, int]] = None) -> List[Quote]:
    """Sort by score descending; ties keep registry order.

    Without ``order`` the sort is stable with respect to the input.
    """
    if order is None:
        return sorted(quotes, key=lambda q: q.score, reverse=True)
    fallback = len(order)
    return sorted(quotes, key=lambda q: (-q.score, order.get(q.venue_name, fallback)))


class QuoteScorer:
    """Scores quotes under a weighted five-factor model."""

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights()

    def update_weights(self, **partial: float) -> ScoringWeights:
        self.weights = self.weights.merged(**partial)
        logger.info(f"Scoring weights updated: {self.weights.to_dict()}")
        return self.weights

    def factor_scores(self, quote: Quote) -> Dict[str, float]:
        return {
            "price_impact": max(0.0, 100.0 - quote.price_impact_percent * 100),
            "fee": fee_score(quote),
            "speed": speed_score(quote),
            "liquidity_depth": liquidity_score(quote),
            "availability": 100.0,
        }

    def score_quote(self, quote: Quote) -> float:
        """Weighted 0-100 score, rounded to 2 dp. Error quotes score 0."""
        if quote.is_error:
            return 0.0
        w = self.weights
        factors = self.factor_scores(quote)
        total = (
            factors["price_impact"] * w.price_impact
            + factors["fee"] * w.fee
            + factors["speed"] * w.speed
            + factors["liquidity_depth"] * w.liquidity_depth
            + factors["availability"] * w.availability
        )
        return round(min(100.0, max(0.0, total)), 2)

    def assign_badges(self, quotes: List[Quote]) -> None:
        """Badge each non-error quote relative to this batch only.

        ``quotes`` must be in registry order: when several quotes share the
        best value of a criterion, the first one holds it.
        """
        valid = [q for q in quotes if not q.is_error]
        for q in quotes:
            q.badge = None
        if not valid:
            return

        # min()/max() return the first extremum, i.e. the earliest venue
        best_impact_q = min(valid, key=lambda q: q.price_impact_percent)
        best_fee_q = min(valid, key=lambda q: q.fee_percent)
        deepest_q = max(valid, key=lambda q: q.liquidity_usd)

        for q in valid:
            best_impact = q is best_impact_q
            best_fee = q is best_fee_q
            if best_impact and best_fee:
                q.badge = Badge.RECOMMENDED
                q.rationale = (
                    f"Lowest price impact ({q.price_impact_percent:.2f}%) "
                    f"and lowest fee ({q.fee_percent:.2f}%) across venues"
                )
            elif best_fee:
                q.badge = Badge.CHEAPEST
                q.rationale = f"Lowest fee across venues ({q.fee_percent:.2f}%)"
            elif best_impact:
                q.badge = Badge.CHEAPEST
                q.rationale = f"Lowest price impact across venues ({q.price_impact_percent:.2f}%)"
            elif q is deepest_q:
                q.badge = Badge.ADVANCED
                q.rationale = f"Deepest liquidity across venues (${q.liquidity_usd:,.0f})"
            elif is_sub_two_seconds(q):
                q.badge = Badge.FASTEST
                q.rationale = f"Sub-2-second execution ({q.estimated_execution_time})"

    def score_all(self, quotes: List[Quote], order: Optional[Dict[str, int]] = None) -> List[Quote]:
        """Score, badge and rank a batch of quotes."""
        for q in quotes:
            q.score = self.score_quote(q)
            if q.is_error:
                q.badge = None
        self.assign_badges(quotes)
        return rank_quotes(quotes, order)
