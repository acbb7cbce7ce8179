"""Urgency and preference score adjustments."""

from typing import Dict, List, Optional

from .config import (
    LOWEST_COST_BOOST,
    MOST_LIQUID_BOOST,
    URGENCY_SPEED_BOOST,
    Preference,
    Urgency,
)
from .models import Quote, RouteRequest
from .scoring import fee_score, liquidity_score, rank_quotes, speed_score


class PreferenceAdjuster:
    """Adds urgency/preference boosts on top of the base score.

    Boosts are additive and cumulative, and are not clamped, so a boosted
    score may exceed 100. Error quotes keep their score of 0.
    """

    def boost_for(self, quote: Quote, request: RouteRequest) -> float:
        boost = 0.0
        if request.urgency == Urgency.HIGH:
            boost += speed_score(quote) * URGENCY_SPEED_BOOST
        if request.preference == Preference.LOWEST_COST:
            boost += fee_score(quote) * LOWEST_COST_BOOST
        if request.preference == Preference.MOST_LIQUID:
            boost += liquidity_score(quote) * MOST_LIQUID_BOOST
        return boost

    def apply(
        self,
        quotes: List[Quote],
        request: RouteRequest,
        order: Optional[Dict[str, int]] = None,
    ) -> List[Quote]:
        for q in quotes:
            if q.is_error:
                continue
            boost = self.boost_for(q, request)
            if boost:
                q.score = round(q.score + boost, 2)
        return rank_quotes(quotes, order)
