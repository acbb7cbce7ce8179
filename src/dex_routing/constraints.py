"""Caller-supplied constraints applied after scoring."""

import logging
from typing import Dict, List, Optional

from .config import ErrorKind
from .models import Quote
from .scoring import rank_quotes

logger = logging.getLogger(__name__)


class SlippageFilter:
    """Rejects quotes whose price impact exceeds the caller's tolerance.

    Rejected quotes stay in the result set as CONSTRAINT_VIOLATION errors
    with score 0. Quotes that already carry an error are left as they are,
    so applying the filter twice is the same as applying it once.
    """

    def apply(
        self,
        quotes: List[Quote],
        tolerance_percent: Optional[float],
        order: Optional[Dict[str, int]] = None,
    ) -> List[Quote]:
        if not tolerance_percent or tolerance_percent <= 0:
            return quotes

        rejected = 0
        for q in quotes:
            if q.is_error:
                continue
            if q.price_impact_percent > tolerance_percent:
                q.fail(
                    ErrorKind.CONSTRAINT_VIOLATION,
                    f"Slippage {q.price_impact_percent:.2f}% exceeds tolerance "
                    f"{tolerance_percent:.2f}%",
                )
                q.rationale = f"{q.venue_name} rejected: price impact above tolerance"
                rejected += 1
                logger.debug(f"{q.venue_name} rejected: {q.error_detail}")

        if rejected:
            logger.info(f"Slippage filter rejected {rejected}/{len(quotes)} quotes "
                        f"(tolerance {tolerance_percent:.2f}%)")
        return rank_quotes(quotes, order)
