"""Tabular rendering of ranked quotes."""

from typing import List, Optional

import pandas as pd
from tabulate import tabulate

from .models import Quote, RouteRequest

COLUMNS = [
    "venue_name", "path", "score", "badge", "price_impact_percent",
    "fee_percent", "estimated_execution_time", "liquidity_usd",
    "estimated_output", "error_kind", "error_detail", "rationale",
]


def quotes_to_frame(quotes: List[Quote]) -> pd.DataFrame:
    """One row per quote, in ranking order."""
    rows = [q.to_dict() for q in quotes]
    frame = pd.DataFrame(rows, columns=COLUMNS)
    if not frame.empty:
        frame["path"] = frame["path"].apply(lambda p: " -> ".join(p))
    frame.insert(0, "rank", range(1, len(frame) + 1))
    return frame


def format_routes_table(quotes: List[Quote], request: Optional[RouteRequest] = None) -> str:
    """Format ranked quotes as an ASCII table."""
    if not quotes:
        return "No venues registered."

    frame = quotes_to_frame(quotes)
    display = frame[["rank", "venue_name", "path", "score", "badge",
                     "price_impact_percent", "fee_percent", "liquidity_usd",
                     "estimated_execution_time", "error_detail"]].copy()
    display["badge"] = display["badge"].fillna("")
    display["price_impact_percent"] = display["price_impact_percent"].apply(lambda x: f"{x:.3f}%")
    display["fee_percent"] = display["fee_percent"].apply(lambda x: f"{x:.2f}%")
    display["liquidity_usd"] = display["liquidity_usd"].apply(lambda x: f"${x:,.0f}")
    display["error_detail"] = display["error_detail"].fillna("")

    display.columns = ["#", "Venue", "Path", "Score", "Badge", "Impact",
                       "Fee", "Liquidity", "Speed", "Error"]

    table = tabulate(display, headers="keys", tablefmt="simple", showindex=False)

    usable = int(frame["error_kind"].isna().sum())
    summary = f"\n{'─' * 60}\n"
    if request is not None:
        summary += f"Trade:            {request.amount} {request.pair}\n"
    summary += (
        f"Usable Quotes:    {usable}/{len(frame)}\n"
        f"Best Venue:       {frame.iloc[0]['venue_name']}\n"
        f"{'─' * 60}"
    )
    return table + summary
