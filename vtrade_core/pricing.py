"""
Pricing: which side of a quote an order or position trades at.

Buys enter at the ask and are valued (closed) at the bid; sells the reverse.
"""

from __future__ import annotations

from vtrade_core.events import Price, Tick
from vtrade_core.order import Side


class Pricing:
    """Entry, current and trigger prices from a tick."""

    def entry_price(self, tick: Tick, pair: str, side: Side) -> float:
        """Price a new position on pair/side opens at."""
        quote = tick[pair]
        return quote.ask if Side(side) is Side.BUY else quote.bid

    def current_price(self, tick: Tick, pair: str, side: Side) -> float:
        """Price an open position on pair/side would close at."""
        quote = tick[pair]
        return quote.bid if Side(side) is Side.BUY else quote.ask

    def trigger_price(
        self,
        tick: Tick,
        pair: str,
        side: Side,
        trigger_condition: str | None = None,
    ) -> float | None:
        """
        Price compared against a pending order's price. None when the tick
        has no quote for pair.
        """
        quote = tick.get(pair)
        if quote is None:
            return None
        return _select(quote, Side(side), (trigger_condition or "DEFAULT").upper())


def _select(quote: Price, side: Side, condition: str) -> float:
    if condition == "BID":
        return quote.bid
    if condition == "ASK":
        return quote.ask
    if condition == "MID":
        return quote.mid
    if condition == "INVERSE":
        return quote.bid if side is Side.BUY else quote.ask
    return quote.ask if side is Side.BUY else quote.bid
