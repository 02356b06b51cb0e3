"""
Position builder: turn a filled order into a Position at the tick's entry price.
"""

from __future__ import annotations

import copy

from vtrade_core.events import Tick
from vtrade_core.order import Order
from vtrade_core.position import Position
from vtrade_core.pricing import Pricing


class PositionBuilder:
    """Builds positions from orders. The position inherits the order's id."""

    def __init__(self, pricing: Pricing | None = None) -> None:
        self.pricing = pricing or Pricing()

    def build_from_order(self, order: Order, tick: Tick, account_currency: str | None = None) -> Position:
        entry = self.pricing.entry_price(tick, order.pair, order.side)
        return Position(
            internal_id=order.internal_id,
            pair=order.pair,
            units=order.units,
            side=order.side,
            entry_price=entry,
            entered_at=tick.timestamp,
            current_price=self.pricing.current_price(tick, order.pair, order.side),
            updated_at=tick.timestamp,
            account_currency=account_currency,
            client_extensions=copy.deepcopy(order.trade_client_extensions),
            take_profit=copy.deepcopy(order.take_profit_on_fill),
            stop_loss=copy.deepcopy(order.stop_loss_on_fill),
            trailing_stop_loss=copy.deepcopy(order.trailing_stop_loss_on_fill),
        )
