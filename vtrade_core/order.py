"""
Order: a request held by the virtual account until it fills, expires or is cancelled.

Mutable. Modify updates the stored order in place; callers only ever see copies
(see Order.snapshot).
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Side(Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(Enum):
    MARKET = "market"
    LIMIT = "limit"
    STOP = "stop"
    MARKET_IF_TOUCHED = "market_if_touched"


# Broker-style optional properties, keyed by wire name -> Order attribute.
PROPERTIES: dict[str, str] = {
    "timeInForce": "time_in_force",
    "positionFill": "position_fill",
    "triggerCondition": "trigger_condition",
    "clientExtensions": "client_extensions",
    "takeProfitOnFill": "take_profit_on_fill",
    "stopLossOnFill": "stop_loss_on_fill",
    "trailingStopLossOnFill": "trailing_stop_loss_on_fill",
    "tradeClientExtensions": "trade_client_extensions",
    "gtdTime": "gtd_time",
    "priceBound": "price_bound",
    "price": "price",
}

MODIFIABLE_PROPERTIES: dict[str, str] = {"units": "units", **PROPERTIES}

# Properties whose new value is merged into the current one on modify.
MAPPING_PROPERTIES = frozenset({
    "client_extensions",
    "take_profit_on_fill",
    "stop_loss_on_fill",
    "trailing_stop_loss_on_fill",
    "trade_client_extensions",
})


@dataclass
class Order:
    """A pending (or just-filled) order of the virtual account."""

    pair: str
    internal_id: str
    side: Side
    order_type: OrderType
    created_at: datetime
    units: int = 0
    price: float | None = None
    initial_price: float | None = None
    time_in_force: str | None = None
    position_fill: str | None = None
    trigger_condition: str | None = None
    client_extensions: dict[str, Any] | None = None
    take_profit_on_fill: dict[str, Any] | None = None
    stop_loss_on_fill: dict[str, Any] | None = None
    trailing_stop_loss_on_fill: dict[str, Any] | None = None
    trade_client_extensions: dict[str, Any] | None = None
    gtd_time: datetime | None = None
    price_bound: float | None = None

    def __post_init__(self) -> None:
        self.side = Side(self.side)
        self.order_type = OrderType(self.order_type)

    def snapshot(self) -> "Order":
        """Independent copy; nested extension dicts are copied too."""
        return copy.deepcopy(self)

    def is_expired(self, timestamp: datetime) -> bool:
        """True once timestamp is strictly later than the good-till time."""
        return self.gtd_time is not None and _utc(timestamp) > _utc(self.gtd_time)

    def is_triggered_by(self, price: float) -> bool:
        """
        Whether the order fills when the trigger-side price is `price`.
        Market orders always fill.
        """
        if self.order_type is OrderType.MARKET:
            return True
        if self.price is None:
            return False
        if self.order_type is OrderType.LIMIT:
            return price <= self.price if self.side is Side.BUY else price >= self.price
        if self.order_type is OrderType.STOP:
            return price >= self.price if self.side is Side.BUY else price <= self.price
        # market-if-touched: fills once the market reaches price from where it started
        if self.initial_price is None:
            return False
        if self.price >= self.initial_price:
            return price >= self.price
        return price <= self.price

    def get_property(self, name: str) -> Any:
        return getattr(self, name)

    def set_property(self, name: str, value: Any) -> None:
        if name not in MODIFIABLE_PROPERTIES.values():
            raise AttributeError(f"{name} is not a modifiable order property")
        setattr(self, name, value)


def _utc(ts: datetime) -> datetime:
    # Naive timestamps are taken as UTC so they compare with wire times ending in "Z".
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)
