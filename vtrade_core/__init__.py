"""
vtrade-core: deterministic order and position simulation for tick backtests.

One virtual account per broker instance: pending orders, fills against ticks,
and netting of new positions against the opposite side.
"""

__version__ = "0.1.0"

from vtrade_core.errors import NotFoundError, ValidationError, VirtualTradeError
from vtrade_core.events import Price, Tick
from vtrade_core.event_loop import TickLoop
from vtrade_core.order import Order, OrderType, Side
from vtrade_core.position import ClosedPosition, Position, ReducedPosition
from vtrade_core.pricing import Pricing
from vtrade_core.risk import DefaultOrderValidator, OrderValidator
from vtrade_core.strategy import Strategy

__all__ = [
    "Price",
    "Tick",
    "TickLoop",
    "Order",
    "OrderType",
    "Side",
    "Position",
    "ClosedPosition",
    "ReducedPosition",
    "Pricing",
    "OrderValidator",
    "DefaultOrderValidator",
    "Strategy",
    "VirtualTradeError",
    "ValidationError",
    "NotFoundError",
]
