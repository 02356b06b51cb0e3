"""
Broker abstraction layer.

BrokerAdapter ABC: submit/list/get/modify/cancel orders and read open positions.
VirtualBrokerAdapter implements it for tick-driven simulation; strategies only
depend on this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from vtrade_core.order import Order, OrderType, Side
from vtrade_core.position import Position

from vtrade_core.execution.types import OrderResult


class BrokerAdapter(ABC):
    """
    Abstract broker adapter. Options use either internal (snake_case) or
    wire (camelCase) keys; see vtrade_core.options.
    """

    @abstractmethod
    def submit_order(
        self,
        pair: str,
        side: Side | str,
        units: int,
        order_type: OrderType | str = OrderType.MARKET,
        options: Mapping[str, Any] | None = None,
    ) -> OrderResult:
        """
        Place an order. Fills immediately when the current tick satisfies it,
        otherwise rests as a pending order. Raises ValidationError.
        """
        ...

    @abstractmethod
    def list_orders(self, count: int = 500, pair: str | None = None, max_id: str | None = None) -> list[Order]:
        """Pending orders, newest id first."""
        ...

    @abstractmethod
    def get_order(self, internal_id: str) -> Order:
        """Pending order by id. Raises NotFoundError."""
        ...

    @abstractmethod
    def modify_order(self, internal_id: str, options: Mapping[str, Any] | None = None) -> Order:
        """Update a pending order; returns its new state. Raises NotFoundError, ValidationError."""
        ...

    @abstractmethod
    def cancel_order(self, internal_id: str) -> Order:
        """Remove a pending order; returns its last state. Raises NotFoundError."""
        ...

    @abstractmethod
    def get_positions(self, pair: str | None = None) -> list[Position]:
        """Open positions, optionally for one pair."""
        ...
