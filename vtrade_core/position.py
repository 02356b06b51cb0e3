"""
Position: open units held by the virtual account on one pair and side.

Units are always > 0 while a position is stored; netting removes a position
as soon as it is fully offset. ClosedPosition/ReducedPosition are immutable
records of netting outcomes.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from vtrade_core.order import Side


@dataclass
class Position:
    """
    Open position. Mutable; the netting engine decrements units in place.
    """

    internal_id: str
    pair: str
    units: int
    side: Side
    entry_price: float
    entered_at: datetime
    current_price: float | None = None
    updated_at: datetime | None = None
    account_currency: str | None = None
    client_extensions: dict[str, Any] | None = None
    take_profit: dict[str, Any] | None = None
    stop_loss: dict[str, Any] | None = None
    trailing_stop_loss: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        self.side = Side(self.side)

    def snapshot(self) -> "Position":
        return copy.deepcopy(self)

    def update_price(self, price: float, timestamp: datetime) -> None:
        """Mark to market."""
        self.current_price = price
        self.updated_at = timestamp


@dataclass(frozen=True)
class ClosedPosition:
    """A reverse position fully offset by netting."""

    internal_id: str
    units: int
    price: float
    timestamp: datetime
    profit: float | None = None


@dataclass(frozen=True)
class ReducedPosition:
    """A reverse position partially offset by netting. `units` is the amount consumed."""

    internal_id: str
    units: int
    price: float
    timestamp: datetime
    profit: float | None = None
