"""
Execution-layer types: netting outcome and order result.

OrderResult is what callers receive for every submission and every tick-driven fill.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from vtrade_core.order import Order
from vtrade_core.position import ClosedPosition, Position, ReducedPosition


@dataclass
class NettingOutcome:
    """
    Raw result of netting one incoming position against reverse positions.
    `position` is the incoming position after netting (units may be 0).
    """

    position: Position
    closed: list[ClosedPosition] = field(default_factory=list)
    reduced: ReducedPosition | None = None

    @property
    def opened(self) -> bool:
        return self.position.units > 0


@dataclass(frozen=True)
class OrderResult:
    """
    Outcome of one order submission or one tick-driven fill. Immutable.
    At most one of order_opened / trade_opened is set.
    """

    order_opened: Order | None = None
    trade_opened: Position | None = None
    trade_reduced: ReducedPosition | None = None
    trades_closed: tuple[ClosedPosition, ...] = ()

    @property
    def is_pending(self) -> bool:
        """Order was accepted but rests in the pending set."""
        return self.order_opened is not None

    @property
    def is_opened(self) -> bool:
        """A new position was opened (possibly after closing reverse positions)."""
        return self.trade_opened is not None

    @property
    def is_absorbed(self) -> bool:
        """The fill was fully offset against reverse positions."""
        return self.order_opened is None and self.trade_opened is None
