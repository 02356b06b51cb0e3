"""
Result assembly: package a pending order or a netting outcome as an OrderResult.

Every embedded order/position is a snapshot, so mutating the account later
never changes a result already handed out.
"""

from __future__ import annotations

from vtrade_core.order import Order

from vtrade_core.execution.types import NettingOutcome, OrderResult


def pending_result(order: Order) -> OrderResult:
    """Order accepted and resting; no position data."""
    return OrderResult(order_opened=order.snapshot())


def fill_result(outcome: NettingOutcome) -> OrderResult:
    """
    Opened: the incoming position kept units; report it with the closed list.
    Absorbed: report the reduce (if any) with the closed list.
    """
    closed = tuple(outcome.closed)
    if outcome.opened:
        return OrderResult(trade_opened=outcome.position.snapshot(), trades_closed=closed)
    return OrderResult(trade_reduced=outcome.reduced, trades_closed=closed)
