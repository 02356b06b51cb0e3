"""
Backtest metrics: fill activity and unit exposure.

Profit is not tracked by the virtual account, so metrics describe what traded
(fills, closes, reduces, expiries) and how much was held (net/gross units).
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from backtesting.engine import BacktestResult


@dataclass
class Metrics:
    """Activity and exposure metrics of one backtest."""

    submitted_pending: int
    positions_opened: int
    fills_absorbed: int
    positions_closed: int
    positions_reduced: int
    units_closed: int
    expired_orders: int
    max_gross_exposure: int
    final_net_exposure: dict[str, int] = field(default_factory=dict)


def compute_metrics(result: BacktestResult) -> Metrics:
    """
    Compute metrics from a backtest result.

    Parameters
    ----------
    result : BacktestResult
        Output of BacktestEngine.run().

    Returns
    -------
    Metrics
        Counts per outcome kind, closed units, expired orders, the largest
        gross (absolute, summed over pairs) exposure seen at any tick and the
        net exposure per pair after the last tick.
    """
    results = result.results
    closed = [c for r in results for c in r.trades_closed]

    gross = np.array(
        [sum(abs(u) for u in exposure.values()) for _, exposure in result.exposure_curve],
        dtype=np.int64,
    )
    max_gross = int(gross.max()) if gross.size else 0
    final_net = dict(result.exposure_curve[-1][1]) if result.exposure_curve else {}

    return Metrics(
        submitted_pending=sum(1 for r in results if r.is_pending),
        positions_opened=sum(1 for r in results if r.is_opened),
        fills_absorbed=sum(1 for r in results if r.is_absorbed),
        positions_closed=len(closed),
        positions_reduced=sum(1 for r in results if r.trade_reduced is not None),
        units_closed=int(np.sum([c.units for c in closed], dtype=np.int64)),
        expired_orders=result.expired_orders,
        max_gross_exposure=max_gross,
        final_net_exposure=final_net,
    )
