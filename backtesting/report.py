"""
Backtest report: print an activity summary from BacktestResult and Metrics.
"""

from __future__ import annotations

from backtesting.engine import BacktestResult
from backtesting.metrics import Metrics, compute_metrics


def print_report(result: BacktestResult) -> Metrics:
    """
    Compute metrics from backtest result and print a summary.

    Returns
    -------
    Metrics
        The computed metrics (e.g. for programmatic use).
    """
    metrics = compute_metrics(result)
    print("--- Backtest Activity ---")
    print(f"Pending orders placed: {metrics.submitted_pending}")
    print(f"Positions opened:      {metrics.positions_opened}")
    print(f"Fills absorbed:        {metrics.fills_absorbed}")
    print(f"Positions closed:      {metrics.positions_closed} ({metrics.units_closed:,} units)")
    print(f"Positions reduced:     {metrics.positions_reduced}")
    print(f"Orders expired:        {metrics.expired_orders}")
    print(f"Max gross exposure:    {metrics.max_gross_exposure:,} units")
    for pair, units in sorted(metrics.final_net_exposure.items()):
        print(f"Net {pair}: {units:+,}")
    print(f"Open positions:        {len(result.positions)}")
    print("-------------------------")
    return metrics
