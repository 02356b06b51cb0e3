"""
Tick backtesting on top of vtrade-core.

Feeds historical ticks through a VirtualBrokerAdapter and a Strategy; computes
activity/exposure metrics; observers receive every order result.
"""

from backtesting.engine import BacktestEngine, BacktestResult, RecordingBroker
from backtesting.data_loader import iter_ticks, load_csv, load_dataframe
from backtesting.metrics import Metrics, compute_metrics
from backtesting.report import print_report

__all__ = [
    "BacktestEngine",
    "BacktestResult",
    "RecordingBroker",
    "iter_ticks",
    "load_csv",
    "load_dataframe",
    "Metrics",
    "compute_metrics",
    "print_report",
]
