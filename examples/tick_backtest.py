"""
Tick backtest demo using the backtesting framework.

Demonstrates: load tick CSV → strategy places orders on the virtual broker →
pending orders fill/expire on later ticks → activity report.
"""

from pathlib import Path

from backtesting import BacktestEngine, load_csv, print_report
from vtrade_core import Tick
from vtrade_core.examples.buy_and_hold import BuyAndHoldStrategy
from vtrade_core.execution import OrderResult, VirtualBrokerAdapter


def print_result_observer(result: OrderResult, tick: Tick) -> None:
    """Observer: log every order result."""
    if result.is_pending:
        o = result.order_opened
        print(f"  [{tick.timestamp}] PENDING {o.order_type.value} {o.side.value} {o.units} {o.pair} @ {o.price}")
    elif result.is_opened:
        p = result.trade_opened
        print(f"  [{tick.timestamp}] OPENED {p.side.value} {p.units} {p.pair} @ {p.entry_price}")
    for closed in result.trades_closed:
        print(f"  [{tick.timestamp}] CLOSED #{closed.internal_id} {closed.units} @ {closed.price}")
    if result.trade_reduced is not None:
        r = result.trade_reduced
        print(f"  [{tick.timestamp}] REDUCED #{r.internal_id} by {r.units} @ {r.price}")


def main() -> None:
    data = load_csv(Path(__file__).resolve().parent / "data" / "sample_ticks.csv")

    broker = VirtualBrokerAdapter(account_currency="JPY")
    strategy = BuyAndHoldStrategy(pair="USDJPY", units=10_000)
    engine = BacktestEngine(strategy, broker, observers=[print_result_observer])

    result = engine.run(data)
    print_report(result)


if __name__ == "__main__":
    main()
