"""
Buy-and-hold example strategy.

Submits a single market buy for a fixed pair on the first tick quoting it.
No sizing logic; minimal illustration of the Strategy interface.
"""

from vtrade_core.events import Tick
from vtrade_core.execution.broker import BrokerAdapter
from vtrade_core.order import OrderType, Side
from vtrade_core.strategy import Strategy


class BuyAndHoldStrategy(Strategy):
    """
    On the first tick with a quote for pair, buy `units` at market.
    Ignores subsequent ticks (already "in" the market).
    """

    def __init__(self, pair: str, units: int = 1) -> None:
        self.pair = pair
        self.units = units
        self._fired = False

    def on_tick(self, tick: Tick, broker: BrokerAdapter) -> None:
        if self._fired or self.pair not in tick:
            return
        self._fired = True
        broker.submit_order(self.pair, Side.BUY, self.units, OrderType.MARKET)
