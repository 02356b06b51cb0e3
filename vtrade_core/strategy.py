"""
Strategy: interface for tick-driven order placement.

Strategies consume ticks and place, modify or cancel orders through a broker.
Implementations define the logic; the backtest engine wires ticks and calls on_tick.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vtrade_core.events import Tick
    from vtrade_core.execution.broker import BrokerAdapter


class Strategy(ABC):
    """
    Base class for strategies. Receives each tick after pending orders
    have been advanced against it.
    """

    @abstractmethod
    def on_tick(self, tick: "Tick", broker: "BrokerAdapter") -> None:
        """React to a tick, e.g. by submitting orders to broker."""
        ...
