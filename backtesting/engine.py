"""
Backtesting engine: drives ticks through a virtual broker and a strategy.

Loads ticks → TickLoop → broker.update_tick (pending fills/expiry) → Strategy.on_tick.
Observers see every OrderResult (submissions made by the strategy and tick-driven fills).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

import pandas as pd

from vtrade_core import Order, OrderType, Position, Side, Strategy, Tick, TickLoop
from vtrade_core.execution import BrokerAdapter, OrderResult, VirtualBrokerAdapter

from backtesting.data_loader import iter_ticks


class Observer(Protocol):
    """Hook called with every order result and the tick it happened on."""

    def __call__(self, result: OrderResult, tick: Tick) -> None:
        ...


@dataclass
class BacktestResult:
    """Result of a backtest run: order results, final positions, net unit exposure per tick."""

    results: list[OrderResult] = field(default_factory=list)
    positions: list[Position] = field(default_factory=list)
    exposure_curve: list[tuple[datetime, dict[str, int]]] = field(default_factory=list)
    expired_orders: int = 0


class RecordingBroker(BrokerAdapter):
    """
    Broker handed to the strategy: delegates to the virtual broker and reports
    each submission result to `record`.
    """

    def __init__(self, broker: BrokerAdapter, record: Callable[[OrderResult], None]) -> None:
        self._broker = broker
        self._record = record

    def submit_order(
        self,
        pair: str,
        side: Side | str,
        units: int,
        order_type: OrderType | str = OrderType.MARKET,
        options: Mapping[str, Any] | None = None,
    ) -> OrderResult:
        result = self._broker.submit_order(pair, side, units, order_type, options)
        self._record(result)
        return result

    def list_orders(self, count: int = 500, pair: str | None = None, max_id: str | None = None) -> list[Order]:
        return self._broker.list_orders(count, pair, max_id)

    def get_order(self, internal_id: str) -> Order:
        return self._broker.get_order(internal_id)

    def modify_order(self, internal_id: str, options: Mapping[str, Any] | None = None) -> Order:
        return self._broker.modify_order(internal_id, options)

    def cancel_order(self, internal_id: str) -> Order:
        return self._broker.cancel_order(internal_id)

    def get_positions(self, pair: str | None = None) -> list[Position]:
        return self._broker.get_positions(pair)


class BacktestEngine:
    """
    Orchestrates a tick backtest: for each tick, advance the broker's pending
    orders, then let the strategy act. Records order results and exposure.
    """

    def __init__(
        self,
        strategy: Strategy,
        broker: VirtualBrokerAdapter | None = None,
        *,
        observers: Sequence[Observer] = (),
    ) -> None:
        self.strategy = strategy
        self.broker = broker or VirtualBrokerAdapter()
        self.observers: list[Observer] = list(observers)
        self._results: list[OrderResult] = []
        self._exposure: list[tuple[datetime, dict[str, int]]] = []
        self._expired = 0
        self._tick: Tick | None = None

    def _record(self, result: OrderResult) -> None:
        self._results.append(result)
        for obs in self.observers:
            obs(result, self._tick)

    def _net_exposure(self) -> dict[str, int]:
        """Signed units per pair (buy positive)."""
        exposure: dict[str, int] = {}
        for p in self.broker.get_positions():
            sign = 1 if p.side is Side.BUY else -1
            exposure[p.pair] = exposure.get(p.pair, 0) + sign * p.units
        return exposure

    def _handle_tick(self, tick: Tick) -> None:
        """Process one tick: expire/fill pending orders → strategy → exposure snapshot."""
        self._tick = tick
        pending_before = len(self.broker.list_orders())
        fills = self.broker.update_tick(tick)
        # Every pending order either filled, expired or is still pending.
        self._expired += pending_before - len(fills) - len(self.broker.list_orders())
        for result in fills:
            self._record(result)
        self.strategy.on_tick(tick, RecordingBroker(self.broker, self._record))
        self._exposure.append((tick.timestamp, self._net_exposure()))

    def run(self, data: pd.DataFrame | Iterable[Tick]) -> BacktestResult:
        """
        Run the backtest over tick data.

        Parameters
        ----------
        data : pd.DataFrame or iterable of Tick
            Normalized tick frame (see backtesting.data_loader) or ticks.

        Returns
        -------
        BacktestResult
            Order results, final open positions and the exposure curve.
        """
        self._results = []
        self._exposure = []
        self._expired = 0
        ticks = iter_ticks(data) if isinstance(data, pd.DataFrame) else data

        loop = TickLoop()
        loop.subscribe(self._handle_tick)
        loop.run(ticks)

        return BacktestResult(
            results=list(self._results),
            positions=self.broker.get_positions(),
            exposure_curve=list(self._exposure),
            expired_orders=self._expired,
        )
