"""
TickLoop: feeds ticks, in arrival order, to the callables that drive a backtest.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from vtrade_core.events import Tick

logger = logging.getLogger(__name__)

TickHandler = Callable[[Tick], None]


class TickLoop:
    """
    Synchronous tick feed. Every handler sees every tick, handlers in the order
    they subscribed. A tick older than the previous one is still delivered but
    logged, since fills and expiry assume time only moves forward.
    """

    def __init__(self) -> None:
        self._handlers: list[TickHandler] = []
        self.last_tick: Tick | None = None
        self.ticks_seen = 0

    def subscribe(self, handler: TickHandler) -> TickHandler:
        """Add `handler`; returned unchanged so this also works as a decorator."""
        self._handlers.append(handler)
        return handler

    def unsubscribe(self, handler: TickHandler) -> None:
        self._handlers.remove(handler)

    def dispatch(self, tick: Tick) -> None:
        if self.last_tick is not None and tick.timestamp < self.last_tick.timestamp:
            logger.warning("Tick at %s arrived after %s", tick.timestamp, self.last_tick.timestamp)
        self.last_tick = tick
        self.ticks_seen += 1
        for handler in list(self._handlers):
            handler(tick)

    def run(self, ticks: Iterable[Tick]) -> int:
        """Dispatch every tick; returns how many were dispatched by this call."""
        start = self.ticks_seen
        for tick in ticks:
            self.dispatch(tick)
        logger.debug("Tick loop dispatched %d ticks", self.ticks_seen - start)
        return self.ticks_seen - start
