"""
Position netting: offset a new position against open positions on the other side.

Reverse positions are consumed in storage order (first stored, first consumed),
with no sorting by price, age or size. The walk stops touching positions once
the incoming units reach zero, so at most one reverse position is reduced per call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from vtrade_core.events import Tick
from vtrade_core.position import ClosedPosition, Position, ReducedPosition
from vtrade_core.pricing import Pricing

from vtrade_core.execution.types import NettingOutcome

logger = logging.getLogger(__name__)


class PositionNetting:
    """
    Owns the open-position set of one account. Positions here always have units > 0.
    """

    def __init__(self, pricing: Pricing | None = None, positions: Iterable[Position] = ()) -> None:
        self.pricing = pricing or Pricing()
        self._positions: list[Position] = list(positions)

    @property
    def positions(self) -> list[Position]:
        """Stored positions (live objects; callers outside the account get snapshots)."""
        return self._positions

    def net(self, position: Position, tick: Tick) -> NettingOutcome:
        """
        Net `position` against reverse positions, valuing closes at the tick's
        current price. Mutates `position.units` and the open-position set.
        """
        outcome = NettingOutcome(position=position)
        for reverse in self._reverse_positions(position):
            self._close_or_reduce(outcome, reverse, tick)
        self._remove_closed(outcome.closed)
        if position.units > 0:
            self._positions.append(position)
            logger.debug("Opened position %s: %s %s x%d", position.internal_id, position.pair, position.side.value, position.units)
        return outcome

    def _reverse_positions(self, position: Position) -> list[Position]:
        return [
            p for p in self._positions
            if p.pair == position.pair and p.side is not position.side
        ]

    def _close_or_reduce(self, outcome: NettingOutcome, reverse: Position, tick: Tick) -> None:
        incoming = outcome.position
        units = incoming.units
        if units <= 0:
            return
        price = self.pricing.current_price(tick, reverse.pair, reverse.side)
        if reverse.units <= units:
            outcome.closed.append(ClosedPosition(reverse.internal_id, reverse.units, price, tick.timestamp))
            incoming.units -= reverse.units
            logger.debug("Closed position %s (%d units) at %s", reverse.internal_id, reverse.units, price)
        else:
            reverse.units -= units
            incoming.units = 0
            outcome.reduced = ReducedPosition(reverse.internal_id, units, price, tick.timestamp)
            logger.debug("Reduced position %s by %d units at %s", reverse.internal_id, units, price)

    def _remove_closed(self, closed: list[ClosedPosition]) -> None:
        ids = {c.internal_id for c in closed}
        if ids:
            self._positions = [p for p in self._positions if p.internal_id not in ids]
