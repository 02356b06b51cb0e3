"""
Tick types for the event-driven core.

A Tick is an immutable price observation: one timestamp and a bid/ask quote
per pair. Ticks drive every fill and valuation decision.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Price:
    """Bid/ask quote for one pair."""

    bid: float
    ask: float

    @property
    def mid(self) -> float:
        return (self.bid + self.ask) / 2


@dataclass(frozen=True)
class Tick:
    """Timestamped quotes for one or more pairs."""

    timestamp: datetime
    prices: Mapping[str, Price] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.timestamp, datetime):
            object.__setattr__(self, "timestamp", datetime.fromisoformat(str(self.timestamp)))
        object.__setattr__(self, "prices", dict(self.prices))

    def __getitem__(self, pair: str) -> Price:
        return self.prices[pair]

    def __contains__(self, pair: object) -> bool:
        return pair in self.prices

    def get(self, pair: str) -> Price | None:
        """Quote for pair, or None when the tick has no price for it."""
        return self.prices.get(pair)

    @property
    def pairs(self) -> list[str]:
        return list(self.prices)
