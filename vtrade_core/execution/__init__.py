"""
Execution layer: broker abstraction and the tick-driven virtual broker.

BrokerAdapter interface; VirtualBrokerAdapter (order lifecycle); position
builder; netting of new positions against reverse positions; order results.
"""

from vtrade_core.execution.broker import BrokerAdapter
from vtrade_core.execution.builder import PositionBuilder
from vtrade_core.execution.netting import PositionNetting
from vtrade_core.execution.types import NettingOutcome, OrderResult
from vtrade_core.execution.virtual import VirtualBrokerAdapter

__all__ = [
    "BrokerAdapter",
    "VirtualBrokerAdapter",
    "PositionBuilder",
    "PositionNetting",
    "NettingOutcome",
    "OrderResult",
]
