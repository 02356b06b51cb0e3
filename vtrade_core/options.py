"""
Option translation between internal order properties and the broker wire schema.

Internal names are snake_case Order attributes (time_in_force, gtd_time, ...);
wire names are the camelCase keys a broker API uses (timeInForce, gtdTime, ...).
Nested mappings (extensions, on-fill specs) pass through with their shape unchanged.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from vtrade_core.order import MODIFIABLE_PROPERTIES

logger = logging.getLogger(__name__)

WIRE_KEYS: tuple[str, ...] = tuple(MODIFIABLE_PROPERTIES)
INTERNAL_TO_WIRE: dict[str, str] = {attr: key for key, attr in MODIFIABLE_PROPERTIES.items()}

_TIME_KEYS = frozenset({"gtdTime"})
_DECIMAL_KEYS = frozenset({"price", "priceBound"})


def wire_key(key: str) -> str:
    """Wire name for key. Wire names and unknown keys are returned unchanged."""
    return INTERNAL_TO_WIRE.get(key, key)


def to_wire_value(key: str, value: Any) -> Any:
    """Convert one internal value to its wire form."""
    if value is None:
        return None
    if key in _TIME_KEYS and isinstance(value, datetime):
        return value.isoformat()
    return copy.deepcopy(value)


def from_wire_value(key: str, value: Any) -> Any:
    """Convert one wire value to its internal form (datetime for times, float for prices)."""
    if value is None:
        return None
    if key in _TIME_KEYS:
        if isinstance(value, datetime):
            return value
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if key in _DECIMAL_KEYS:
        return float(value)
    return copy.deepcopy(value)


def to_wire_options(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Translate an option mapping to wire form. Accepts internal or wire keys;
    unknown keys are kept so the validator can reject them.
    """
    out: dict[str, Any] = {}
    for key, value in (options or {}).items():
        wk = wire_key(key)
        out[wk] = to_wire_value(wk, value)
    logger.debug("Translated options %s -> %s", list(options or {}), list(out))
    return out


def from_wire_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Translate wire options to internal attribute names and values. Unknown keys are dropped."""
    return {
        MODIFIABLE_PROPERTIES[key]: from_wire_value(key, value)
        for key, value in options.items()
        if key in MODIFIABLE_PROPERTIES
    }


def order_to_wire(order: Any) -> dict[str, Any]:
    """Modifiable properties of an order in wire form; unset properties are omitted."""
    out: dict[str, Any] = {}
    for key, attr in MODIFIABLE_PROPERTIES.items():
        value = getattr(order, attr)
        if value is not None:
            out[key] = to_wire_value(key, value)
    return out
