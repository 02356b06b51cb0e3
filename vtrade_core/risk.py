"""
OrderValidator: interface for order parameter checks.

Consumes a candidate order's parameters (options in wire form) and raises
ValidationError if they are not acceptable. Implementations define the rules;
the virtual account calls validate before touching any state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from vtrade_core.errors import ValidationError
from vtrade_core.options import WIRE_KEYS
from vtrade_core.order import OrderType, Side

MARKET_TIME_IN_FORCE = frozenset({"FOK", "IOC"})
PENDING_TIME_IN_FORCE = frozenset({"GTC", "GTD", "GFD"})
POSITION_FILL = frozenset({"DEFAULT", "OPEN_ONLY", "REDUCE_FIRST", "REDUCE_ONLY"})
TRIGGER_CONDITIONS = frozenset({"DEFAULT", "INVERSE", "BID", "ASK", "MID"})

_MAPPING_OPTIONS = (
    "clientExtensions",
    "tradeClientExtensions",
    "takeProfitOnFill",
    "stopLossOnFill",
    "trailingStopLossOnFill",
)


class OrderValidator(ABC):
    """Base class for order validators."""

    @abstractmethod
    def validate(
        self,
        pair: str,
        side: Side | str,
        units: Any,
        order_type: OrderType | str,
        options: Mapping[str, Any],
    ) -> None:
        """Raise ValidationError if the order may not be placed."""
        ...


class DefaultOrderValidator(OrderValidator):
    """
    Broker-style rules for the virtual account. If `pairs` is given, orders on
    any other pair are rejected.
    """

    def __init__(self, pairs: Iterable[str] | None = None) -> None:
        self.pairs = frozenset(pairs) if pairs is not None else None

    def validate(
        self,
        pair: str,
        side: Side | str,
        units: Any,
        order_type: OrderType | str,
        options: Mapping[str, Any],
    ) -> None:
        unknown = sorted(k for k in options if k not in WIRE_KEYS)
        if unknown:
            raise ValidationError(f"unknown options: {', '.join(unknown)}")
        if not pair:
            raise ValidationError("pair is required")
        if self.pairs is not None and pair not in self.pairs:
            raise ValidationError(f"pair not tradable: {pair}")
        try:
            Side(side)
        except ValueError:
            raise ValidationError(f"invalid side: {side!r}") from None
        try:
            kind = OrderType(order_type)
        except ValueError:
            raise ValidationError(f"invalid order type: {order_type!r}") from None
        if isinstance(units, bool) or not isinstance(units, int) or units <= 0:
            raise ValidationError(f"units must be a positive integer: {units!r}")

        price = _number(options.get("price"), "price")
        if kind is not OrderType.MARKET:
            if price is None or price <= 0:
                raise ValidationError(f"price is required for {kind.value} orders")
        self._validate_time_in_force(kind, options)
        _check_choice(options, "positionFill", POSITION_FILL)
        _check_choice(options, "triggerCondition", TRIGGER_CONDITIONS)
        self._validate_mappings(options)
        bound = _number(options.get("priceBound"), "priceBound")
        if bound is not None and bound <= 0:
            raise ValidationError("priceBound must be positive")

    def _validate_time_in_force(self, kind: OrderType, options: Mapping[str, Any]) -> None:
        gtd = options.get("gtdTime")
        if gtd is not None and not isinstance(gtd, datetime):
            try:
                datetime.fromisoformat(str(gtd).replace("Z", "+00:00"))
            except ValueError:
                raise ValidationError(f"invalid gtdTime: {gtd!r}") from None
        tif = options.get("timeInForce")
        if tif is None:
            return
        allowed = MARKET_TIME_IN_FORCE if kind is OrderType.MARKET else PENDING_TIME_IN_FORCE
        if tif not in allowed:
            raise ValidationError(f"timeInForce {tif!r} not allowed for {kind.value} orders")
        if tif == "GTD" and gtd is None:
            raise ValidationError("gtdTime is required when timeInForce is GTD")

    def _validate_mappings(self, options: Mapping[str, Any]) -> None:
        for key in _MAPPING_OPTIONS:
            value = options.get(key)
            if value is not None and not isinstance(value, Mapping):
                raise ValidationError(f"{key} must be a mapping")
        for key in ("takeProfitOnFill", "stopLossOnFill"):
            details = options.get(key)
            if details is not None and details.get("price") is None:
                raise ValidationError(f"{key} requires a price")
        trailing = options.get("trailingStopLossOnFill")
        if trailing is not None and trailing.get("distance") is None:
            raise ValidationError("trailingStopLossOnFill requires a distance")


def _number(value: Any, name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number: {value!r}") from None


def _check_choice(options: Mapping[str, Any], key: str, allowed: frozenset[str]) -> None:
    value = options.get(key)
    if value is not None and value not in allowed:
        raise ValidationError(f"invalid {key}: {value!r}")
