"""
Virtual broker: one simulated account driven by historical ticks.

Holds pending orders and open positions; every value handed back to callers
is a snapshot. Single-threaded: callers must serialize access to an instance.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from vtrade_core.errors import NotFoundError, ValidationError
from vtrade_core.events import Tick
from vtrade_core.options import from_wire_value, order_to_wire, to_wire_options
from vtrade_core.order import MAPPING_PROPERTIES, MODIFIABLE_PROPERTIES, PROPERTIES, Order, OrderType, Side
from vtrade_core.position import Position
from vtrade_core.pricing import Pricing
from vtrade_core.risk import DefaultOrderValidator, OrderValidator

from vtrade_core.execution.broker import BrokerAdapter
from vtrade_core.execution.builder import PositionBuilder
from vtrade_core.execution.netting import PositionNetting
from vtrade_core.execution.results import fill_result, pending_result
from vtrade_core.execution.types import OrderResult

logger = logging.getLogger(__name__)


class VirtualBrokerAdapter(BrokerAdapter):
    """
    Simulated account. Orders fill against the current tick at submission,
    or later in advance()/update_tick(). Fills are netted against open positions
    on the other side before anything new is opened.
    Collaborators (validator, position builder, pricing) are injected; defaults
    are used when omitted.
    """

    def __init__(
        self,
        initial_tick: Tick | None = None,
        *,
        validator: OrderValidator | None = None,
        position_builder: PositionBuilder | None = None,
        pricing: Pricing | None = None,
        account_currency: str = "USD",
        orders: Iterable[Order] = (),
        positions: Iterable[Position] = (),
    ) -> None:
        self.pricing = pricing or Pricing()
        self.validator = validator or DefaultOrderValidator()
        self.position_builder = position_builder or PositionBuilder(self.pricing)
        self.account_currency = account_currency
        self._current_tick = initial_tick
        self._orders: list[Order] = list(orders)
        self._netting = PositionNetting(self.pricing, positions)
        # Ids already in use (restored state) must never be issued again.
        self._order_id = max(
            [1] + [int(o.internal_id) for o in self._orders] + [int(p.internal_id) for p in self._netting.positions]
        )

    @property
    def current_tick(self) -> Tick | None:
        return self._current_tick

    # --- orders ---

    def submit_order(
        self,
        pair: str,
        side: Side | str,
        units: int,
        order_type: OrderType | str = OrderType.MARKET,
        options: Mapping[str, Any] | None = None,
    ) -> OrderResult:
        options = to_wire_options(options)
        _insert_default_options(order_type, options)
        self.validator.validate(pair, side, units, order_type, options)
        tick = self._require_tick(pair, OrderType(order_type))
        order = self._create_order(pair, Side(side), units, OrderType(order_type), options, tick)
        if self._is_fillable(order, tick):
            logger.info("Order %s filled on submit: %s %s x%d", order.internal_id, order.pair, order.side.value, order.units)
            return self._register_position(order, tick)
        self._orders.append(order)
        logger.info(
            "Order %s pending: %s %s %s x%d @ %s",
            order.internal_id, order.order_type.value, order.pair, order.side.value, order.units, order.price,
        )
        return pending_result(order)

    def list_orders(self, count: int = 500, pair: str | None = None, max_id: str | None = None) -> list[Order]:
        """
        Snapshots of pending orders, newest id first. count, pair and max_id are
        accepted for broker API compatibility and are not applied.
        """
        return sorted((o.snapshot() for o in self._orders), key=lambda o: -int(o.internal_id))

    def get_order(self, internal_id: str) -> Order:
        return self._find_order(internal_id).snapshot()

    def modify_order(self, internal_id: str, options: Mapping[str, Any] | None = None) -> Order:
        """
        Supplied values overwrite the stored ones, except mapping properties
        (extensions, on-fill specs) which are merged key by key. Falsy values
        leave the stored property unchanged.
        """
        options = to_wire_options(options)
        order = self._find_order(internal_id)
        self._validate_modify(order, options)
        for key, attr in MODIFIABLE_PROPERTIES.items():
            new_value = options.get(key)
            if attr in MAPPING_PROPERTIES and isinstance(new_value, Mapping):
                new_value = {**(order.get_property(attr) or {}), **new_value}
            if new_value:
                order.set_property(attr, from_wire_value(key, new_value))
        logger.info("Order %s modified: %s", internal_id, sorted(options))
        return order.snapshot()

    def cancel_order(self, internal_id: str) -> Order:
        order = self._find_order(internal_id)
        self._orders = [o for o in self._orders if o.internal_id != internal_id]
        logger.info("Order %s cancelled", internal_id)
        return order.snapshot()

    # --- positions ---

    def get_positions(self, pair: str | None = None) -> list[Position]:
        return [
            p.snapshot() for p in self._netting.positions
            if pair is None or p.pair == pair
        ]

    # --- ticks ---

    def update_tick(self, tick: Tick) -> list[OrderResult]:
        """Make `tick` current, mark open positions to market, then advance pending orders."""
        self._current_tick = tick
        for position in self._netting.positions:
            if position.pair in tick:
                position.update_price(
                    self.pricing.current_price(tick, position.pair, position.side), tick.timestamp,
                )
        return self.advance(tick)

    def advance(self, tick: Tick) -> list[OrderResult]:
        """
        Expire or fill pending orders against `tick`, in pending-set order.
        Returns the results of fills; expired orders produce none.

        The pending set is rebuilt even if a fill raises: orders already
        expired or filled are gone, the failing order and those after it stay.
        """
        results: list[OrderResult] = []
        remaining: list[Order] = []
        pending = self._orders
        done = 0
        try:
            for order in pending:
                if order.is_expired(tick.timestamp):
                    logger.info("Order %s expired at %s", order.internal_id, tick.timestamp)
                elif self._needs_reference(order, tick):
                    # No quote at submission: this tick sets the touch reference and never fills.
                    order.initial_price = self._trigger_price(order, tick)
                    logger.debug("Order %s reference price %s", order.internal_id, order.initial_price)
                    remaining.append(order)
                elif self._is_fillable(order, tick):
                    try:
                        results.append(self._register_position(order, tick))
                    except KeyError as exc:
                        logger.warning("Lookup failed while filling order %s: %s", order.internal_id, exc)
                        raise RuntimeError(f"inconsistent account state filling order {order.internal_id}") from exc
                    logger.info("Order %s filled at %s", order.internal_id, tick.timestamp)
                else:
                    remaining.append(order)
                done += 1
        finally:
            self._orders = remaining + pending[done:]
        return results

    # --- internals ---

    def _new_id(self) -> str:
        self._order_id += 1
        return str(self._order_id)

    def _find_order(self, internal_id: str) -> Order:
        for order in self._orders:
            if order.internal_id == internal_id:
                return order
        raise NotFoundError(f"order not found: {internal_id}")

    def _require_tick(self, pair: str, order_type: OrderType) -> Tick:
        tick = self._current_tick
        if tick is None:
            raise ValidationError("no tick available")
        if order_type is OrderType.MARKET and pair not in tick:
            raise ValidationError(f"no price for {pair}")
        return tick

    def _create_order(
        self,
        pair: str,
        side: Side,
        units: int,
        order_type: OrderType,
        options: dict[str, Any],
        tick: Tick,
    ) -> Order:
        order = Order(pair, self._new_id(), side, order_type, tick.timestamp, units=units)
        for key, attr in PROPERTIES.items():
            order.set_property(attr, from_wire_value(key, options.get(key)))
        if order_type is OrderType.MARKET:
            order.price = self.pricing.entry_price(tick, pair, side)
        order.initial_price = self._trigger_price(order, tick)
        return order

    def _trigger_price(self, order: Order, tick: Tick) -> float | None:
        return self.pricing.trigger_price(tick, order.pair, order.side, order.trigger_condition)

    def _needs_reference(self, order: Order, tick: Tick) -> bool:
        return (
            order.order_type is OrderType.MARKET_IF_TOUCHED
            and order.initial_price is None
            and order.pair in tick
        )

    def _is_fillable(self, order: Order, tick: Tick) -> bool:
        price = self._trigger_price(order, tick)
        if price is None:
            return False
        return order.is_triggered_by(price)

    def _register_position(self, order: Order, tick: Tick) -> OrderResult:
        position = self.position_builder.build_from_order(order, tick, self.account_currency)
        outcome = self._netting.net(position, tick)
        if outcome.opened:
            order.units = position.units
        return fill_result(outcome)

    def _validate_modify(self, order: Order, options: dict[str, Any]) -> None:
        # None never clears a stored property, so it must not hide one from validation either.
        merged = {**order_to_wire(order), **{k: v for k, v in options.items() if v is not None}}
        self.validator.validate(
            order.pair, order.side, options.get("units") or order.units, order.order_type, merged,
        )


def _insert_default_options(order_type: OrderType | str, options: dict[str, Any]) -> None:
    try:
        is_market = OrderType(order_type) is OrderType.MARKET
    except ValueError:
        is_market = False
    options["timeInForce"] = options.get("timeInForce") or ("FOK" if is_market else "GTC")
    options["positionFill"] = options.get("positionFill") or "DEFAULT"
    if not is_market:
        options["triggerCondition"] = options.get("triggerCondition") or "DEFAULT"
