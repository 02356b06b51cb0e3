"""
Tests for vtrade_core: Tick, TickLoop, Order, Position, Pricing, DefaultOrderValidator.
"""

from datetime import datetime, timedelta, timezone

import pytest

from vtrade_core import (
    DefaultOrderValidator,
    Order,
    OrderType,
    Position,
    Price,
    Pricing,
    Side,
    Tick,
    TickLoop,
    ValidationError,
)
from vtrade_core.position import ClosedPosition


T0 = datetime(2024, 1, 2, 9, 0)


def _tick(bid: float = 141.00, ask: float = 141.02, ts: datetime = T0) -> Tick:
    return Tick(timestamp=ts, prices={"USDJPY": Price(bid=bid, ask=ask)})


def _order(order_type: OrderType, side: Side, price: float | None, **kwargs) -> Order:
    return Order("USDJPY", "5", side, order_type, T0, units=100, price=price, **kwargs)


# --- Tick ---


def test_tick_creation():
    tick = _tick()
    assert tick.timestamp == T0
    assert tick["USDJPY"].bid == 141.00
    assert tick["USDJPY"].ask == 141.02
    assert "USDJPY" in tick
    assert tick.get("EURUSD") is None
    assert tick.pairs == ["USDJPY"]


def test_tick_parses_iso_timestamp():
    tick = Tick(timestamp="2024-01-02T09:00:00", prices={})
    assert tick.timestamp == T0


def test_tick_immutable():
    tick = _tick()
    with pytest.raises(AttributeError):
        tick.timestamp = datetime(2024, 1, 1)


def test_price_mid():
    assert Price(bid=1.0, ask=3.0).mid == 2.0


# --- TickLoop ---


def test_tick_loop_dispatch_order():
    log = []
    loop = TickLoop()
    loop.subscribe(lambda t: log.append(("a", t)))
    loop.subscribe(lambda t: log.append(("b", t)))
    tick = _tick()
    loop.dispatch(tick)
    assert log == [("a", tick), ("b", tick)]


def test_tick_loop_run():
    log = []
    loop = TickLoop()
    loop.subscribe(lambda t: log.append(t.timestamp))
    assert loop.run([_tick(ts=T0), _tick(ts=T0 + timedelta(seconds=1))]) == 2
    assert log == [T0, T0 + timedelta(seconds=1)]
    assert loop.last_tick.timestamp == T0 + timedelta(seconds=1)


def test_tick_loop_unsubscribe_and_decorator():
    log = []
    loop = TickLoop()

    @loop.subscribe
    def record(tick):
        log.append(tick.timestamp)

    loop.dispatch(_tick())
    loop.unsubscribe(record)
    loop.dispatch(_tick(ts=T0 + timedelta(seconds=1)))
    assert log == [T0]
    assert loop.ticks_seen == 2


def test_tick_loop_logs_out_of_order_tick(caplog):
    loop = TickLoop()
    loop.dispatch(_tick(ts=T0 + timedelta(seconds=1)))
    with caplog.at_level("WARNING", logger="vtrade_core.event_loop"):
        loop.dispatch(_tick(ts=T0))
    assert "arrived after" in caplog.text


# --- Order ---


def test_order_coerces_side_and_type():
    o = Order("USDJPY", "2", "sell", "limit", T0, units=10, price=140.0)
    assert o.side is Side.SELL
    assert o.order_type is OrderType.LIMIT


def test_market_order_always_triggered():
    assert _order(OrderType.MARKET, Side.BUY, 141.0).is_triggered_by(999.0)


def test_limit_order_trigger():
    buy = _order(OrderType.LIMIT, Side.BUY, 140.0)
    assert not buy.is_triggered_by(140.01)
    assert buy.is_triggered_by(140.0)
    sell = _order(OrderType.LIMIT, Side.SELL, 142.0)
    assert not sell.is_triggered_by(141.99)
    assert sell.is_triggered_by(142.5)


def test_stop_order_trigger():
    buy = _order(OrderType.STOP, Side.BUY, 142.0)
    assert not buy.is_triggered_by(141.5)
    assert buy.is_triggered_by(142.0)
    sell = _order(OrderType.STOP, Side.SELL, 140.0)
    assert not sell.is_triggered_by(140.5)
    assert sell.is_triggered_by(139.9)


def test_market_if_touched_trigger_depends_on_initial_price():
    below = _order(OrderType.MARKET_IF_TOUCHED, Side.BUY, 140.5, initial_price=141.0)
    assert not below.is_triggered_by(140.6)
    assert below.is_triggered_by(140.5)
    above = _order(OrderType.MARKET_IF_TOUCHED, Side.BUY, 141.5, initial_price=141.0)
    assert not above.is_triggered_by(141.4)
    assert above.is_triggered_by(141.6)
    assert not _order(OrderType.MARKET_IF_TOUCHED, Side.BUY, 141.5).is_triggered_by(141.5)


def test_order_expiry_compares_mixed_time_zones_in_utc():
    aware = _order(OrderType.LIMIT, Side.BUY, 140.0, gtd_time=datetime(2024, 1, 2, 9, 1, tzinfo=timezone.utc))
    assert not aware.is_expired(T0 + timedelta(minutes=1))
    assert aware.is_expired(T0 + timedelta(minutes=1, seconds=1))
    naive = _order(OrderType.LIMIT, Side.BUY, 140.0, gtd_time=T0)
    tokyo = timezone(timedelta(hours=9))
    assert not naive.is_expired(datetime(2024, 1, 2, 18, 0, tzinfo=tokyo))
    assert naive.is_expired(datetime(2024, 1, 2, 18, 0, 1, tzinfo=tokyo))


def test_order_expiry_is_strict():
    o = _order(OrderType.LIMIT, Side.BUY, 140.0, gtd_time=T0 + timedelta(minutes=1))
    assert not o.is_expired(T0)
    assert not o.is_expired(T0 + timedelta(minutes=1))
    assert o.is_expired(T0 + timedelta(minutes=1, seconds=1))
    assert not _order(OrderType.LIMIT, Side.BUY, 140.0).is_expired(datetime(2100, 1, 1))


def test_order_snapshot_is_independent():
    o = _order(OrderType.LIMIT, Side.BUY, 140.0, client_extensions={"tag": "a"})
    snap = o.snapshot()
    snap.client_extensions["tag"] = "b"
    snap.units = 1
    assert o.client_extensions == {"tag": "a"}
    assert o.units == 100


def test_order_rejects_unknown_property():
    o = _order(OrderType.LIMIT, Side.BUY, 140.0)
    with pytest.raises(AttributeError):
        o.set_property("pair", "EURUSD")


# --- Position ---


def test_position_update_price():
    p = Position("2", "USDJPY", 100, Side.BUY, 141.02, T0)
    p.update_price(141.5, T0 + timedelta(seconds=1))
    assert p.current_price == 141.5
    assert p.updated_at == T0 + timedelta(seconds=1)


def test_closed_position_immutable():
    c = ClosedPosition("2", 100, 141.0, T0)
    assert c.profit is None
    with pytest.raises(AttributeError):
        c.units = 5


# --- Pricing ---


def test_pricing_entry_and_current():
    pricing = Pricing()
    tick = _tick()
    assert pricing.entry_price(tick, "USDJPY", Side.BUY) == 141.02
    assert pricing.entry_price(tick, "USDJPY", Side.SELL) == 141.00
    assert pricing.current_price(tick, "USDJPY", Side.BUY) == 141.00
    assert pricing.current_price(tick, "USDJPY", "sell") == 141.02


def test_pricing_trigger_conditions():
    pricing = Pricing()
    tick = _tick()
    assert pricing.trigger_price(tick, "USDJPY", Side.BUY) == 141.02
    assert pricing.trigger_price(tick, "USDJPY", Side.BUY, "INVERSE") == 141.00
    assert pricing.trigger_price(tick, "USDJPY", Side.SELL, "ASK") == 141.02
    assert pricing.trigger_price(tick, "USDJPY", Side.BUY, "BID") == 141.00
    assert pricing.trigger_price(tick, "USDJPY", Side.BUY, "MID") == pytest.approx(141.01)
    assert pricing.trigger_price(tick, "EURUSD", Side.BUY) is None


# --- DefaultOrderValidator ---


def test_validator_accepts_market_order():
    DefaultOrderValidator().validate("USDJPY", "buy", 100, "market", {"timeInForce": "FOK"})


@pytest.mark.parametrize(
    "pair, side, units, order_type, options",
    [
        ("", "buy", 100, "market", {}),
        ("USDJPY", "long", 100, "market", {}),
        ("USDJPY", "buy", 100, "iceberg", {}),
        ("USDJPY", "buy", 0, "market", {}),
        ("USDJPY", "buy", -10, "market", {}),
        ("USDJPY", "buy", 1.5, "market", {}),
        ("USDJPY", "buy", True, "market", {}),
        ("USDJPY", "buy", 100, "limit", {}),
        ("USDJPY", "buy", 100, "limit", {"price": "abc"}),
        ("USDJPY", "buy", 100, "market", {"timeInForce": "GTC"}),
        ("USDJPY", "buy", 100, "limit", {"price": 140.0, "timeInForce": "GTD"}),
        ("USDJPY", "buy", 100, "limit", {"price": 140.0, "timeInForce": "GTD", "gtdTime": "soon"}),
        ("USDJPY", "buy", 100, "limit", {"price": 140.0, "gtdTime": "soon"}),
        ("USDJPY", "buy", 100, "market", {"price": "n/a"}),
        ("USDJPY", "buy", 100, "market", {"positionFill": "ALWAYS"}),
        ("USDJPY", "buy", 100, "limit", {"price": 140.0, "triggerCondition": "LAST"}),
        ("USDJPY", "buy", 100, "market", {"clientExtensions": "tag"}),
        ("USDJPY", "buy", 100, "market", {"takeProfitOnFill": {"timeInForce": "GTC"}}),
        ("USDJPY", "buy", 100, "market", {"trailingStopLossOnFill": {}}),
        ("USDJPY", "buy", 100, "market", {"priceBound": -1}),
        ("USDJPY", "buy", 100, "market", {"leverage": 25}),
    ],
)
def test_validator_rejects(pair, side, units, order_type, options):
    with pytest.raises(ValidationError):
        DefaultOrderValidator().validate(pair, side, units, order_type, options)


def test_validator_pair_allowlist():
    validator = DefaultOrderValidator(pairs=["EURUSD"])
    validator.validate("EURUSD", "sell", 1, "market", {})
    with pytest.raises(ValidationError, match="not tradable"):
        validator.validate("USDJPY", "sell", 1, "market", {})


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        DefaultOrderValidator().validate("USDJPY", "buy", 0, "market", {})
