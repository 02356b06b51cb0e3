"""
Tests for PositionNetting and result assembly.
"""

from datetime import datetime

from vtrade_core import Order, OrderType, Position, Price, Side, Tick
from vtrade_core.execution import NettingOutcome, PositionNetting
from vtrade_core.execution.results import fill_result, pending_result
from vtrade_core.position import ReducedPosition


T0 = datetime(2024, 1, 2, 9, 0)
TICK = Tick(timestamp=T0, prices={"USDJPY": Price(bid=141.00, ask=141.02)})


def _position(internal_id: str, side: Side, units: int) -> Position:
    return Position(internal_id, "USDJPY", units, side, 141.0, T0)


def _netting(*positions: Position) -> PositionNetting:
    return PositionNetting(positions=positions)


def test_no_reverse_positions_opens():
    netting = _netting(_position("2", Side.BUY, 100))
    incoming = _position("3", Side.BUY, 50)
    outcome = netting.net(incoming, TICK)
    assert outcome.opened
    assert outcome.closed == []
    assert outcome.reduced is None
    assert [p.internal_id for p in netting.positions] == ["2", "3"]


def test_reverse_positions_consumed_in_storage_order():
    netting = _netting(
        _position("5", Side.SELL, 300),
        _position("2", Side.SELL, 100),
        _position("9", Side.SELL, 200),
    )
    outcome = netting.net(_position("10", Side.BUY, 400), TICK)
    assert [c.internal_id for c in outcome.closed] == ["5", "2"]
    assert outcome.reduced is None
    assert not outcome.opened
    assert [(p.internal_id, p.units) for p in netting.positions] == [("9", 200)]


def test_walk_stops_after_single_reduce():
    netting = _netting(
        _position("2", Side.SELL, 300),
        _position("3", Side.SELL, 500),
        _position("4", Side.SELL, 200),
    )
    incoming = _position("5", Side.BUY, 400)
    outcome = netting.net(incoming, TICK)
    assert [c.internal_id for c in outcome.closed] == ["2"]
    assert outcome.reduced == ReducedPosition("3", 100, 141.02, T0)
    assert incoming.units == 0
    assert [(p.internal_id, p.units) for p in netting.positions] == [("3", 400), ("4", 200)]


def test_same_side_positions_are_not_touched():
    netting = _netting(_position("2", Side.BUY, 100), _position("3", Side.SELL, 50))
    outcome = netting.net(_position("4", Side.SELL, 80), TICK)
    assert outcome.reduced == ReducedPosition("2", 80, 141.00, T0)
    assert [(p.internal_id, p.units) for p in netting.positions] == [("2", 20), ("3", 50)]


def test_other_pairs_are_not_netted():
    other = Position("2", "EURUSD", 100, Side.SELL, 1.1, T0)
    netting = _netting(other)
    outcome = netting.net(_position("3", Side.BUY, 100), TICK)
    assert outcome.opened
    assert len(netting.positions) == 2


def test_stored_positions_always_have_units():
    netting = _netting(_position("2", Side.SELL, 100), _position("3", Side.SELL, 100))
    netting.net(_position("4", Side.BUY, 150), TICK)
    netting.net(_position("5", Side.BUY, 50), TICK)
    assert netting.positions == []


# --- result assembly ---


def test_pending_result_snapshots_order():
    order = Order("USDJPY", "2", Side.BUY, OrderType.LIMIT, T0, units=10, price=140.0)
    result = pending_result(order)
    order.units = 99
    assert result.is_pending
    assert result.order_opened.units == 10


def test_fill_result_opened():
    position = _position("2", Side.BUY, 10)
    result = fill_result(NettingOutcome(position=position))
    position.units = 1
    assert result.is_opened
    assert result.trade_opened.units == 10
    assert result.trade_reduced is None
    assert result.trades_closed == ()


def test_fill_result_absorbed():
    reduced = ReducedPosition("3", 10, 141.0, T0)
    result = fill_result(NettingOutcome(position=_position("2", Side.BUY, 0), reduced=reduced))
    assert result.is_absorbed
    assert result.trade_opened is None
    assert result.trade_reduced == reduced
