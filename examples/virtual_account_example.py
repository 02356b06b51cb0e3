"""
Virtual account example: drive the order/position lifecycle by hand.

Shows: market fill, pending limit order, modify with extension merge,
tick-driven fill that nets against an open position, expiry, cancel.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from vtrade_core import NotFoundError, Price, Tick
from vtrade_core.execution import VirtualBrokerAdapter


def tick(ts: datetime, bid: float, ask: float) -> Tick:
    return Tick(timestamp=ts, prices={"USDJPY": Price(bid=bid, ask=ask)})


def main() -> None:
    t0 = datetime(2024, 1, 2, 9, 0)
    broker = VirtualBrokerAdapter(tick(t0, 141.00, 141.01))

    print("--- Market buy 10000 ---")
    result = broker.submit_order("USDJPY", "buy", 10_000, "market")
    print(f"Opened: {result.trade_opened}")

    print("\n--- Limit sell 4000 @ 141.10 (rests pending) ---")
    pending = broker.submit_order("USDJPY", "sell", 4_000, "limit", {"price": 141.10, "client_extensions": {"tag": "tp"}})
    order_id = pending.order_opened.internal_id
    broker.modify_order(order_id, {"clientExtensions": {"comment": "take half profit"}})
    print(f"Pending: {broker.get_order(order_id)}")

    print("\n--- Stop sell with good-till-date (expires) ---")
    stop = broker.submit_order(
        "USDJPY", "sell", 1_000, "stop",
        {"price": 140.00, "time_in_force": "GTD", "gtd_time": t0 + timedelta(seconds=20)},
    )

    print("\n--- Ticks ---")
    for i, (bid, ask) in enumerate([(141.05, 141.06), (141.12, 141.13)], start=1):
        for r in broker.update_tick(tick(t0 + timedelta(seconds=15 * i), bid, ask)):
            print(f"Fill: reduced={r.trade_reduced} closed={list(r.trades_closed)}")
    print(f"Open positions: {broker.get_positions()}")
    print(f"Pending orders: {[o.internal_id for o in broker.list_orders()]}")

    try:
        broker.cancel_order(stop.order_opened.internal_id)
    except NotFoundError as exc:
        print(f"Cancel after expiry: {exc}")


if __name__ == "__main__":
    main()
