"""
Load historical tick data from CSV or DataFrame for backtesting.

Produces a DataFrame with a datetime index and pair, bid, ask columns; rows
sharing a timestamp become one Tick. Quotes given as a single close/price column
are widened by a fixed spread.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pandas as pd

from vtrade_core.events import Price, Tick


TICK_COLUMNS = ("pair", "bid", "ask")


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Ensure columns are lowercase; map common aliases to pair/bid/ask/close."""
    out = df.copy()
    out.columns = [str(c).lower().strip() for c in out.columns]
    renames = {
        "symbol": "pair",
        "instrument": "pair",
        "b": "bid",
        "a": "ask",
        "c": "close",
        "price": "close",
        "mid": "close",
    }
    out = out.rename(columns={k: v for k, v in renames.items() if k in out.columns and v not in out.columns})
    return out


def _quotes(df: pd.DataFrame, pair: str | None, spread: float) -> pd.DataFrame:
    """Fill in pair/bid/ask from what the frame has."""
    if pair is not None:
        df["pair"] = pair
    elif "pair" not in df.columns:
        df["pair"] = df.attrs.get("pair", "UNKNOWN")
    if "bid" not in df.columns or "ask" not in df.columns:
        if "close" not in df.columns:
            raise ValueError("tick data needs bid/ask columns or a close column")
        half = spread / 2
        df["bid"] = df["close"].astype(float) - half
        df["ask"] = df["close"].astype(float) + half
    df["bid"] = df["bid"].astype(float)
    df["ask"] = df["ask"].astype(float)
    return df[list(TICK_COLUMNS)]


def load_csv(
    path: str | Path,
    *,
    date_column: str | None = None,
    datetime_format: str | None = None,
    pair: str | None = None,
    spread: float = 0.0,
) -> pd.DataFrame:
    """
    Load tick data from a CSV file.

    Parameters
    ----------
    path : str or Path
        Path to the CSV file.
    date_column : str, optional
        Column to use as datetime index. If None, 'timestamp', 'date' or the first column is used.
    datetime_format : str, optional
        Format for parsing dates (e.g. '%Y-%m-%d %H:%M:%S').
    pair : str, optional
        Pair for every row (overrides any pair column).
    spread : float
        Bid/ask spread applied when the file only has a close column.

    Returns
    -------
    pd.DataFrame
        DataFrame with DatetimeIndex named 'datetime' and columns pair, bid, ask.
    """
    df = pd.read_csv(path)
    df = _normalize_columns(df)
    date_col = date_column or next((c for c in ("timestamp", "datetime", "date", "time") if c in df.columns), df.columns[0])
    if date_col not in df.columns:
        date_col = df.columns[0]
    df["datetime"] = pd.to_datetime(df[date_col], format=datetime_format)
    if date_col != "datetime":
        df = df.drop(columns=[date_col], errors="ignore")
    df = df.set_index("datetime").sort_index(kind="stable")
    out = _quotes(df, pair, spread)
    out.index.name = "datetime"
    return out


def load_dataframe(
    df: pd.DataFrame,
    *,
    datetime_index: str | None = None,
    pair: str | None = None,
    spread: float = 0.0,
) -> pd.DataFrame:
    """
    Normalize a DataFrame of ticks: DatetimeIndex and pair, bid, ask columns.

    Parameters
    ----------
    df : pd.DataFrame
        Raw DataFrame (columns may be mixed case or aliased).
    datetime_index : str, optional
        Column name to use as index. If None, assume index is already datetime.
    pair : str, optional
        Pair for every row (overrides any pair column).
    spread : float
        Bid/ask spread applied when the frame only has a close column.
    """
    out = _normalize_columns(df.copy())
    out.attrs = dict(df.attrs)
    if datetime_index is not None and datetime_index.lower() in out.columns:
        out["datetime"] = pd.to_datetime(out[datetime_index.lower()])
        if datetime_index.lower() != "datetime":
            out = out.drop(columns=[datetime_index.lower()])
        out = out.set_index("datetime").sort_index(kind="stable")
    elif not isinstance(out.index, pd.DatetimeIndex):
        out.index = pd.to_datetime(out.index)
        out = out.sort_index(kind="stable")
    out = _quotes(out, pair, spread)
    out.index.name = "datetime"
    return out


def iter_ticks(df: pd.DataFrame) -> Iterator[Tick]:
    """Yield one Tick per distinct timestamp, in index order. Later rows win per pair."""
    for ts, rows in df.groupby(level=0, sort=True):
        prices = {
            str(row.pair): Price(bid=float(row.bid), ask=float(row.ask))
            for row in rows.itertuples(index=False)
        }
        yield Tick(timestamp=pd.Timestamp(ts).to_pydatetime(), prices=prices)
