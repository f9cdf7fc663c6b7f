from __future__ import annotations

import sqlite3
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd

from .models import PriceSeries

def connect(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn

def ensure_table(conn: sqlite3.Connection, table: str = "daily_price") -> None:
    conn.execute(
        f"CREATE TABLE IF NOT EXISTS {table} ("
        "date TEXT NOT NULL, code TEXT NOT NULL, close REAL, "
        "PRIMARY KEY (code, date))"
    )

def list_codes(db_path: str, table: str = "daily_price", min_rows: int = 1) -> List[Tuple[str, int]]:
    """Return [(code, n_rows), ...]"""
    conn = connect(db_path)
    try:
        cur = conn.execute(
            f"SELECT code, COUNT(*) as n FROM {table} GROUP BY code HAVING n >= ? ORDER BY code",
            (int(min_rows),),
        )
        return [(str(r[0]), int(r[1])) for r in cur.fetchall()]
    finally:
        conn.close()

def fetch_closes(
    db_path: str,
    code: str,
    table: str = "daily_price",
    limit: Optional[int] = None,
) -> PriceSeries:
    """Closing prices for a code, oldest first.

    Note:
      - With `limit`, the most recent `limit` rows are kept.
      - Rows with a NULL close are dropped.
    """
    conn = connect(db_path)
    try:
        lim_sql = f" LIMIT {int(limit)}" if limit is not None else ""
        cur = conn.execute(
            f"SELECT date, close FROM {table} WHERE code=? AND close IS NOT NULL ORDER BY date DESC{lim_sql}",
            (code,),
        )
        rows = list(reversed(cur.fetchall()))
    finally:
        conn.close()
    return PriceSeries.from_pairs(((date.fromisoformat(str(r[0])[:10]), float(r[1])) for r in rows), ticker=code)

def import_price_csv(db_path: str, csv_path: str, table: str = "daily_price") -> int:
    """Upsert a `date,code,close` CSV. Returns the number of rows written."""
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"CSV not found: {path}")

    df = pd.read_csv(path, dtype={"code": str})
    missing = {"date", "code", "close"} - set(df.columns)
    if missing:
        raise ValueError(f"CSV missing columns: {sorted(missing)}")

    df["date"] = pd.to_datetime(df["date"], errors="coerce").dt.strftime("%Y-%m-%d")
    df["close"] = pd.to_numeric(df["close"], errors="coerce")
    df["code"] = df["code"].astype(str).str.strip()
    df = df.dropna(subset=["date", "close"])
    df = df[df["code"] != ""]

    rows = [(str(d), str(c), float(x)) for d, c, x in df[["date", "code", "close"]].itertuples(index=False, name=None)]
    conn = connect(db_path)
    try:
        ensure_table(conn, table)
        conn.executemany(f"INSERT OR REPLACE INTO {table}(date, code, close) VALUES (?,?,?)", rows)
        conn.commit()
    finally:
        conn.close()
    return len(rows)
