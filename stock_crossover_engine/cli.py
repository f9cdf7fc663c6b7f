from __future__ import annotations

import argparse
import json
import logging
import sqlite3
from typing import Any, List, Optional

from .config import EngineConfig
from .db import fetch_closes, import_price_csv, list_codes
from .models import MovingAverageSelection, MovingAverageWindow, StockRef, Timeline
from .recent import PersistenceError, RecentlyViewedStore
from .recommender import analyze_series

def _p(obj: Any) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2, default=str))

def _config(args: argparse.Namespace) -> EngineConfig:
    return EngineConfig(db_path=args.db, table=args.table)

def cmd_analyze(args: argparse.Namespace) -> None:
    cfg = _config(args)
    try:
        timeline = Timeline.parse(args.timeline)
        selection = MovingAverageSelection.of([MovingAverageWindow.from_days(d) for d in args.ma or []])
    except ValueError as e:
        _p({"ok": False, "code": args.code, "error": str(e)})
        return

    try:
        series = fetch_closes(cfg.db_path, args.code, table=cfg.table).window(timeline)
    except sqlite3.OperationalError as e:
        _p({"ok": False, "code": args.code, "error": f"db_error: {e}"})
        return
    if not len(series):
        _p({"ok": False, "code": args.code, "error": "no_data"})
        return

    out = analyze_series(series, selection)
    _p({"ok": True, "code": args.code, "timeline": timeline.label, **out.to_dict()})

def cmd_codes(args: argparse.Namespace) -> None:
    cfg = _config(args)
    try:
        rows = list_codes(cfg.db_path, table=cfg.table, min_rows=args.min_rows)
    except sqlite3.OperationalError as e:
        _p({"ok": False, "error": f"db_error: {e}"})
        return
    _p({"ok": True, "n_codes": len(rows), "codes": [{"code": c, "rows": n} for c, n in rows]})

def cmd_import_csv(args: argparse.Namespace) -> None:
    cfg = _config(args)
    try:
        n = import_price_csv(cfg.db_path, args.csv, table=cfg.table)
    except (FileNotFoundError, ValueError) as e:
        _p({"ok": False, "error": str(e)})
        return
    logging.info("imported %d rows from %s", n, args.csv)
    _p({"ok": True, "rows": n})

def _recent_payload(user: str, cache) -> dict:
    return {
        "ok": True,
        "user": user,
        "capacity": cache.capacity,
        "stocks": [{"name": s.name, "ticker": s.ticker} for s in cache],
    }

def cmd_recent_show(args: argparse.Namespace) -> None:
    cfg = EngineConfig()
    store = RecentlyViewedStore(args.dir or cfg.recent_dir)
    try:
        cache = store.load(args.user, cfg.recent_capacity)
    except PersistenceError as e:
        _p({"ok": False, "user": args.user, "error": str(e)})
        return
    _p(_recent_payload(args.user, cache))

def cmd_recent_record(args: argparse.Namespace) -> None:
    cfg = EngineConfig()
    store = RecentlyViewedStore(args.dir or cfg.recent_dir)
    try:
        cache = store.load(args.user, cfg.recent_capacity)
        cache.record_access(StockRef(args.name, args.ticker))
        store.save(args.user, cache)
    except PersistenceError as e:
        _p({"ok": False, "user": args.user, "error": str(e)})
        return
    _p(_recent_payload(args.user, cache))

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="stock-crossover", description="Moving-average crossover signals for daily closing prices.")
    p.add_argument("--db", default="market_data.db", help="SQLite DB path (default: market_data.db)")
    p.add_argument("--table", default="daily_price", help="Price table (default: daily_price)")

    sub = p.add_subparsers(dest="cmd", required=True)

    p_an = sub.add_parser("analyze", help="Moving averages, crossovers and recommendation for one code")
    p_an.add_argument("--code", required=True)
    p_an.add_argument("--timeline", default="1y", help="1y | 2y | 5y | all (default: 1y)")
    p_an.add_argument("--ma", type=int, action="append", help="Moving-average window (20/50/100/200), up to twice")
    p_an.set_defaults(func=cmd_analyze)

    p_codes = sub.add_parser("codes", help="List codes in the price table")
    p_codes.add_argument("--min-rows", type=int, default=1)
    p_codes.set_defaults(func=cmd_codes)

    p_imp = sub.add_parser("import-csv", help="Upsert a date,code,close CSV into the price table")
    p_imp.add_argument("--csv", required=True)
    p_imp.set_defaults(func=cmd_import_csv)

    p_rec = sub.add_parser("recent", help="Recently viewed stocks for a user")
    p_rec.add_argument("--dir", default=None, help="Directory of <user>.txt files (default: config)")
    rsub = p_rec.add_subparsers(dest="recent_cmd", required=True)

    p_show = rsub.add_parser("show")
    p_show.add_argument("--user", required=True)
    p_show.set_defaults(func=cmd_recent_show)

    p_add = rsub.add_parser("record")
    p_add.add_argument("--user", required=True)
    p_add.add_argument("--name", required=True)
    p_add.add_argument("--ticker", required=True)
    p_add.set_defaults(func=cmd_recent_record)

    return p

def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    p = build_parser()
    args = p.parse_args(argv)
    args.func(args)

if __name__ == "__main__":
    main()
