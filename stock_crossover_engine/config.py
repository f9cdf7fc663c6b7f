from __future__ import annotations

import os
from dataclasses import dataclass

def _env_int(key: str, default: int) -> int:
    v = os.getenv(key)
    if v is None or v == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default

def _env_str(key: str, default: str) -> str:
    v = os.getenv(key)
    return v if v not in (None, "") else default

@dataclass(frozen=True)
class EngineConfig:
    # Data
    db_path: str = _env_str("STOCK_DB_PATH", "market_data.db")
    table: str = _env_str("STOCK_DB_TABLE", "daily_price")

    # Recently viewed stocks (one "<user>.txt" per user under recent_dir)
    recent_capacity: int = _env_int("RECENT_CAPACITY", 5)
    recent_dir: str = _env_str("RECENT_DIR", "data/stock_info")

    # What a fresh session shows before the user picks anything
    default_stock_name: str = _env_str("DEFAULT_STOCK_NAME", "DOW Jones 30")
    default_stock_ticker: str = _env_str("DEFAULT_STOCK_TICKER", "^DJI")
    default_timeline: str = _env_str("DEFAULT_TIMELINE", "all")  # 1y | 2y | 5y | all

    def __post_init__(self) -> None:
        if self.recent_capacity < 0:
            raise ValueError(f"recent_capacity must be >= 0, got {self.recent_capacity}")
