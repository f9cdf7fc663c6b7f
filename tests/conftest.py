"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Dict, List, Sequence

import pytest

from stock_crossover_engine.config import EngineConfig
from stock_crossover_engine.models import MovingAverageSeries, PriceSeries
from stock_crossover_engine.recent import RecentlyViewedStore


def trading_days(start: date, n: int) -> List[date]:
    """`n` weekdays starting at `start` (inclusive if it is a weekday)."""
    out: List[date] = []
    d = start
    while len(out) < n:
        if d.weekday() < 5:
            out.append(d)
        d += timedelta(days=1)
    return out


@pytest.fixture
def make_series() -> Callable[..., PriceSeries]:
    def _make(closes: Sequence[float], start: date = date(2020, 1, 1), ticker: str = "TEST") -> PriceSeries:
        return PriceSeries.from_pairs(zip(trading_days(start, len(closes)), closes), ticker=ticker)

    return _make


@pytest.fixture
def make_ma() -> Callable[..., MovingAverageSeries]:
    """Moving-average series built directly from values, for crossover tests."""

    def _make(values: Sequence[float], offset: int = 0, window: int = 1) -> MovingAverageSeries:
        dates = trading_days(date(2021, 1, 4), offset + len(values))[offset:]
        return MovingAverageSeries(window=window, dates=tuple(dates), values=tuple(float(v) for v in values))

    return _make


@pytest.fixture
def trend_closes() -> List[float]:
    """250 closes: flat at 100 for 150 days, then +1 per day."""
    return [100.0] * 150 + [100.0 + k for k in range(1, 101)]


@pytest.fixture
def config(tmp_path) -> EngineConfig:
    return EngineConfig(db_path=str(tmp_path / "market_data.db"), recent_capacity=3, recent_dir=str(tmp_path / "stock_info"))


@pytest.fixture
def store(config: EngineConfig) -> RecentlyViewedStore:
    return RecentlyViewedStore(config.recent_dir)


@pytest.fixture
def provider(make_series, trend_closes) -> Callable[[str], PriceSeries]:
    """Ticker -> full history, backed by an in-memory dict."""
    data: Dict[str, PriceSeries] = {
        "^DJI": make_series(trend_closes, ticker="^DJI"),
        "AAPL": make_series(trend_closes, start=date(2018, 1, 1), ticker="AAPL"),
        "MSFT": make_series([50.0] * 40, ticker="MSFT"),
        "LONG": make_series([100.0 + (i % 30) for i in range(600)], ticker="LONG"),
    }

    def _get(ticker: str) -> PriceSeries:
        return data.get(ticker, PriceSeries(ticker=ticker))

    return _get
