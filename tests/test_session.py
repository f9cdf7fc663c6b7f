"""Tests for the per-user session context."""

from __future__ import annotations

import pytest

from stock_crossover_engine.config import EngineConfig
from stock_crossover_engine.models import MovingAverageWindow, Recommendation, StockRef, Timeline
from stock_crossover_engine.recent import PersistenceError, RecentlyViewedStore
from stock_crossover_engine.session import Session

USER = "jane@example.com"
D20 = MovingAverageWindow.DAYS_20
D50 = MovingAverageWindow.DAYS_50
D200 = MovingAverageWindow.DAYS_200


@pytest.fixture
def session(provider, config, store) -> Session:
    return Session(USER, provider, config=config, store=store)


class TestStartup:
    def test_defaults(self, session):
        assert session.stock.ticker == "^DJI"
        assert session.stock.name == "DOW Jones 30"
        assert session.timeline is Timeline.ALL
        assert session.selection.windows() == []
        assert session.recent.is_empty()
        assert session.load_error is None

    def test_loads_persisted_recent(self, provider, config, store):
        store.path_for(USER).parent.mkdir(parents=True)
        store.path_for(USER).write_text("Apple,AAPL\nMicrosoft,MSFT\n", encoding="utf-8")
        s = Session(USER, provider, config=config, store=store)
        assert [e.ticker for e in s.recent] == ["AAPL", "MSFT"]

    def test_load_failure_is_reported_not_raised(self, provider, config, store):
        store.path_for(USER).mkdir(parents=True)
        s = Session(USER, provider, config=config, store=store)
        assert isinstance(s.load_error, PersistenceError)
        assert s.recent.is_empty()
        s.select_stock(StockRef("Apple", "AAPL"))
        assert len(s.recent) == 1

    def test_negative_capacity_is_rejected(self):
        with pytest.raises(ValueError):
            EngineConfig(recent_capacity=-1)


class TestSelection:
    def test_select_stock_records_and_resets(self, session):
        session.select_average(1, D20)
        assert session.select_stock(StockRef("Apple", "AAPL")) is True
        assert session.stock.ticker == "AAPL"
        assert session.timeline is Timeline.ONE_YEAR
        assert session.selection.windows() == []
        assert [e.ticker for e in session.recent] == ["AAPL"]

    def test_reselecting_current_stock_is_a_noop(self, session):
        session.select_stock(StockRef("Apple", "AAPL"))
        session.select_stock(StockRef("Microsoft", "MSFT"))
        session.select_timeline(Timeline.FIVE_YEARS)
        assert session.select_stock(StockRef("Microsoft", "MSFT")) is False
        assert session.timeline is Timeline.FIVE_YEARS
        assert [e.ticker for e in session.recent] == ["MSFT", "AAPL"]

    def test_slots_never_hold_the_same_window(self, session):
        session.select_average(1, D20)
        session.select_average(2, D50)
        assert session.selection.pair() == (D20, D50)
        session.select_average(2, D20)
        assert session.selection.first is None
        assert session.selection.second is D20
        assert session.selection.pair() == (D20, D20)

    def test_bad_slot_raises(self, session):
        with pytest.raises(ValueError):
            session.select_average(3, D20)

    def test_clear_averages(self, session):
        session.select_average(1, D200)
        session.clear_averages()
        assert session.selection.pair() is None


class TestAnalyze:
    def test_default_stock_two_averages(self, session):
        session.select_average(1, D20)
        session.select_average(2, D50)
        out = session.analyze()
        assert out.series.ticker == "^DJI"
        assert len(out.series) == 250
        assert out.recommendation is Recommendation.BUY

    def test_timeline_limits_the_series(self, session):
        session.select_stock(StockRef("Long History", "LONG"))
        assert session.timeline is Timeline.ONE_YEAR
        out = session.analyze()
        assert 0 < len(out.series) < 600
        first, last = out.series[0].date, out.series[-1].date
        assert (last - first).days <= 366
        session.select_timeline(Timeline.ALL)
        assert len(session.analyze().series) == 600

    def test_single_average_is_hold(self, session):
        session.select_average(1, D50)
        out = session.analyze()
        assert out.events == []
        assert out.recommendation is Recommendation.HOLD

    def test_unknown_ticker_is_hold(self, session):
        session.select_stock(StockRef("Nothing", "NONE"))
        session.select_average(1, D20)
        session.select_average(2, D50)
        out = session.analyze()
        assert len(out.series) == 0
        assert out.recommendation is Recommendation.HOLD


class TestLogout:
    def test_writes_recent(self, session, store):
        session.select_stock(StockRef("Apple", "AAPL"))
        session.select_stock(StockRef("Microsoft", "MSFT"))
        assert session.logout() is True
        assert store.path_for(USER).read_text(encoding="utf-8") == "Microsoft,MSFT\nApple,AAPL\n"

    def test_empty_recent_writes_nothing(self, session, store):
        assert session.logout() is False
        assert not store.path_for(USER).exists()

    def test_save_failure_propagates_and_keeps_state(self, provider, config, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        s = Session(USER, provider, config=config, store=RecentlyViewedStore(str(blocker)))
        s.select_stock(StockRef("Apple", "AAPL"))
        with pytest.raises(PersistenceError):
            s.logout()
        assert [e.ticker for e in s.recent] == ["AAPL"]
