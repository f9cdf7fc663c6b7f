from __future__ import annotations

import logging
from typing import Callable, Optional

from .config import EngineConfig
from .models import MovingAverageSelection, MovingAverageWindow, PriceSeries, StockRef, Timeline
from .recent import PersistenceError, RecentlyViewedCache, RecentlyViewedStore
from .recommender import ChartAnalysis, analyze_series

PriceProvider = Callable[[str], PriceSeries]


class Session:
    """What one logged-in user is looking at, plus their recently viewed stocks.

    `provider` maps a ticker to its full closing-price history.
    """

    def __init__(
        self,
        user: str,
        provider: PriceProvider,
        config: Optional[EngineConfig] = None,
        store: Optional[RecentlyViewedStore] = None,
    ):
        self.user = user
        self.provider = provider
        self.config = config or EngineConfig()
        self.store = store or RecentlyViewedStore(self.config.recent_dir)

        self.stock = StockRef(self.config.default_stock_name, self.config.default_stock_ticker)
        self.timeline = Timeline.parse(self.config.default_timeline)
        self.selection = MovingAverageSelection()

        self.load_error: Optional[PersistenceError] = None
        try:
            self.recent = self.store.load(user, self.config.recent_capacity)
        except PersistenceError as e:
            logging.warning("recently viewed: load failed for %s: %s", user, e)
            self.load_error = e
            self.recent = RecentlyViewedCache(self.config.recent_capacity)

    def select_stock(self, stock: StockRef) -> bool:
        """Switch to `stock`. Returns False if it is already shown."""
        if stock.ticker == self.stock.ticker:
            return False
        self.stock = stock
        self.recent.record_access(stock)
        self.timeline = Timeline.ONE_YEAR
        self.selection = MovingAverageSelection()
        return True

    def select_timeline(self, timeline: Timeline) -> None:
        self.timeline = timeline

    def select_average(self, slot: int, window: Optional[MovingAverageWindow]) -> MovingAverageSelection:
        self.selection = self.selection.with_slot(slot, window)
        return self.selection

    def clear_averages(self) -> None:
        self.selection = MovingAverageSelection()

    def prices(self) -> PriceSeries:
        return self.provider(self.stock.ticker).window(self.timeline)

    def analyze(self) -> ChartAnalysis:
        return analyze_series(self.prices(), self.selection)

    def logout(self) -> bool:
        """Persist recently viewed stocks. Returns True if a file was written."""
        try:
            return self.store.save(self.user, self.recent)
        except PersistenceError as e:
            logging.warning("recently viewed: save failed for %s: %s", self.user, e)
            raise
