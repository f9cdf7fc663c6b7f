"""Moving-average crossover signals for daily closing prices.

Core idea:
- Overlay one or two simple moving averages (20/50/100/200 days) on a
  stock's closing prices for a chosen timeline (1y/2y/5y/all).
- With two averages, every date where the shorter one crosses the longer
  one is a signal: crossing above is BUY, crossing below is SELL.
- The current recommendation is the latest signal, HOLD if there is none.
- Each user keeps a short most-recent-first list of viewed stocks,
  persisted as `name,ticker` lines between sessions.
"""

__all__ = [
    "config",
    "models",
    "indicators",
    "crossover",
    "recommender",
    "recent",
    "db",
    "session",
]
