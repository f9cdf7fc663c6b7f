from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .models import MovingAverageSeries, PriceSeries

def rolling_sma(values: Sequence[float], period: int) -> np.ndarray:
    """Simple moving average aligned to each index (NaN until enough bars).

    Running sums: each window is cumsum[i] - cumsum[i - period], so the whole
    curve costs one pass regardless of period.
    """
    arr = np.asarray(values, dtype=float)
    n = len(arr)
    out = np.full(n, np.nan)
    if n < period or period <= 0:
        return out
    cumsum = np.cumsum(arr)
    out[period - 1 :] = (cumsum[period - 1 :] - np.concatenate(([0.0], cumsum[: -period]))) / period
    return out

def compute_moving_average(series: PriceSeries, window: int) -> MovingAverageSeries:
    """Moving average of closing prices, one point per full window.

    Returns `len(series) - window + 1` points, or an empty series when the
    history is shorter than the window.
    """
    window = int(window)
    if window < 1:
        raise ValueError(f"moving-average window must be >= 1, got {window}")
    n = len(series)
    if n < window:
        logging.info("not enough data for SMA%d on %s: n=%d", window, series.ticker or "series", n)
        return MovingAverageSeries(window=window)

    sma = rolling_sma(series.closes, window)
    dates = tuple(series.dates[window - 1 :])
    values = tuple(float(v) for v in sma[window - 1 :])
    return MovingAverageSeries(window=window, dates=dates, values=values)
