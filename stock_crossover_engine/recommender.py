from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .crossover import detect_crossovers
from .indicators import compute_moving_average
from .models import (
    CrossoverEvent,
    MovingAverageSelection,
    MovingAverageSeries,
    MovingAverageWindow,
    PriceSeries,
    Recommendation,
    Signal,
)

def recommend(events: Sequence[CrossoverEvent]) -> Recommendation:
    """Signal of the latest crossover; HOLD when there is none."""
    if not events:
        return Recommendation.HOLD
    return Recommendation.from_signal(events[-1].signal)

@dataclass
class ChartAnalysis:
    series: PriceSeries
    selection: MovingAverageSelection
    averages: Dict[MovingAverageWindow, MovingAverageSeries] = field(default_factory=dict)
    events: List[CrossoverEvent] = field(default_factory=list)
    recommendation: Recommendation = Recommendation.HOLD

    def buy_events(self) -> List[CrossoverEvent]:
        return [e for e in self.events if e.signal is Signal.BUY]

    def sell_events(self) -> List[CrossoverEvent]:
        return [e for e in self.events if e.signal is Signal.SELL]

    def to_dict(self) -> Dict[str, Any]:
        last = self.series[-1] if len(self.series) else None
        return {
            "ticker": self.series.ticker,
            "n": len(self.series),
            "first_date": self.series[0].date.isoformat() if last else None,
            "last_date": last.date.isoformat() if last else None,
            "last_close": last.close if last else None,
            "moving_averages": {
                w.label: {
                    "points": len(ma),
                    "last": round(ma.values[-1], 4) if len(ma) else None,
                }
                for w, ma in self.averages.items()
            },
            "crossovers": [
                {"date": e.date.isoformat(), "price": round(e.price, 4), "signal": e.signal.value}
                for e in self.events
            ],
            "recommendation": self.recommendation.label,
        }

def analyze_series(series: PriceSeries, selection: MovingAverageSelection) -> ChartAnalysis:
    """Averages, crossovers and the current recommendation for one chart.

    Two selected windows are compared shorter-vs-longer; a single window is
    compared with itself, which yields no crossovers.
    """
    out = ChartAnalysis(series=series, selection=selection)
    for w in selection.windows():
        out.averages[w] = compute_moving_average(series, w.days)

    pair = selection.pair()
    if pair is not None:
        short, long_ = pair
        out.events = detect_crossovers(out.averages[short], out.averages[long_])
    out.recommendation = recommend(out.events)
    return out
