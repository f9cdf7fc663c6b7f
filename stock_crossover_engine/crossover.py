from __future__ import annotations

import math
from typing import List

from .models import CrossoverEvent, MovingAverageSeries, Signal

# Averages closer than this (relative to the price level) are a tie.
# Running sums leave ~1e-12 of noise on flat stretches.
TIE_REL_TOL = 1e-9

def _side(a: float, b: float) -> int:
    if math.isclose(a, b, rel_tol=TIE_REL_TOL, abs_tol=TIE_REL_TOL):
        return 0
    return 1 if a > b else -1

def detect_crossovers(a: MovingAverageSeries, b: MovingAverageSeries) -> List[CrossoverEvent]:
    """Dates where `a` crosses `b`, in date order.

    Only dates present in both series are compared. The side of `a - b` is
    tracked across the aligned points; ties keep the last known side, so a
    touch-and-return is not a cross. A move from a tie (or the opposite
    side) to strictly above is BUY, to strictly below is SELL. Values equal
    to within `TIE_REL_TOL` of the price level are ties.
    The event price is the value of `a` on the crossing date.

    Comparing a series with itself never crosses.
    """
    if a is b or len(a) == 0 or len(b) == 0:
        return []

    b_by_date = b.as_dict()
    events: List[CrossoverEvent] = []
    side = None  # None until the first aligned point
    for d, av in a:
        bv = b_by_date.get(d)
        if bv is None:
            continue
        s = _side(av, bv)
        if side is None:
            side = s
            continue
        if s == 0 or s == side:
            continue
        events.append(CrossoverEvent(date=d, price=float(av), signal=Signal.BUY if s > 0 else Signal.SELL))
        side = s
    return events
