from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple


class Signal(enum.Enum):
    BUY = "buy"
    SELL = "sell"


class Recommendation(enum.Enum):
    HOLD = "hold"
    BUY = "buy"
    SELL = "sell"

    @property
    def label(self) -> str:
        return self.name

    @classmethod
    def from_signal(cls, signal: Signal) -> "Recommendation":
        return cls.BUY if signal is Signal.BUY else cls.SELL


class MovingAverageWindow(enum.Enum):
    """Selectable moving-average lengths, in trading samples."""

    DAYS_20 = 20
    DAYS_50 = 50
    DAYS_100 = 100
    DAYS_200 = 200

    @property
    def days(self) -> int:
        return int(self.value)

    @property
    def label(self) -> str:
        return f"{self.value} Days"

    @classmethod
    def from_days(cls, days: int) -> "MovingAverageWindow":
        try:
            return cls(int(days))
        except ValueError:
            allowed = ", ".join(str(w.value) for w in cls)
            raise ValueError(f"unsupported moving-average window {days!r} (allowed: {allowed})") from None

    @classmethod
    def from_label(cls, label: str) -> "MovingAverageWindow":
        text = str(label).strip().lower()
        for w in cls:
            if text in (w.label.lower(), str(w.value)):
                return w
        raise ValueError(f"unknown moving-average label {label!r}")


class Timeline(enum.Enum):
    ONE_YEAR = "1y"
    TWO_YEARS = "2y"
    FIVE_YEARS = "5y"
    ALL = "all"

    @property
    def years(self) -> Optional[int]:
        return {"1y": 1, "2y": 2, "5y": 5}.get(self.value)

    @property
    def label(self) -> str:
        names = {"1y": "One Year", "2y": "Two Years", "5y": "Five Years", "all": "All Time"}
        return f"Closing Prices: {names[self.value]}"

    @classmethod
    def parse(cls, text: str) -> "Timeline":
        key = str(text).strip().lower()
        for t in cls:
            if key in (t.value, t.name.lower()):
                return t
        raise ValueError(f"unknown timeline {text!r} (allowed: 1y, 2y, 5y, all)")

    def cutoff(self, latest: date) -> Optional[date]:
        """First date included when looking back from `latest` (None = no limit)."""
        if self.years is None:
            return None
        year = latest.year - self.years
        try:
            return latest.replace(year=year)
        except ValueError:
            # Feb 29 -> Feb 28
            return latest.replace(year=year, day=28)


@dataclass(frozen=True)
class PriceSample:
    date: date
    close: float


@dataclass(frozen=True)
class PriceSeries:
    """Closing prices for one stock, strictly increasing by date."""

    samples: Tuple[PriceSample, ...] = ()
    ticker: str = ""

    def __post_init__(self) -> None:
        samples = tuple(self.samples)
        for prev, cur in zip(samples, samples[1:]):
            if cur.date <= prev.date:
                raise ValueError(f"price dates must be strictly increasing: {prev.date} then {cur.date}")
        object.__setattr__(self, "samples", samples)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[date, float]], ticker: str = "") -> "PriceSeries":
        return cls(tuple(PriceSample(d, float(c)) for d, c in pairs), ticker=ticker)

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[PriceSample]:
        return iter(self.samples)

    def __getitem__(self, i: int) -> PriceSample:
        return self.samples[i]

    @property
    def dates(self) -> List[date]:
        return [s.date for s in self.samples]

    @property
    def closes(self) -> List[float]:
        return [s.close for s in self.samples]

    def window(self, timeline: Timeline) -> "PriceSeries":
        if not self.samples:
            return self
        start = timeline.cutoff(self.samples[-1].date)
        if start is None:
            return self
        return PriceSeries(tuple(s for s in self.samples if s.date >= start), ticker=self.ticker)


@dataclass(frozen=True)
class MovingAverageSeries:
    """(date, average) points; dates are a suffix of the source series' dates."""

    window: int
    dates: Tuple[date, ...] = ()
    values: Tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if len(self.dates) != len(self.values):
            raise ValueError("dates and values must have the same length")
        for prev, cur in zip(self.dates, self.dates[1:]):
            if cur <= prev:
                raise ValueError(f"average dates must be strictly increasing: {prev} then {cur}")

    def __len__(self) -> int:
        return len(self.dates)

    def __iter__(self) -> Iterator[Tuple[date, float]]:
        return iter(zip(self.dates, self.values))

    def as_dict(self) -> Dict[date, float]:
        return dict(zip(self.dates, self.values))


@dataclass(frozen=True)
class CrossoverEvent:
    date: date
    price: float
    signal: Signal


@dataclass(frozen=True)
class MovingAverageSelection:
    """The two moving-average slots; either may be empty."""

    first: Optional[MovingAverageWindow] = None
    second: Optional[MovingAverageWindow] = None

    def windows(self) -> List[MovingAverageWindow]:
        out: List[MovingAverageWindow] = []
        for w in (self.first, self.second):
            if w is not None and w not in out:
                out.append(w)
        return out

    def pair(self) -> Optional[Tuple[MovingAverageWindow, MovingAverageWindow]]:
        """(shorter, longer); a single selection is paired with itself."""
        ws = self.windows()
        if not ws:
            return None
        if len(ws) == 1:
            return ws[0], ws[0]
        a, b = sorted(ws, key=lambda w: w.days)
        return a, b

    def with_slot(self, slot: int, window: Optional[MovingAverageWindow]) -> "MovingAverageSelection":
        if slot not in (1, 2):
            raise ValueError(f"slot must be 1 or 2, got {slot!r}")
        first, second = self.first, self.second
        if slot == 1:
            first = window
            if window is not None and second == window:
                second = None
        else:
            second = window
            if window is not None and first == window:
                first = None
        return MovingAverageSelection(first, second)

    @classmethod
    def of(cls, windows: Sequence[MovingAverageWindow]) -> "MovingAverageSelection":
        if len(windows) > 2:
            raise ValueError("at most two moving averages can be selected")
        ws = list(windows) + [None, None]
        return cls(ws[0], ws[1])


@dataclass(frozen=True, eq=False)
class StockRef:
    """A stock as shown to the user; identity is the ticker."""

    name: str
    ticker: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StockRef):
            return NotImplemented
        return self.ticker == other.ticker

    def __hash__(self) -> int:
        return hash(self.ticker)
