from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .models import StockRef


class PersistenceError(OSError):
    """The recently-viewed file could not be read or written."""


class RecentlyViewedCache:
    """Most-recent-first list of stocks, at most `capacity` long, unique by ticker."""

    def __init__(self, capacity: int, entries: Optional[Iterable[StockRef]] = None):
        if int(capacity) < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.capacity = int(capacity)
        self._entries: List[StockRef] = []
        for e in entries or ():
            # keep first occurrence; input is already front-to-back
            if e not in self._entries and len(self._entries) < self.capacity:
                self._entries.append(e)

    def record_access(self, entry: StockRef) -> None:
        self._entries = [e for e in self._entries if e.ticker != entry.ticker]
        self._entries.insert(0, entry)
        del self._entries[self.capacity :]

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[StockRef]:
        return iter(list(self._entries))

    def __contains__(self, entry: object) -> bool:
        return entry in self._entries

    def __repr__(self) -> str:
        tickers = ", ".join(e.ticker for e in self._entries)
        return f"RecentlyViewedCache(capacity={self.capacity}, [{tickers}])"

    def serialize(self) -> str:
        return "".join(f"{e.name},{e.ticker}\n" for e in self)

    @classmethod
    def deserialize(cls, text: str, capacity: int) -> "RecentlyViewedCache":
        entries: List[StockRef] = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            name, sep, ticker = line.partition(",")
            if not sep:
                logging.warning("recently viewed: skip malformed line %d: %r", lineno, line)
                continue
            entries.append(StockRef(name=name, ticker=ticker))
        return cls(capacity, entries)


_UNSAFE = re.compile(r"[^A-Za-z0-9@._+-]")


class RecentlyViewedStore:
    """One `<user>.txt` file per user under `root`."""

    def __init__(self, root: str = "data/stock_info"):
        self.root = Path(root)

    def path_for(self, user: str) -> Path:
        name = _UNSAFE.sub("_", str(user).strip())
        if not name or name.strip(".") == "":
            raise ValueError(f"invalid user id {user!r}")
        return self.root / f"{name}.txt"

    def load(self, user: str, capacity: int) -> RecentlyViewedCache:
        path = self.path_for(user)
        if not path.exists():
            return RecentlyViewedCache(capacity)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"cannot read {path}: {e}") from e
        return RecentlyViewedCache.deserialize(text, capacity)

    def save(self, user: str, cache: RecentlyViewedCache) -> bool:
        """Write the cache; an empty cache leaves any existing file untouched.

        Returns True when a file was written.
        """
        path = self.path_for(user)
        if cache.is_empty():
            logging.info("recently viewed: nothing to save for %s", user)
            return False
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8", newline="\n") as f:
                f.write(cache.serialize())
        except OSError as e:
            raise PersistenceError(f"cannot write {path}: {e}") from e
        return True
