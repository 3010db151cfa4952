"""In-memory TTL cache for market prices used during enrichment."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class PriceEntry:
    """A cached price and the clock reading it was fetched at."""

    price: float
    fetched_at: float


class PriceCache:
    """Thread-unsafe dict + injectable clock TTL cache keyed by market id.

    An entry is live while its age is at most ``ttl_seconds``; stale
    entries are dropped lazily on the next read.
    """

    def __init__(
        self,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._store: dict[str, PriceEntry] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._store)

    def get(self, market_id: str) -> float | None:
        """Return the cached price or ``None`` if missing / expired."""
        entry = self._store.get(market_id)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at > self._ttl:
            del self._store[market_id]
            return None
        return entry.price

    def set(self, market_id: str, price: float) -> None:
        """Store *price* under *market_id*, stamped with the current clock."""
        self._store[market_id] = PriceEntry(price=price, fetched_at=self._clock())

    def get_or_load(
        self,
        market_id: str,
        loader: Callable[[str], float | None],
    ) -> float | None:
        """Return a live cached price, else call *loader* and cache its result.

        A ``None`` from the loader is returned as-is and not cached.
        """
        cached = self.get(market_id)
        if cached is not None:
            return cached
        price = loader(market_id)
        if price is not None:
            self.set(market_id, price)
        return price

    def invalidate(self, market_id: str) -> None:
        """Remove a single entry (no-op if absent)."""
        self._store.pop(market_id, None)

    def clear(self) -> None:
        """Drop all entries."""
        self._store.clear()
