"""Watchlists the in-memory store starts with (and resets to)."""

from __future__ import annotations

from datetime import datetime, timezone

from archimedes.models.watchlist import MarketItem, TokenItem, Watchlist


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


WATCHLIST_SEED: tuple[Watchlist, ...] = (
    Watchlist(
        id="wl-favorites",
        name="My Favorites",
        description="My favorite cryptocurrencies and markets",
        items=[
            TokenItem(id="wli-1", token_id="btc", created_at=_ts("2025-01-10T10:00:00")),
            MarketItem(id="wli-2", market_id="btc-usdt", created_at=_ts("2025-01-10T10:05:00")),
            TokenItem(id="wli-3", token_id="eth", created_at=_ts("2025-01-10T10:10:00")),
        ],
        created_at=_ts("2025-01-10T09:00:00"),
        updated_at=_ts("2025-01-10T10:10:00"),
    ),
    Watchlist(
        id="wl-trending",
        name="Trending Markets",
        description="Currently trending cryptocurrency markets",
        items=[
            MarketItem(id="wli-4", market_id="eth-usdt", created_at=_ts("2025-01-11T09:00:00")),
            TokenItem(id="wli-5", token_id="usdt", created_at=_ts("2025-01-11T09:30:00")),
        ],
        created_at=_ts("2025-01-11T08:00:00"),
        updated_at=_ts("2025-01-11T09:30:00"),
    ),
)
