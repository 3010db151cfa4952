"""Watchlists — persistence backends, price cache and enrichment."""

from archimedes.watchlists.cache import PriceCache
from archimedes.watchlists.enrichment import (
    WatchlistEnricher,
    get_mock_price_change_24h,
    get_mock_volume_24h,
)
from archimedes.watchlists.memory import InMemoryWatchlistRepository
from archimedes.watchlists.repository import WatchlistRepository, build_repository
from archimedes.watchlists.sql import SqlWatchlistRepository

__all__ = [
    "InMemoryWatchlistRepository",
    "PriceCache",
    "SqlWatchlistRepository",
    "WatchlistEnricher",
    "WatchlistRepository",
    "build_repository",
    "get_mock_price_change_24h",
    "get_mock_volume_24h",
]
