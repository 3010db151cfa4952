"""Watchlist repository contract and backend selection.

Both backends honour the same contract:

* a missing watchlist is reported as ``None`` from reads and item writes,
  and as ``WatchlistNotFoundError`` from ``delete_watchlist``;
* adding a token/market already present raises ``DuplicateItemError``;
* removing an item that is not in the watchlist raises ``ItemNotFoundError``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import structlog

from archimedes.config.schema import AppConfig
from archimedes.models.watchlist import CreateWatchlistInput, UpdateWatchlistInput, Watchlist

log = structlog.get_logger("watchlist_repository")


class WatchlistRepository(ABC):
    """Persistence boundary for watchlists and their items."""

    @abstractmethod
    async def list_watchlists(self) -> list[Watchlist]:
        ...

    @abstractmethod
    async def get_watchlist_by_id(self, watchlist_id: str) -> Watchlist | None:
        ...

    @abstractmethod
    async def create_watchlist(self, data: CreateWatchlistInput) -> Watchlist:
        ...

    @abstractmethod
    async def update_watchlist(
        self, watchlist_id: str, data: UpdateWatchlistInput
    ) -> Watchlist | None:
        """Apply the non-``None`` fields of *data* and refresh ``updated_at``."""

    @abstractmethod
    async def add_token_to_watchlist(self, watchlist_id: str, token_id: str) -> Watchlist | None:
        ...

    @abstractmethod
    async def add_market_to_watchlist(self, watchlist_id: str, market_id: str) -> Watchlist | None:
        ...

    @abstractmethod
    async def remove_item_from_watchlist(self, watchlist_id: str, item_id: str) -> Watchlist | None:
        ...

    @abstractmethod
    async def delete_watchlist(self, watchlist_id: str) -> None:
        """Delete a watchlist and its items."""

    @abstractmethod
    def reset_store(self) -> None:
        """Restore seed data where the backend supports it."""


def build_repository(config: AppConfig) -> WatchlistRepository:
    """Construct the backend named by ``config.persistence.backend``."""
    backend = config.persistence.backend
    if backend == "database":
        from archimedes.db import Base, get_session_factory, init_engine
        from archimedes.watchlists.sql import SqlWatchlistRepository

        engine = init_engine(config.database.url, pool_pre_ping=True)
        if config.database.auto_create:
            import archimedes.db.tables  # noqa: F401 — register tables on Base.metadata

            Base.metadata.create_all(engine)
            log.info("database_tables_created")
        log.info("watchlist_repository_selected", backend=backend)
        return SqlWatchlistRepository(get_session_factory())

    from archimedes.watchlists.memory import InMemoryWatchlistRepository

    log.info("watchlist_repository_selected", backend=backend)
    return InMemoryWatchlistRepository()
