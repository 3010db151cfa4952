"""In-memory watchlist repository.

Holds an ordered list of ``Watchlist`` records. Writes never mutate a stored
record: the record is replaced by an updated copy. Callers always receive
deep copies, so mutating a returned watchlist never reaches the store. There
is no locking, so concurrent writers to the same watchlist can lose updates.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from datetime import datetime

from archimedes.errors import DuplicateItemError, ItemNotFoundError, WatchlistNotFoundError
from archimedes.models.base import utc_now
from archimedes.models.watchlist import (
    CreateWatchlistInput,
    MarketItem,
    TokenItem,
    UpdateWatchlistInput,
    Watchlist,
    WatchlistItem,
)
from archimedes.watchlists.repository import WatchlistRepository
from archimedes.watchlists.seed import WATCHLIST_SEED


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _detached(watchlist: Watchlist) -> Watchlist:
    return watchlist.model_copy(deep=True)


class InMemoryWatchlistRepository(WatchlistRepository):
    def __init__(self, seed: Iterable[Watchlist] | None = None) -> None:
        self._seed = tuple(seed) if seed is not None else WATCHLIST_SEED
        self._watchlists: list[Watchlist] = []
        self.reset_store()

    def _index_of(self, watchlist_id: str) -> int | None:
        for i, wl in enumerate(self._watchlists):
            if wl.id == watchlist_id:
                return i
        return None

    async def list_watchlists(self) -> list[Watchlist]:
        return [_detached(wl) for wl in self._watchlists]

    async def get_watchlist_by_id(self, watchlist_id: str) -> Watchlist | None:
        idx = self._index_of(watchlist_id)
        return None if idx is None else _detached(self._watchlists[idx])

    async def create_watchlist(self, data: CreateWatchlistInput) -> Watchlist:
        now = utc_now()
        watchlist = Watchlist(
            id=_new_id("wl"),
            name=data.name,
            description=data.description,
            items=[],
            created_at=now,
            updated_at=now,
        )
        self._watchlists.append(watchlist)
        return _detached(watchlist)

    async def update_watchlist(
        self, watchlist_id: str, data: UpdateWatchlistInput
    ) -> Watchlist | None:
        idx = self._index_of(watchlist_id)
        if idx is None:
            return None
        changes = data.model_dump(exclude_none=True)
        updated = self._watchlists[idx].model_copy(update={**changes, "updated_at": utc_now()})
        self._watchlists[idx] = updated
        return _detached(updated)

    async def add_token_to_watchlist(self, watchlist_id: str, token_id: str) -> Watchlist | None:
        return self._add_item(
            watchlist_id,
            lambda item: isinstance(item, TokenItem) and item.token_id == token_id,
            lambda now: TokenItem(id=_new_id("wli"), token_id=token_id, created_at=now),
            DuplicateItemError.for_token,
        )

    async def add_market_to_watchlist(self, watchlist_id: str, market_id: str) -> Watchlist | None:
        return self._add_item(
            watchlist_id,
            lambda item: isinstance(item, MarketItem) and item.market_id == market_id,
            lambda now: MarketItem(id=_new_id("wli"), market_id=market_id, created_at=now),
            DuplicateItemError.for_market,
        )

    async def remove_item_from_watchlist(self, watchlist_id: str, item_id: str) -> Watchlist | None:
        idx = self._index_of(watchlist_id)
        if idx is None:
            return None
        current = self._watchlists[idx]
        remaining = [item for item in current.items if item.id != item_id]
        if len(remaining) == len(current.items):
            raise ItemNotFoundError()
        updated = current.model_copy(update={"items": remaining, "updated_at": utc_now()})
        self._watchlists[idx] = updated
        return _detached(updated)

    async def delete_watchlist(self, watchlist_id: str) -> None:
        idx = self._index_of(watchlist_id)
        if idx is None:
            raise WatchlistNotFoundError()
        del self._watchlists[idx]

    def reset_store(self) -> None:
        self._watchlists = [wl.model_copy(deep=True) for wl in self._seed]

    def _add_item(
        self,
        watchlist_id: str,
        is_duplicate: Callable[[WatchlistItem], bool],
        make_item: Callable[[datetime], WatchlistItem],
        duplicate_error: Callable[[], DuplicateItemError],
    ) -> Watchlist | None:
        idx = self._index_of(watchlist_id)
        if idx is None:
            return None
        current = self._watchlists[idx]
        if any(is_duplicate(item) for item in current.items):
            raise duplicate_error()
        now = utc_now()
        updated = current.model_copy(
            update={"items": [*current.items, make_item(now)], "updated_at": now}
        )
        self._watchlists[idx] = updated
        return _detached(updated)
