"""SQL watchlist repository backed by the ``watchlists`` / ``watchlist_items`` tables."""

from __future__ import annotations

import uuid
from collections import defaultdict
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from archimedes.db.tables.watchlists import WatchlistItemRow, WatchlistRow
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

log = structlog.get_logger("watchlist_repository.sql")


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps (SQLite drops tzinfo)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_item(row: WatchlistItemRow) -> WatchlistItem:
    if row.kind == "token" and row.token_id:
        return TokenItem(id=row.id, token_id=row.token_id, created_at=_as_utc(row.created_at))
    if row.kind == "market" and row.market_id:
        return MarketItem(id=row.id, market_id=row.market_id, created_at=_as_utc(row.created_at))
    raise ValueError(f"Invalid watchlist item: {row.id}")


def _to_watchlist(row: WatchlistRow, items: Sequence[WatchlistItemRow]) -> Watchlist:
    return Watchlist(
        id=row.id,
        name=row.name,
        description=row.description,
        items=[_to_item(i) for i in items],
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SqlWatchlistRepository(WatchlistRepository):
    """Watchlists stored through SQLAlchemy.

    Each call runs in its own session and transaction. Items are deleted
    explicitly with their watchlist so the cascade holds even where the
    backend does not enforce foreign keys.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    # ── Reads ─────────────────────────────────────────────────

    async def list_watchlists(self) -> list[Watchlist]:
        with self._session_factory() as session:
            rows = session.execute(
                select(WatchlistRow).order_by(WatchlistRow.created_at.desc())
            ).scalars().all()
            if not rows:
                return []

            item_rows = session.execute(
                select(WatchlistItemRow)
                .where(WatchlistItemRow.watchlist_id.in_([r.id for r in rows]))
                .order_by(WatchlistItemRow.created_at)
            ).scalars().all()

            by_watchlist: dict[str, list[WatchlistItemRow]] = defaultdict(list)
            for item in item_rows:
                by_watchlist[item.watchlist_id].append(item)

            return [_to_watchlist(r, by_watchlist[r.id]) for r in rows]

    async def get_watchlist_by_id(self, watchlist_id: str) -> Watchlist | None:
        with self._session_factory() as session:
            return self._load(session, watchlist_id)

    # ── Writes ────────────────────────────────────────────────

    async def create_watchlist(self, data: CreateWatchlistInput) -> Watchlist:
        now = utc_now()
        with self._session_factory() as session:
            row = WatchlistRow(
                id=str(uuid.uuid4()),
                name=data.name,
                description=data.description,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.commit()
            return _to_watchlist(row, [])

    async def update_watchlist(
        self, watchlist_id: str, data: UpdateWatchlistInput
    ) -> Watchlist | None:
        with self._session_factory() as session:
            row = session.get(WatchlistRow, watchlist_id)
            if row is None:
                return None
            if data.name is not None:
                row.name = data.name
            if data.description is not None:
                row.description = data.description
            row.updated_at = utc_now()
            session.commit()
            return self._load(session, watchlist_id)

    async def add_token_to_watchlist(self, watchlist_id: str, token_id: str) -> Watchlist | None:
        return self._add_item(
            watchlist_id,
            kind="token",
            token_id=token_id,
            duplicate_error=DuplicateItemError.for_token,
        )

    async def add_market_to_watchlist(self, watchlist_id: str, market_id: str) -> Watchlist | None:
        return self._add_item(
            watchlist_id,
            kind="market",
            market_id=market_id,
            duplicate_error=DuplicateItemError.for_market,
        )

    async def remove_item_from_watchlist(self, watchlist_id: str, item_id: str) -> Watchlist | None:
        with self._session_factory() as session:
            row = session.get(WatchlistRow, watchlist_id)
            if row is None:
                return None
            result = session.execute(
                delete(WatchlistItemRow).where(
                    WatchlistItemRow.id == item_id,
                    WatchlistItemRow.watchlist_id == watchlist_id,
                )
            )
            if result.rowcount == 0:
                session.rollback()
                raise ItemNotFoundError()
            row.updated_at = utc_now()
            session.commit()
            return self._load(session, watchlist_id)

    async def delete_watchlist(self, watchlist_id: str) -> None:
        with self._session_factory() as session:
            row = session.get(WatchlistRow, watchlist_id)
            if row is None:
                raise WatchlistNotFoundError()
            session.execute(
                delete(WatchlistItemRow).where(WatchlistItemRow.watchlist_id == watchlist_id)
            )
            session.delete(row)
            session.commit()

    def reset_store(self) -> None:
        log.warning("reset_store_unsupported", backend="database")

    # ── Helpers ───────────────────────────────────────────────

    def _load(self, session: Session, watchlist_id: str) -> Watchlist | None:
        row = session.get(WatchlistRow, watchlist_id)
        if row is None:
            return None
        items = session.execute(
            select(WatchlistItemRow)
            .where(WatchlistItemRow.watchlist_id == watchlist_id)
            .order_by(WatchlistItemRow.created_at)
        ).scalars().all()
        return _to_watchlist(row, items)

    def _add_item(
        self,
        watchlist_id: str,
        *,
        kind: str,
        duplicate_error: Callable[[], DuplicateItemError],
        token_id: str | None = None,
        market_id: str | None = None,
    ) -> Watchlist | None:
        with self._session_factory() as session:
            row = session.get(WatchlistRow, watchlist_id)
            if row is None:
                return None

            ref_column = WatchlistItemRow.token_id if kind == "token" else WatchlistItemRow.market_id
            existing = session.execute(
                select(WatchlistItemRow.id).where(
                    WatchlistItemRow.watchlist_id == watchlist_id,
                    ref_column == (token_id if kind == "token" else market_id),
                )
            ).first()
            if existing is not None:
                raise duplicate_error()

            now = utc_now()
            session.add(WatchlistItemRow(
                id=str(uuid.uuid4()),
                watchlist_id=watchlist_id,
                kind=kind,
                token_id=token_id,
                market_id=market_id,
                created_at=now,
            ))
            row.updated_at = now
            try:
                session.commit()
            except IntegrityError as exc:
                # Lost a race with a concurrent insert of the same reference
                session.rollback()
                log.warning("watchlist_item_conflict", watchlist_id=watchlist_id, kind=kind)
                raise duplicate_error() from exc
            return self._load(session, watchlist_id)
