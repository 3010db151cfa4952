"""Watchlist enrichment — resolve item references into display-ready rows.

Token items pick up market statistics from the ``<token>-usdt`` market when
one exists. The 24h change and volume figures are mock values derived from
the market id; they stand in for a price-history service and are stable
for a given id.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from archimedes.markets.service import MarketService
from archimedes.models.watchlist import (
    MarketItem,
    TokenItem,
    Watchlist,
    WatchlistEnriched,
    WatchlistItem,
    WatchlistItemEnriched,
)
from archimedes.watchlists.cache import PriceCache

log = structlog.get_logger("watchlist_enrichment")

QUOTE_TOKEN_FOR_TOKEN_ITEMS = "usdt"


def _char_code_sum(market_id: str) -> int:
    return sum(ord(ch) for ch in market_id)


def get_mock_price_change_24h(market_id: str) -> float:
    """Mock 24h change in percent, in [-10.00, +10.00]."""
    return ((_char_code_sum(market_id) % 2000) - 1000) / 100


def get_mock_volume_24h(market_id: str) -> int:
    """Mock 24h volume, in [1,000,000, 11,000,000)."""
    return _char_code_sum(market_id) % 10_000_000 + 1_000_000


class WatchlistEnricher:
    """Joins watchlist items against the market catalog.

    Prices go through the owned ``PriceCache``; one enricher per process
    gives a process-wide cache.
    """

    def __init__(
        self,
        market_service: MarketService,
        price_cache: PriceCache | None = None,
    ) -> None:
        self._markets = market_service
        self._cache = price_cache if price_cache is not None else PriceCache()

    @property
    def price_cache(self) -> PriceCache:
        return self._cache

    def enrich_watchlist(self, watchlist: Watchlist) -> WatchlistEnriched:
        return WatchlistEnriched(
            id=watchlist.id,
            name=watchlist.name,
            description=watchlist.description,
            created_at=watchlist.created_at,
            updated_at=watchlist.updated_at,
            items=[self._enrich_item(item) for item in watchlist.items],
        )

    def enrich_watchlists(self, watchlists: Iterable[Watchlist]) -> list[WatchlistEnriched]:
        return [self.enrich_watchlist(wl) for wl in watchlists]

    def clear_price_cache(self) -> None:
        self._cache.clear()

    # ── Internals ─────────────────────────────────────────────

    def _market_price(self, market_id: str) -> float | None:
        return self._cache.get_or_load(market_id, self._load_price)

    def _load_price(self, market_id: str) -> float | None:
        log.debug("price_cache_miss", market_id=market_id)
        feed = self._markets.get_latest_price_feed_for_market(market_id)
        return feed.price if feed is not None else None

    def _enrich_item(self, item: WatchlistItem) -> WatchlistItemEnriched:
        if isinstance(item, TokenItem):
            return self._enrich_token_item(item)
        return self._enrich_market_item(item)

    def _enrich_token_item(self, item: TokenItem) -> WatchlistItemEnriched:
        token = self._markets.get_token_by_id(item.token_id)
        if token is None:
            return WatchlistItemEnriched(
                id=item.id,
                kind="token",
                created_at=item.created_at,
                token_id=item.token_id,
                symbol=item.token_id.upper(),
                name="Unknown Token",
            )

        stats: dict[str, float | int | None] = {}
        market = self._markets.get_market_by_id(f"{item.token_id}-{QUOTE_TOKEN_FOR_TOKEN_ITEMS}")
        if market is not None:
            stats = {
                "price": self._market_price(market.id),
                "price_change_24h": get_mock_price_change_24h(market.id),
                "volume_24h": get_mock_volume_24h(market.id),
            }

        return WatchlistItemEnriched(
            id=item.id,
            kind="token",
            created_at=item.created_at,
            token_id=item.token_id,
            symbol=token.symbol,
            name=token.name,
            **stats,
        )

    def _enrich_market_item(self, item: MarketItem) -> WatchlistItemEnriched:
        market = self._markets.get_market_by_id(item.market_id)
        if market is None:
            return WatchlistItemEnriched(
                id=item.id,
                kind="market",
                created_at=item.created_at,
                market_id=item.market_id,
                symbol=item.market_id.upper(),
                name="Unknown Market",
            )

        base, quote = market.base_token, market.quote_token
        return WatchlistItemEnriched(
            id=item.id,
            kind="market",
            created_at=item.created_at,
            market_id=item.market_id,
            symbol=f"{base.symbol}/{quote.symbol}",
            name=f"{base.name} / {quote.name}",
            base_symbol=base.symbol,
            quote_symbol=quote.symbol,
            price=self._market_price(market.id),
            price_change_24h=get_mock_price_change_24h(market.id),
            volume_24h=get_mock_volume_24h(market.id),
        )
