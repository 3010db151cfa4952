"""Tests for watchlist enrichment and the mock market statistics."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from archimedes.markets.data import utc_now_iso
from archimedes.markets.service import MarketService
from archimedes.models import MarketItem, PriceFeed, TokenItem, Watchlist
from archimedes.watchlists.cache import PriceCache
from archimedes.watchlists.enrichment import (
    WatchlistEnricher,
    get_mock_price_change_24h,
    get_mock_volume_24h,
)
from archimedes.watchlists.seed import WATCHLIST_SEED

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def _watchlist(*items) -> Watchlist:
    return Watchlist(id="wl-test", name="Test", items=list(items), created_at=NOW, updated_at=NOW)


class CountingPriceSource:
    """Price source returning a new price on every call."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def __call__(self, market_id: str) -> PriceFeed:
        self.calls.append(market_id)
        return PriceFeed(market_id=market_id, price=float(len(self.calls)), timestamp=utc_now_iso())


@pytest.fixture
def enricher(market_service, clock):
    return WatchlistEnricher(market_service, PriceCache(ttl_seconds=60.0, clock=clock))


@pytest.fixture
def price_source():
    return CountingPriceSource()


@pytest.fixture
def counting_enricher(price_source, clock):
    service = MarketService(price_source=price_source)
    return WatchlistEnricher(service, PriceCache(ttl_seconds=60.0, clock=clock))


# ── Mock statistics ───────────────────────────────────────────


class TestMockStatistics:
    def test_price_change_is_deterministic(self):
        assert get_mock_price_change_24h("btc-usdt") == get_mock_price_change_24h("btc-usdt")

    def test_known_values(self):
        # char-code sum: btc-usdt = 806, eth-usdt = 814
        assert get_mock_price_change_24h("btc-usdt") == pytest.approx(-1.94)
        assert get_mock_volume_24h("btc-usdt") == 1_000_806
        assert get_mock_price_change_24h("eth-usdt") == pytest.approx(-1.86)
        assert get_mock_volume_24h("eth-usdt") == 1_000_814

    def test_volume_is_whole_units(self):
        assert isinstance(get_mock_volume_24h("btc-usdt"), int)

    @pytest.mark.parametrize("market_id", ["a", "btc-usdt", "x" * 40, "zzzzzzzzzzzzzzzzzzzzzzzz-usdt"])
    def test_ranges(self, market_id):
        assert -10.0 <= get_mock_price_change_24h(market_id) <= 10.0
        assert 1_000_000 <= get_mock_volume_24h(market_id) <= 11_000_000


# ── Item enrichment ───────────────────────────────────────────


class TestTokenItems:
    def test_known_token_with_usdt_market(self, enricher):
        item = TokenItem(id="i1", token_id="btc", created_at=NOW)
        [enriched] = enricher.enrich_watchlist(_watchlist(item)).items
        assert enriched.kind == "token"
        assert enriched.token_id == "btc"
        assert enriched.symbol == "BTC"
        assert enriched.name == "Bitcoin"
        assert enriched.price == 43250.5
        assert enriched.price_change_24h == pytest.approx(-1.94)
        assert enriched.volume_24h == 1_000_806
        assert enriched.market_id is None

    def test_known_token_without_market(self, enricher):
        item = TokenItem(id="i1", token_id="usdt", created_at=NOW)
        [enriched] = enricher.enrich_watchlist(_watchlist(item)).items
        assert enriched.symbol == "USDT"
        assert enriched.name == "Tether USD"
        assert enriched.price is None
        assert enriched.price_change_24h is None
        assert enriched.volume_24h is None

    def test_unknown_token_degrades(self, enricher):
        item = TokenItem(id="i1", token_id="doge", created_at=NOW)
        [enriched] = enricher.enrich_watchlist(_watchlist(item)).items
        assert enriched.kind == "token"
        assert enriched.symbol == "DOGE"
        assert enriched.name == "Unknown Token"
        assert enriched.price is None


class TestMarketItems:
    def test_known_market(self, enricher):
        item = MarketItem(id="i2", market_id="btc-usdt", created_at=NOW)
        [enriched] = enricher.enrich_watchlist(_watchlist(item)).items
        assert enriched.kind == "market"
        assert enriched.market_id == "btc-usdt"
        assert enriched.symbol == "BTC/USDT"
        assert enriched.name == "Bitcoin / Tether USD"
        assert enriched.base_symbol == "BTC"
        assert enriched.quote_symbol == "USDT"
        assert enriched.price == 43250.5
        assert enriched.price_change_24h == pytest.approx(-1.94)
        assert enriched.volume_24h == 1_000_806

    def test_unknown_market_degrades(self, enricher):
        item = MarketItem(id="i2", market_id="sol-usdt", created_at=NOW)
        [enriched] = enricher.enrich_watchlist(_watchlist(item)).items
        assert enriched.kind == "market"
        assert enriched.symbol == "SOL-USDT"
        assert enriched.name == "Unknown Market"
        assert enriched.price is None
        assert enriched.base_symbol is None

    def test_enriched_item_serialises_camel_case(self, enricher):
        item = MarketItem(id="i2", market_id="eth-usdt", created_at=NOW)
        data = enricher.enrich_watchlist(_watchlist(item)).items[0].to_api()
        assert data["marketId"] == "eth-usdt"
        assert data["priceChange24h"] == pytest.approx(-1.86)
        assert data["volume24h"] == 1_000_814
        assert data["baseSymbol"] == "ETH"
        assert data["createdAt"] == "2025-06-15T12:00:00.000Z"
        assert "tokenId" not in data


class TestWatchlistEnrichment:
    def test_preserves_metadata_and_order(self, enricher):
        seed = WATCHLIST_SEED[0]
        enriched = enricher.enrich_watchlist(seed)
        assert enriched.id == seed.id
        assert enriched.name == seed.name
        assert enriched.description == seed.description
        assert enriched.created_at == seed.created_at
        assert enriched.updated_at == seed.updated_at
        assert [i.id for i in enriched.items] == [i.id for i in seed.items]
        assert [i.symbol for i in enriched.items] == ["BTC", "BTC/USDT", "ETH"]

    def test_enrich_watchlists(self, enricher):
        enriched = enricher.enrich_watchlists(WATCHLIST_SEED)
        assert [wl.id for wl in enriched] == ["wl-favorites", "wl-trending"]

    def test_empty_watchlist(self, enricher):
        assert enricher.enrich_watchlist(_watchlist()).items == []


# ── Price caching ─────────────────────────────────────────────


class TestPriceCaching:
    def test_prices_stable_within_ttl(self, counting_enricher, price_source, clock):
        wl = WATCHLIST_SEED[0]
        first = counting_enricher.enrich_watchlist(wl)
        clock.advance(30)
        second = counting_enricher.enrich_watchlist(wl)

        assert [i.price for i in first.items] == [i.price for i in second.items]
        # btc token and btc-usdt market share one cache entry
        assert sorted(price_source.calls) == ["btc-usdt", "eth-usdt"]

    def test_recomputes_after_ttl(self, counting_enricher, price_source, clock):
        wl = _watchlist(MarketItem(id="i1", market_id="btc-usdt", created_at=NOW))
        first = counting_enricher.enrich_watchlist(wl).items[0].price
        clock.advance(61)
        second = counting_enricher.enrich_watchlist(wl).items[0].price
        assert first != second
        assert price_source.calls == ["btc-usdt", "btc-usdt"]

    def test_clear_price_cache_still_yields_price(self, enricher):
        wl = _watchlist(MarketItem(id="i1", market_id="eth-usdt", created_at=NOW))
        enricher.enrich_watchlist(wl)
        enricher.clear_price_cache()
        assert len(enricher.price_cache) == 0
        assert enricher.enrich_watchlist(wl).items[0].price == 2285.75

    def test_default_cache_created(self, market_service):
        enricher = WatchlistEnricher(market_service)
        assert enricher.price_cache.ttl_seconds == 60.0
