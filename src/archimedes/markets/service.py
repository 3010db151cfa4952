"""Market service — joins markets to their tokens and serves price feeds."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog

from archimedes.errors import MarketConfigurationError
from archimedes.markets.data import MARKETS, TOKENS, get_mock_price_feed
from archimedes.models.market import Market, MarketWithTokens, PriceFeed, Token

log = structlog.get_logger("market_service")


class MarketService:
    """Read-only view over a token/market catalog.

    The catalog is fixed for the lifetime of the service. A market whose
    base or quote token is missing from the catalog is a configuration
    error and raises ``MarketConfigurationError`` whenever it is joined.
    """

    def __init__(
        self,
        tokens: Iterable[Token] = TOKENS,
        markets: Iterable[Market] = MARKETS,
        price_source: Callable[[str], PriceFeed] = get_mock_price_feed,
    ) -> None:
        self._tokens = tuple(tokens)
        self._markets = tuple(markets)
        self._tokens_by_id = {t.id: t for t in self._tokens}
        self._markets_by_id = {m.id: m for m in self._markets}
        self._price_source = price_source

    def list_tokens(self) -> list[Token]:
        """All tokens in catalog order."""
        return list(self._tokens)

    def get_token_by_id(self, token_id: str) -> Token | None:
        return self._tokens_by_id.get(token_id)

    def list_markets(self) -> list[MarketWithTokens]:
        """All markets joined with their tokens, in catalog order."""
        return [self._join(m) for m in self._markets]

    def get_market_by_id(self, market_id: str) -> MarketWithTokens | None:
        market = self._markets_by_id.get(market_id)
        if market is None:
            return None
        return self._join(market)

    def get_latest_price_feed_for_market(self, market_id: str) -> PriceFeed | None:
        """Fresh price feed for a known market, ``None`` otherwise."""
        if self.get_market_by_id(market_id) is None:
            return None
        return self._price_source(market_id)

    def validate(self) -> None:
        """Join every market once; raises on the first broken reference."""
        markets = self.list_markets()
        log.info("market_catalog_validated", tokens=len(self._tokens), markets=len(markets))

    def _join(self, market: Market) -> MarketWithTokens:
        base = self._tokens_by_id.get(market.base_token_id)
        quote = self._tokens_by_id.get(market.quote_token_id)
        if base is None or quote is None:
            raise MarketConfigurationError(market.id)
        return MarketWithTokens(
            **market.model_dump(),
            base_token=base,
            quote_token=quote,
        )
