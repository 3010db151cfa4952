"""Static token/market catalog and the mock price source."""

from __future__ import annotations

from archimedes.models.base import format_utc, utc_now
from archimedes.models.market import Market, PriceFeed, Token

TOKENS: tuple[Token, ...] = (
    Token(id="btc", symbol="BTC", name="Bitcoin", decimals=8),
    Token(id="eth", symbol="ETH", name="Ethereum", decimals=18),
    Token(id="usdt", symbol="USDT", name="Tether USD", decimals=6),
)

MARKETS: tuple[Market, ...] = (
    Market(
        id="btc-usdt",
        base_token_id="btc",
        quote_token_id="usdt",
        venue="SIMULATED",
        status="ACTIVE",
    ),
    Market(
        id="eth-usdt",
        base_token_id="eth",
        quote_token_id="usdt",
        venue="SIMULATED",
        status="ACTIVE",
    ),
)

MOCK_PRICES: dict[str, float] = {
    "btc-usdt": 43250.5,
    "eth-usdt": 2285.75,
}


def utc_now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return format_utc(utc_now())


def get_mock_price_feed(market_id: str) -> PriceFeed:
    """Price feed from the fixed price table; unmapped ids price at 0."""
    return PriceFeed(
        market_id=market_id,
        price=MOCK_PRICES.get(market_id, 0.0),
        timestamp=utc_now_iso(),
    )
