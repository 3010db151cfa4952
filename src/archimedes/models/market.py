"""Market reference data — tokens, markets, price feeds."""

from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict

from archimedes.models.base import ApiModel

Venue = Literal["BINANCE", "COINBASE", "KRAKEN", "SIMULATED"]
MarketStatus = Literal["ACTIVE", "INACTIVE"]


class Token(ApiModel):
    """A tradeable asset."""

    model_config = ConfigDict(frozen=True)

    id: str
    symbol: str
    name: str
    decimals: int


class Market(ApiModel):
    """A base/quote trading pair on a venue."""

    model_config = ConfigDict(frozen=True)

    id: str
    base_token_id: str
    quote_token_id: str
    venue: Venue
    status: MarketStatus


class MarketWithTokens(Market):
    """A market joined with its resolved base and quote tokens."""

    base_token: Token
    quote_token: Token


class PriceFeed(ApiModel):
    """A point-in-time price for a market.

    ``timestamp`` is an ISO-8601 UTC string with millisecond precision,
    e.g. ``2025-01-10T10:00:00.000Z``.
    """

    market_id: str
    price: float
    timestamp: str
