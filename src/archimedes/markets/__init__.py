"""Market reference data and the market service."""

from archimedes.markets.data import MARKETS, MOCK_PRICES, TOKENS, get_mock_price_feed
from archimedes.markets.service import MarketService

__all__ = ["MARKETS", "MOCK_PRICES", "TOKENS", "MarketService", "get_mock_price_feed"]
