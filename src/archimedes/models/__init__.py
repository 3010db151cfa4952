"""Pydantic domain models."""

from archimedes.models.base import ApiModel
from archimedes.models.market import Market, MarketWithTokens, PriceFeed, Token
from archimedes.models.watchlist import (
    AddMarketInput,
    AddTokenInput,
    CreateWatchlistInput,
    MarketItem,
    RemoveItemInput,
    TokenItem,
    UpdateWatchlistInput,
    Watchlist,
    WatchlistEnriched,
    WatchlistItem,
    WatchlistItemEnriched,
)

__all__ = [
    "AddMarketInput",
    "AddTokenInput",
    "ApiModel",
    "CreateWatchlistInput",
    "Market",
    "MarketItem",
    "MarketWithTokens",
    "PriceFeed",
    "RemoveItemInput",
    "Token",
    "TokenItem",
    "UpdateWatchlistInput",
    "Watchlist",
    "WatchlistEnriched",
    "WatchlistItem",
    "WatchlistItemEnriched",
]
