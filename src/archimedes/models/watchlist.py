"""Watchlist models — stored entities, enriched views and write inputs."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import Field, field_validator

from archimedes.models.base import ApiModel, UtcDatetime


class TokenItem(ApiModel):
    """Watchlist entry referencing a token."""

    id: str
    kind: Literal["token"] = "token"
    token_id: str
    created_at: UtcDatetime


class MarketItem(ApiModel):
    """Watchlist entry referencing a market."""

    id: str
    kind: Literal["market"] = "market"
    market_id: str
    created_at: UtcDatetime


WatchlistItem = Annotated[Union[TokenItem, MarketItem], Field(discriminator="kind")]


class Watchlist(ApiModel):
    """A named collection of token and market references."""

    id: str
    name: str
    description: str | None = None
    items: list[WatchlistItem] = Field(default_factory=list)
    created_at: UtcDatetime
    updated_at: UtcDatetime


class WatchlistItemEnriched(ApiModel):
    """A watchlist item with display fields and market statistics attached."""

    id: str
    kind: Literal["token", "market"]
    created_at: UtcDatetime
    token_id: str | None = None
    market_id: str | None = None
    symbol: str
    name: str
    price: float | None = None
    price_change_24h: float | None = Field(default=None, alias="priceChange24h")
    volume_24h: int | None = Field(default=None, alias="volume24h")
    base_symbol: str | None = None
    quote_symbol: str | None = None


class WatchlistEnriched(ApiModel):
    id: str
    name: str
    description: str | None = None
    items: list[WatchlistItemEnriched] = Field(default_factory=list)
    created_at: UtcDatetime
    updated_at: UtcDatetime


# ── Write inputs ──────────────────────────────────────────────


def _reject_null(value: Any) -> Any:
    # Optional fields may be omitted, but an explicit null is not a value
    if value is None:
        raise ValueError("must be a string, not null")
    return value


class CreateWatchlistInput(ApiModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)

    @field_validator("description", mode="before")
    @classmethod
    def description_not_null(cls, value: Any) -> Any:
        return _reject_null(value)


class UpdateWatchlistInput(ApiModel):
    """Partial metadata update; omitted fields are unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)

    @field_validator("name", "description", mode="before")
    @classmethod
    def fields_not_null(cls, value: Any) -> Any:
        return _reject_null(value)


class AddTokenInput(ApiModel):
    token_id: str = Field(min_length=1)


class AddMarketInput(ApiModel):
    market_id: str = Field(min_length=1)


class RemoveItemInput(ApiModel):
    item_id: str = Field(min_length=1)
