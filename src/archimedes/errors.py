"""Exception hierarchy shared by the services and the route layer."""

from __future__ import annotations


class ArchimedesError(Exception):
    """Base error; ``status_code`` is the HTTP status the route layer uses."""

    status_code: int = 500
    default_message: str = "Unknown error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class WatchlistNotFoundError(ArchimedesError):
    status_code = 404
    default_message = "Watchlist not found"


class ItemNotFoundError(ArchimedesError):
    status_code = 404
    default_message = "Item not found in watchlist"


class DuplicateItemError(ArchimedesError):
    """An item with the same token or market id is already in the watchlist."""

    status_code = 409
    default_message = "Item already exists in watchlist"

    @classmethod
    def for_token(cls) -> DuplicateItemError:
        return cls("Token already exists in watchlist")

    @classmethod
    def for_market(cls) -> DuplicateItemError:
        return cls("Market already exists in watchlist")


class MarketConfigurationError(ArchimedesError):
    """A market references a token missing from the catalog.

    This is a startup invariant violation, not a user error.
    """

    def __init__(self, market_id: str) -> None:
        super().__init__(f"Invalid market configuration: {market_id}")
        self.market_id = market_id
