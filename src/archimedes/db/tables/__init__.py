"""Import all table modules so Base.metadata knows about them."""

from archimedes.db.tables.watchlists import WatchlistItemRow, WatchlistRow

__all__ = ["WatchlistItemRow", "WatchlistRow"]
