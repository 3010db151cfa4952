"""Archimedes — crypto market, token and watchlist API."""

__version__ = "0.1.0"
