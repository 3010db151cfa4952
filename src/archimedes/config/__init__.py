"""Configuration system."""

from archimedes.config.loader import load_config
from archimedes.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
