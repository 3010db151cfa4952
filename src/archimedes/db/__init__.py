"""Database layer — engine, session factory, ORM base."""

from archimedes.db.base import Base
from archimedes.db.engine import (
    create_db_engine,
    dispose_engine,
    get_engine,
    get_session_factory,
    init_engine,
)

__all__ = [
    "Base",
    "create_db_engine",
    "dispose_engine",
    "get_engine",
    "get_session_factory",
    "init_engine",
]
