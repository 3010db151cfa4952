"""Shared test fixtures."""

import logging

import pytest
import structlog
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import archimedes.db.tables  # noqa: F401  register tables on Base.metadata
from archimedes.api.app import create_app
from archimedes.config.schema import AppConfig
from archimedes.db import Base, create_db_engine
from archimedes.markets.service import MarketService
from archimedes.watchlists.memory import InMemoryWatchlistRepository
from archimedes.watchlists.sql import SqlWatchlistRepository


class FakeClock:
    """Manually advanced stand-in for ``time.monotonic``."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine shared across sessions and threads."""
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return sessionmaker(bind=sqlite_engine, expire_on_commit=False)


@pytest.fixture
def memory_repo():
    return InMemoryWatchlistRepository()


@pytest.fixture
def sql_repo(session_factory):
    return SqlWatchlistRepository(session_factory)


@pytest.fixture(params=["memory", "database"])
def repository(request):
    """Each backend in turn; both honour the same contract."""
    if request.param == "memory":
        return request.getfixturevalue("memory_repo")
    return request.getfixturevalue("sql_repo")


@pytest.fixture
def market_service():
    return MarketService()


@pytest.fixture
def test_config():
    return AppConfig(environment="test")


@pytest.fixture
def app(test_config, memory_repo, market_service):
    return create_app(test_config, repository=memory_repo, market_service=market_service)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def restore_root_logger():
    """Handlers installed by setup_logging point at captured streams; drop them afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
