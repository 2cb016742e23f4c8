"""
Pytest fixtures for xpoll tests.

Unit tests run against MagicMock stand-ins for the storage gateway,
connection and cursor. Integration tests need a PostgreSQL server
configured through the DB_* environment variables and are skipped
when none answers.
"""

import uuid
from unittest.mock import MagicMock

import pytest

from xpoll.config import DatabaseConfig
from xpoll.database.connection import DatabaseManager
from xpoll.database.errors import StoreConnectionError


@pytest.fixture
def mock_cursor() -> MagicMock:
    """Cursor returned by ``with conn.cursor() as cursor``."""
    cursor = MagicMock()
    cursor.rowcount = 1
    return cursor


@pytest.fixture
def mock_connection(mock_cursor: MagicMock) -> MagicMock:
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = mock_cursor
    return conn


@pytest.fixture
def mock_db(mock_connection: MagicMock) -> MagicMock:
    """DatabaseManager stand-in whose acquire() and transaction() yield mock_connection."""
    db = MagicMock()
    db.acquire.return_value.__enter__.return_value = mock_connection
    db.transaction.return_value.__enter__.return_value = mock_connection
    return db


@pytest.fixture(scope="session")
def database():
    """Open DatabaseManager on a live PostgreSQL with the schema created."""
    config = DatabaseConfig.from_env().model_copy(
        update={"connect_timeout": 3, "max_pool_size": 12, "log_file": None}
    )
    db = DatabaseManager(config)
    try:
        db.open()
    except StoreConnectionError as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")
    db.initialize_tables()
    yield db
    db.close()


@pytest.fixture
def unique_name():
    """Return a factory for usernames that don't collide across test runs."""
    def make(prefix: str = "user") -> str:
        return f"{prefix}-{uuid.uuid4().hex[:12]}"
    return make
