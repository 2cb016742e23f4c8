import logging
from contextlib import contextmanager
from typing import Iterator, Optional
import psycopg
from psycopg_pool import ConnectionPool, PoolTimeout

from xpoll.config import DatabaseConfig
from xpoll.database.errors import StoreConnectionError

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        username VARCHAR(255) NOT NULL,
        password_hash TEXT NOT NULL,
        created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
        CONSTRAINT unique_username UNIQUE (username)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS polls (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL,
        question TEXT NOT NULL,
        is_closed BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
        CONSTRAINT fk_polls_user_id FOREIGN KEY (user_id)
            REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS choices (
        id SERIAL PRIMARY KEY,
        poll_id INTEGER NOT NULL,
        choice_text VARCHAR(500) NOT NULL,
        display_order INTEGER NOT NULL DEFAULT 0,
        CONSTRAINT fk_choices_poll_id FOREIGN KEY (poll_id)
            REFERENCES polls(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS responses (
        poll_id INTEGER NOT NULL,
        choice_id INTEGER NOT NULL,
        user_id INTEGER NOT NULL,
        responded_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
        CONSTRAINT unique_response_poll_user UNIQUE (poll_id, user_id),
        CONSTRAINT fk_responses_poll_id FOREIGN KEY (poll_id)
            REFERENCES polls(id) ON DELETE CASCADE,
        CONSTRAINT fk_responses_choice_id FOREIGN KEY (choice_id)
            REFERENCES choices(id) ON DELETE CASCADE,
        CONSTRAINT fk_responses_user_id FOREIGN KEY (user_id)
            REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_polls_user_id ON polls(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_choices_poll_id_display_order ON choices(poll_id, display_order);",
    "CREATE INDEX IF NOT EXISTS idx_responses_choice_id ON responses(choice_id);",
)


class DatabaseManager:
    """
    Storage gateway: the only component that talks to PostgreSQL directly.

    Every repository operation borrows one pooled connection through
    acquire() or transaction() and gives it back when the block exits,
    whatever the outcome.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self.config = config
        self.pool: Optional[ConnectionPool] = None

    def __enter__(self) -> "DatabaseManager":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        """
        Open the connection pool and wait for the first connections.

        Raises:
            StoreConnectionError: If no connection can be made within connect_timeout
        """
        if self.pool is not None:
            return

        pool = ConnectionPool(
            self.config.conninfo(),
            min_size=self.config.min_pool_size,
            max_size=self.config.max_pool_size,
            timeout=self.config.acquire_timeout,
            name="xpoll",
            open=False,
        )
        try:
            pool.open(wait=True, timeout=self.config.connect_timeout)
        except PoolTimeout as e:
            pool.close()
            logger.error(f"Database connection failed - pool did not start: {str(e)}")
            raise StoreConnectionError(
                f"Could not connect to {self.config.host}:{self.config.port}/{self.config.dbname}"
            ) from e

        self.pool = pool
        logger.info(
            "Database pool opened to %s:%s/%s (size %s..%s)",
            self.config.host,
            self.config.port,
            self.config.dbname,
            self.config.min_pool_size,
            self.config.max_pool_size,
        )

    def close(self) -> None:
        """Close the pool and every connection it holds."""
        if self.pool is None:
            return
        self.pool.close()
        self.pool = None
        logger.info("Database pool closed")

    @contextmanager
    def acquire(self) -> Iterator[psycopg.Connection]:
        """
        Borrow a connection for the duration of one logical operation.

        Work done on the connection is committed when the block exits normally
        and rolled back when it raises. The connection always goes back to the pool.

        Yields:
            psycopg.Connection: Pooled database connection

        Raises:
            StoreConnectionError: If the pool is not open, the store is unreachable,
                or no connection frees up within acquire_timeout
        """
        if self.pool is None:
            raise StoreConnectionError("Database pool not open. Ensure open() is called first.")

        try:
            conn = self.pool.getconn(timeout=self.config.acquire_timeout)
        except PoolTimeout as e:
            logger.error(f"Connection acquisition failed - pool exhausted: {str(e)}")
            raise StoreConnectionError(
                f"No database connection available within {self.config.acquire_timeout}s"
            ) from e
        except psycopg.OperationalError as e:
            logger.error(f"Connection acquisition failed - database connection issue: {str(e)}")
            raise StoreConnectionError(f"Database unreachable: {e}") from e

        try:
            yield conn
        except BaseException:
            if not conn.closed:
                conn.rollback()
            raise
        else:
            conn.commit()
        finally:
            self.pool.putconn(conn)

    @contextmanager
    def transaction(self) -> Iterator[psycopg.Connection]:
        """
        Borrow a connection and run the block inside a single transaction.

        The transaction commits once at the end of the block and rolls back if
        the block raises, so multi-statement writes persist all-or-nothing.

        Yields:
            psycopg.Connection: Connection with an open transaction
        """
        with self.acquire() as conn:
            with conn.transaction():
                yield conn

    def initialize_tables(self) -> None:
        """
        Create the users, polls, choices and responses tables if they don't exist.

        Raises:
            StoreConnectionError: If the pool is not open or the store is unreachable
        """
        with self.transaction() as conn:
            for statement in SCHEMA_STATEMENTS:
                conn.execute(statement)
        logger.info("Database tables initialized")
