"""Database connection and schema management."""

import duckdb
from contextlib import contextmanager
from typing import Iterator, Optional
from pathlib import Path
from ..utils.logger import get_app_logger


class DatabaseConnection:
    """DuckDB connection manager."""

    def __init__(self, db_path: str = "./data/sales_assistant.db"):
        """
        Initialize database connection.

        Args:
            db_path: Path to DuckDB database file (":memory:" for an in-memory database)
        """
        self.db_path = db_path
        self.logger = get_app_logger()
        self.conn: Optional[duckdb.DuckDBPyConnection] = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._connect()
        self._init_schema()

    def _connect(self):
        """Connect to DuckDB database."""
        try:
            self.conn = duckdb.connect(self.db_path)
            self.logger.info(f"Connected to DuckDB at {self.db_path}")
        except Exception as e:
            self.logger.error(f"Failed to connect to DuckDB: {e}")
            raise

    def _init_schema(self):
        """Initialize database schema."""
        try:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS conversations (
                    id VARCHAR PRIMARY KEY,
                    user_id VARCHAR NOT NULL,
                    title VARCHAR(255),
                    metadata JSON NOT NULL,
                    messages_since_synthesis INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
            """)

            # Messages are ordered by created_at, ties broken by seq
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS messages (
                    seq BIGINT PRIMARY KEY,
                    id VARCHAR NOT NULL,
                    conversation_id VARCHAR NOT NULL,
                    sender VARCHAR NOT NULL,
                    content TEXT NOT NULL,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            self.conn.execute("CREATE SEQUENCE IF NOT EXISTS messages_seq START 1")

            self.conn.execute("CREATE UNIQUE INDEX IF NOT EXISTS idx_messages_id ON messages(id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_conversations_user ON conversations(user_id, created_at)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_messages_conversation ON messages(conversation_id, created_at)")

            self.logger.info("Database schema initialized successfully")

        except Exception as e:
            self.logger.error(f"Failed to initialize database schema: {e}")
            raise

    @contextmanager
    def transaction(self) -> Iterator[duckdb.DuckDBPyConnection]:
        """
        Run a unit of work on a dedicated cursor.

        The cursor has its own transaction, so writes made through it stay
        invisible to other callers until commit, even across awaits.
        Any exception rolls the whole unit back and is re-raised.

        Yields:
            DuckDB cursor with an open transaction
        """
        cursor = self.conn.cursor()
        cursor.begin()
        try:
            yield cursor
            cursor.commit()
        except BaseException:
            cursor.rollback()
            self.logger.warning("Transaction rolled back")
            raise
        finally:
            cursor.close()

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.logger.info("Database connection closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
