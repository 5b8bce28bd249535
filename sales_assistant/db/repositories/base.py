"""Base repository class."""

import duckdb
from ...utils.logger import get_app_logger


class BaseRepository:
    """Base class for all repositories."""

    def __init__(self, conn: duckdb.DuckDBPyConnection, in_transaction: bool = False):
        """
        Initialize repository with database connection.

        Args:
            conn: DuckDB connection instance
            in_transaction: True when the connection belongs to an open
                transaction; commits are then left to its owner
        """
        self.conn = conn
        self.in_transaction = in_transaction
        self.logger = get_app_logger()

    def _commit(self):
        """Commit unless an enclosing transaction owns the commit."""
        if not self.in_transaction:
            self.conn.commit()
