"""Base repository class."""

from typing import Any, List, Sequence, Tuple

import duckdb
from ...utils.logger import get_app_logger


class BaseRepository:
    """Base class for all repositories."""

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        """
        Initialize repository with database connection.

        Args:
            conn: DuckDB connection instance
        """
        self.conn = conn
        self.logger = get_app_logger()

    def _next_id(self, sequence: str) -> int:
        """Draw the next value of a sequence."""
        return self.conn.execute(f"SELECT nextval('{sequence}')").fetchone()[0]

    def _changed(self, sql: str, params: List[Any]) -> int:
        """Execute an UPDATE/DELETE and return the number of affected rows."""
        result = self.conn.execute(sql, params).fetchone()
        return result[0] if result else 0

    @staticmethod
    def _in_clause(column: str, values: Sequence[Any]) -> Tuple[str, List[Any]]:
        """Build ``column IN (?, ...)``; an empty list matches nothing."""
        if not values:
            return "FALSE", []
        placeholders = ", ".join("?" for _ in values)
        return f"{column} IN ({placeholders})", list(values)
