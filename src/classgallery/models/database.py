"""
DuckDB connection management for the local fallback store.

This module opens the DuckDB file that backs the key-string store and keeps
its schema in place.
"""

import logging
from pathlib import Path
from typing import Any

import duckdb

from .schema import LOCAL_STORE_TABLE, get_local_schema_statements

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages the DuckDB connection used by the local store.
    """

    def __init__(self, db_path: str):
        """
        Initialize DatabaseManager.

        Args:
            db_path: Path to the DuckDB database file, or ``:memory:``
        """
        self.db_path = db_path
        self._connection: duckdb.DuckDBPyConnection | None = None

    def connect(self) -> duckdb.DuckDBPyConnection:
        """
        Get or create a database connection.

        Returns:
            DuckDB connection object
        """
        if self._connection is None:
            self._connection = duckdb.connect(self.db_path)
            logger.info(f"Connected to DuckDB database at {self.db_path}")

        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.info("Closed DuckDB database connection")

    def initialize_schema(self) -> None:
        """
        Create the key-string table if it does not exist.

        Raises:
            duckdb.Error: If database operations fail
        """
        conn = self.connect()

        try:
            for statement in get_local_schema_statements():
                logger.debug(f"Executing SQL: {statement}")
                conn.execute(statement)

            logger.info("Local store schema initialized")

        except duckdb.Error as e:
            logger.error(f"Failed to initialize local store schema: {e}")
            raise

    def verify_schema(self) -> bool:
        """
        Verify that the key-string table exists with the expected columns.

        Returns:
            True if schema is valid, False otherwise
        """
        conn = self.connect()

        try:
            columns = conn.execute(
                "SELECT column_name FROM information_schema.columns WHERE table_name = ?", [LOCAL_STORE_TABLE]
            ).fetchall()
            column_names = {col[0] for col in columns}

            missing_columns = {"key", "value", "updated_at"} - column_names
            if missing_columns:
                logger.warning(f"Missing columns in {LOCAL_STORE_TABLE}: {missing_columns}")
                return False

            return True

        except duckdb.Error as e:
            logger.error(f"Schema verification failed: {e}")
            return False

    def execute_query(self, query: str, parameters: list | tuple | None = None) -> list[tuple]:
        """
        Execute a SQL query and return results.

        Args:
            query: SQL query string
            parameters: Optional query parameters

        Returns:
            List of result tuples (empty for statements without a result set)

        Raises:
            duckdb.Error: If query execution fails
        """
        conn = self.connect()

        try:
            result = conn.execute(query, parameters) if parameters else conn.execute(query)
            return result.fetchall() if result.description else []

        except duckdb.Error as e:
            logger.error(f"Query execution failed: {query}, error: {e}")
            raise

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def get_database_manager(db_path: str) -> DatabaseManager:
    """
    Open the local store database, creating the file and schema when needed.

    Args:
        db_path: Path to the database file

    Returns:
        DatabaseManager instance with a verified schema

    Raises:
        RuntimeError: If the schema cannot be created
    """
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    db_manager = DatabaseManager(db_path)

    if not db_manager.verify_schema():
        db_manager.initialize_schema()
        if not db_manager.verify_schema():
            raise RuntimeError(f"Local store schema verification failed for {db_path}")

    return db_manager
