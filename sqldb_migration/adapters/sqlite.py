"""
SQLite source adapter

This module provides the adapter for reading tables out of a SQLite database file.
"""

import logging
import sqlite3
from urllib.parse import quote
from typing import Any, Dict, List

from sqldb_migration.core.adapter import SourceAdapter


logger = logging.getLogger(__name__)

# characters left unescaped in file: URIs, so Windows drive paths survive
_PATH_SAFE = "/:\\"


class SQLiteAdapter(SourceAdapter):
    """Source adapter for SQLite database files."""

    def __init__(self):
        """Initialize a new SQLite adapter."""
        self.conn = None

    def connect(self, **connection_params) -> bool:
        """Open the SQLite database.

        Args:
            **connection_params: Connection parameters for SQLite.
                - database: Path to the database file (or ":memory:")

        Returns:
            bool: True if connection was successful, False otherwise.
        """
        database = connection_params.get("database")
        if not database:
            logger.error("No SQLite database file given")
            return False
        try:
            if database == ":memory:":
                self.conn = sqlite3.connect(database)
            else:
                # mode=rw refuses to create a missing file
                uri = f"file:{quote(database, safe=_PATH_SAFE)}?mode=rw"
                self.conn = sqlite3.connect(uri, uri=True)
            self.conn.row_factory = sqlite3.Row
            logger.debug(f"Connected to SQLite: {database}")
            return True
        except sqlite3.Error as e:
            logger.error(f"Error opening SQLite database {database}: {e}")
            self.conn = None
            return False

    def disconnect(self) -> None:
        """Close the SQLite connection."""
        if self.conn:
            self.conn.close()
        self.conn = None
        logger.debug("Disconnected from SQLite")

    def _require_connection(self):
        if not self.conn:
            raise ConnectionError("Not connected to SQLite database")

    def list_tables(self) -> List[str]:
        """Return user tables in ``sqlite_master`` order."""
        self._require_connection()
        cursor = self.conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
        )
        try:
            return [row["name"] for row in cursor.fetchall()]
        finally:
            cursor.close()

    def fetch_rows(self, table_name: str) -> List[Dict[str, Any]]:
        """Read every row of a table as a dict keyed by column name."""
        self._require_connection()
        quoted = '"' + table_name.replace('"', '""') + '"'
        cursor = self.conn.execute(f"SELECT * FROM {quoted}")
        try:
            rows = [dict(row) for row in cursor.fetchall()]
        finally:
            cursor.close()
        logger.debug(f"Read {len(rows)} rows from SQLite table {table_name}")
        return rows
