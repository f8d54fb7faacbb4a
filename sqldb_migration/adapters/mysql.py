"""
MySQL destination adapter

This module provides the adapter for writing into a MySQL/MariaDB schema using
mysql-connector-python.
"""

import logging
from typing import Any, List, Sequence

import mysql.connector

from sqldb_migration.core.adapter import DestinationAdapter
from sqldb_migration.core.schema import ColumnInfo


logger = logging.getLogger(__name__)


class MySQLAdapter(DestinationAdapter):
    """Destination adapter for MySQL."""

    placeholder = "%s"

    def __init__(self):
        """Initialize a new MySQL adapter."""
        self.conn = None
        self.cursor = None
        self.database = None

    def connect(self, **connection_params) -> bool:
        """Connect to the MySQL server.

        Args:
            **connection_params: Connection parameters for MySQL.
                - host: Server host address (default: "localhost")
                - port: Port number (default: 3306)
                - user: Username
                - password: Password
                - database: Schema to migrate into
                - charset: Connection charset (default: "utf8mb4")

        Returns:
            bool: True if connection was successful, False otherwise.
        """
        try:
            self.database = connection_params.get("database")
            self.conn = mysql.connector.connect(
                host=connection_params.get("host", "localhost"),
                port=connection_params.get("port", 3306),
                user=connection_params.get("user"),
                password=connection_params.get("password"),
                database=self.database,
                charset=connection_params.get("charset") or "utf8mb4",
            )
            self.cursor = self.conn.cursor()
            logger.debug(f"Connected to MySQL: {connection_params.get('host')}:{connection_params.get('port')}")
            return True
        except Exception as e:
            logger.error(f"Error connecting to MySQL: {e}")
            self.conn = None
            self.cursor = None
            return False

    def disconnect(self) -> None:
        """Close the MySQL connection."""
        if self.cursor:
            self.cursor.close()
        if self.conn:
            self.conn.close()
        self.cursor = None
        self.conn = None
        logger.debug("Disconnected from MySQL")

    def _require_connection(self):
        if not self.conn or not self.cursor:
            raise ConnectionError("Not connected to MySQL database")

    def list_tables(self) -> List[str]:
        """Return the base tables of the connected schema."""
        self._require_connection()
        self.cursor.execute(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = %s AND table_type = 'BASE TABLE'",
            (self.database,),
        )
        return [row[0] for row in self.cursor.fetchall()]

    def list_columns(self, table_name: str) -> List[ColumnInfo]:
        """Return column metadata for a table in ordinal order."""
        self._require_connection()
        self.cursor.execute(
            "SELECT column_name, data_type, column_default, is_nullable "
            "FROM information_schema.columns "
            "WHERE table_name = %s AND table_schema = %s "
            "ORDER BY ordinal_position",
            (table_name, self.database),
        )
        return [
            ColumnInfo(
                name=name,
                data_type=_text(data_type),
                nullable=_text(is_nullable) == "YES",
                has_default=default is not None,
            )
            for name, data_type, default, is_nullable in self.cursor.fetchall()
        ]

    def truncate_table(self, table_name: str) -> None:
        """Truncate a table with foreign key checks disabled."""
        self._require_connection()
        self.cursor.execute("SET FOREIGN_KEY_CHECKS = 0")
        try:
            self.cursor.execute(f"TRUNCATE TABLE {self.quote_table(table_name)}")
        finally:
            self.cursor.execute("SET FOREIGN_KEY_CHECKS = 1")
        logger.debug(f"Truncated MySQL table {table_name}")

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Execute a statement and commit."""
        self._require_connection()
        try:
            self.cursor.execute(sql, tuple(params))
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

    def quote_identifier(self, name: str) -> str:
        return "`" + name.replace("`", "``") + "`"


def _text(value):
    # information_schema columns may come back as bytes on some server versions
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return value
