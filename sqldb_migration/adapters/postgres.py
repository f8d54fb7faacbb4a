"""
PostgreSQL destination adapter

This module provides the adapter for writing into a PostgreSQL schema using psycopg2.
"""

import logging
from typing import Any, List, Sequence

import psycopg2

from sqldb_migration.core.adapter import DestinationAdapter
from sqldb_migration.core.schema import ColumnInfo


logger = logging.getLogger(__name__)


class PostgresAdapter(DestinationAdapter):
    """Destination adapter for PostgreSQL."""

    placeholder = "%s"

    def __init__(self):
        """Initialize a new PostgreSQL adapter."""
        self.conn = None
        self.cursor = None
        self.schema = "public"

    def connect(self, **connection_params) -> bool:
        """Connect to the PostgreSQL database using psycopg2.

        Args:
            **connection_params: Connection parameters for PostgreSQL.
                - host: Database host address
                - database: Database name
                - user: Username
                - password: Password
                - port: Port number (default: 5432)
                - schema: Schema holding the destination tables (default: "public")

        Returns:
            bool: True if connection was successful, False otherwise.
        """
        try:
            self.schema = connection_params.get("schema") or "public"
            self.conn = psycopg2.connect(
                host=connection_params.get("host", "localhost"),
                dbname=connection_params.get("database"),
                user=connection_params.get("user"),
                password=connection_params.get("password"),
                port=connection_params.get("port", 5432)
            )
            self.cursor = self.conn.cursor()
            logger.debug(f"Connected to PostgreSQL: {connection_params.get('host')}:{connection_params.get('port')}")
            return True
        except Exception as e:
            logger.error(f"Error connecting to PostgreSQL: {e}")
            self.conn = None
            self.cursor = None
            return False

    def disconnect(self) -> None:
        """Close the PostgreSQL connection."""
        if self.cursor:
            self.cursor.close()
        if self.conn:
            self.conn.close()
        self.cursor = None
        self.conn = None
        logger.debug("Disconnected from PostgreSQL")

    def _require_connection(self):
        if not self.conn or not self.cursor:
            raise ConnectionError("Not connected to PostgreSQL database")

    def list_tables(self) -> List[str]:
        """Return the base tables of the configured schema."""
        self._require_connection()
        self.cursor.execute(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = %s AND table_type = 'BASE TABLE'",
            (self.schema,),
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
            (table_name, self.schema),
        )
        return [
            ColumnInfo(
                name=name,
                data_type=data_type,
                nullable=is_nullable == "YES",
                has_default=default is not None,
            )
            for name, data_type, default, is_nullable in self.cursor.fetchall()
        ]

    def truncate_table(self, table_name: str) -> None:
        """Empty a table with triggers, including FK enforcement, suspended.

        TRUNCATE refuses tables referenced by foreign keys regardless of the
        replication role, so the rows are deleted instead.
        """
        self._require_connection()
        try:
            self.cursor.execute("SET session_replication_role = replica")
            self.cursor.execute(f"DELETE FROM {self.quote_table(table_name)}")
            self.cursor.execute("SET session_replication_role = DEFAULT")
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        logger.debug(f"Truncated PostgreSQL table {table_name}")

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
        return '"' + name.replace('"', '""') + '"'

    def quote_table(self, name: str) -> str:
        if self.schema and self.schema != "public":
            return self.quote_identifier(self.schema) + "." + self.quote_identifier(name)
        return self.quote_identifier(name)
