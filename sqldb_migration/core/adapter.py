"""
SQL DB Migration Core Interfaces

This module provides the abstract adapters that the migration core talks to.
Source adapters only need to enumerate tables and read rows; destination
adapters expose their catalog and accept truncates and bulk inserts.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from sqldb_migration.core.schema import ColumnInfo


class SourceAdapter(ABC):
    """Abstract base class for databases that rows are copied from."""

    @abstractmethod
    def connect(self, **connection_params) -> bool:
        """Connect to the database using provided parameters.

        Args:
            **connection_params: Connection parameters specific to the database.

        Returns:
            bool: True if connection was successful, False otherwise.
        """
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close the database connection."""
        pass

    @abstractmethod
    def list_tables(self) -> List[str]:
        """Return the source table names in catalog listing order."""
        pass

    @abstractmethod
    def fetch_rows(self, table_name: str) -> List[Dict[str, Any]]:
        """Read every row of a table.

        Args:
            table_name: Table to read.

        Returns:
            List[Dict[str, Any]]: One mapping of column name to value per row.
        """
        pass


class DestinationAdapter(ABC):
    """Abstract base class for databases that rows are copied into."""

    placeholder = "%s"

    @abstractmethod
    def connect(self, **connection_params) -> bool:
        """Connect to the database using provided parameters.

        Args:
            **connection_params: Connection parameters specific to the database.

        Returns:
            bool: True if connection was successful, False otherwise.
        """
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close the database connection."""
        pass

    @abstractmethod
    def list_tables(self) -> List[str]:
        """Return the table names of the connected schema."""
        pass

    @abstractmethod
    def list_columns(self, table_name: str) -> List[ColumnInfo]:
        """Return column metadata for a table, in catalog order."""
        pass

    @abstractmethod
    def truncate_table(self, table_name: str) -> None:
        """Empty a table with referential checks suspended for the duration."""
        pass

    @abstractmethod
    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Execute a statement with positional parameters and commit it."""
        pass

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Quote a table or column name for use in a statement."""
        pass

    def quote_table(self, name: str) -> str:
        """Quote a table name, qualifying it with a schema where the adapter needs one."""
        return self.quote_identifier(name)
