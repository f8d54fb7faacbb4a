"""
Schema mapping

Matches source tables to destination tables and turns destination column
metadata into the migration plans consumed by the batch loader.
"""

import logging
from typing import List, Optional

from sqldb_migration.core.adapter import DestinationAdapter, SourceAdapter
from sqldb_migration.core.errors import CatalogError, MappingWarning
from sqldb_migration.core.schema import ColumnDescriptor, MigrationPlan


logger = logging.getLogger(__name__)


class SchemaMapper:
    """Builds the ordered list of table migration plans from live catalogs."""

    def __init__(self, source: SourceAdapter, destination: DestinationAdapter, prefix: str = ""):
        self.source = source
        self.destination = destination
        self.prefix = prefix or ""
        self.skipped_tables: List[str] = []

    def resolve_table(self, table_name: str, destination_tables) -> Optional[str]:
        """Return the destination table for ``table_name``, or None if there is none.

        An exact match wins. Otherwise ``prefix + table_name`` is tried, but only
        when the source name does not already carry the prefix.
        """
        if table_name in destination_tables:
            return table_name
        if self.prefix and not table_name.startswith(self.prefix):
            prefixed = self.prefix + table_name
            if prefixed in destination_tables:
                return prefixed
        return None

    def build_plans(self) -> List[MigrationPlan]:
        """Introspect both catalogs and return one plan per matched table.

        Returns:
            List[MigrationPlan]: Plans in source listing order.

        Raises:
            CatalogError: If a table or column listing fails.
        """
        try:
            source_tables = list(self.source.list_tables())
        except Exception as e:
            raise CatalogError(f"Failed to list source tables: {e}") from e

        try:
            destination_tables = set(self.destination.list_tables())
        except Exception as e:
            raise CatalogError(f"Failed to list destination tables: {e}") from e

        logger.debug(f"Source tables: {source_tables}")
        logger.debug(f"Destination tables: {sorted(destination_tables)}")

        self.skipped_tables = []
        pairs = []
        for table_name in source_tables:
            destination_name = self.resolve_table(table_name, destination_tables)
            if destination_name is None:
                warning = MappingWarning(f'table "{table_name}" not found in destination')
                logger.warning(str(warning))
                self.skipped_tables.append(table_name)
                continue
            pairs.append((table_name, destination_name))

        plans = []
        for source_name, destination_name in pairs:
            try:
                columns = self.destination.list_columns(destination_name)
            except Exception as e:
                raise CatalogError(f'Failed to list columns of "{destination_name}": {e}') from e

            fields = tuple(ColumnDescriptor.from_info(info) for info in columns)
            plans.append(MigrationPlan(source_name, destination_name, fields))
            logger.debug(f'Mapped "{source_name}" -> "{destination_name}" ({len(fields)} columns)')

        return plans
