"""
SQL Database Migration Core

This module provides the main migrator class for orchestrating table copies
from a source database into a destination database.
"""

import logging
from typing import Any, Dict, List, Optional

from sqldb_migration.core.adapter import DestinationAdapter, SourceAdapter
from sqldb_migration.core.errors import MigrationError
from sqldb_migration.core.loader import DEFAULT_CHUNK_SIZE, BatchLoader
from sqldb_migration.core.mapper import SchemaMapper
from sqldb_migration.core.schema import MigrationPlan


logger = logging.getLogger(__name__)


class DBMigrator:
    """Main class for orchestrating database-to-database table copies."""

    def __init__(self,
                 source: SourceAdapter,
                 destination: DestinationAdapter,
                 prefix: str = "",
                 chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize the migrator with the adapters it owns for the run.

        Args:
            source: Adapter for the database rows are read from
            destination: Adapter for the database rows are written to
            prefix: Optional table-name prefix used when no exact match exists
            chunk_size: Maximum number of rows per INSERT statement
        """
        self.source = source
        self.destination = destination
        self.mapper = SchemaMapper(source, destination, prefix)
        self.loader = BatchLoader(source, destination, chunk_size)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """Disconnect both adapters."""
        try:
            self.source.disconnect()
        finally:
            self.destination.disconnect()

    def run(self, plans: List[MigrationPlan], dry_run: bool = False) -> int:
        """
        Truncate and load each planned table, strictly in order.

        Args:
            plans: Plans as produced by the schema mapper
            dry_run: When True, no destination statement is executed

        Returns:
            int: Total number of rows read across all tables

        Raises:
            MigrationError: On the first failing table; later tables are not processed
        """
        total = 0
        for plan in plans:
            label = f'Copying table "{plan.source_table}" to "{plan.destination_table}"'
            logger.info(f"{label} ...")
            self.loader.truncate(plan, dry_run)
            count = self.loader.load(plan, dry_run)
            logger.info(f"{label} ... done ({count} rows copied)")
            total += count
        return total

    def migrate(self,
                source_params: Optional[Dict[str, Any]] = None,
                destination_params: Optional[Dict[str, Any]] = None,
                dry_run: bool = False) -> int:
        """
        Perform the migration from source to destination database.

        Both adapters are disconnected when this returns or raises.

        Args:
            source_params: Connection parameters for the source adapter
            destination_params: Connection parameters for the destination adapter
            dry_run: When True, all reads and logging happen but nothing is written

        Returns:
            int: Total number of rows read from the source

        Raises:
            MigrationError: If a connection, catalog query, or load fails
        """
        if dry_run:
            logger.info("** Simulating table copy - no data gets changed! **")

        try:
            logger.info("Connecting to source")
            if not self.source.connect(**(source_params or {})):
                raise MigrationError("Failed to connect to source database. Migration aborted.")

            logger.info("Connecting to destination")
            if not self.destination.connect(**(destination_params or {})):
                raise MigrationError("Failed to connect to destination database. Migration aborted.")

            plans = self.mapper.build_plans()
            if not plans:
                logger.warning("No matching tables found in destination. Nothing to copy.")

            total = self.run(plans, dry_run)
            logger.info(f"   done ({total} rows in {len(plans)} tables)")
            return total
        finally:
            self.close()
