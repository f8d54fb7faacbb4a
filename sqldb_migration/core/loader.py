"""
Batch loading

Copies one table at a time: the destination table is truncated, then the
source rows are read in full and written back as multi-row INSERT statements
of at most ``chunk_size`` rows each.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from sqldb_migration.core.adapter import DestinationAdapter, SourceAdapter
from sqldb_migration.core.coercer import coerce
from sqldb_migration.core.errors import LoadError
from sqldb_migration.core.schema import ABSENT, ColumnDescriptor, MigrationPlan


logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 100


def chunked(rows: Sequence[Dict[str, Any]], size: int) -> List[Sequence[Dict[str, Any]]]:
    """Split rows into consecutive chunks of at most ``size`` rows."""
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [rows[i:i + size] for i in range(0, len(rows), size)]


def select_fields(plan: MigrationPlan, first_row: Dict[str, Any]) -> List[ColumnDescriptor]:
    """Columns to insert for a chunk: those present in its first row plus required ones.

    Only the first row is consulted, so chunks of heterogeneous rows may target
    different column lists.
    """
    return [field for field in plan.fields if field.name in first_row or field.required]


class BatchLoader:
    """Truncates and bulk-loads destination tables for migration plans."""

    def __init__(self, source: SourceAdapter, destination: DestinationAdapter,
                 chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        self.source = source
        self.destination = destination
        self.chunk_size = chunk_size

    def truncate(self, plan: MigrationPlan, dry_run: bool = False) -> None:
        """Empty the destination table of ``plan`` unless this is a dry run."""
        if dry_run:
            return
        try:
            self.destination.truncate_table(plan.destination_table)
        except Exception as e:
            raise LoadError(f'Failed to truncate "{plan.destination_table}": {e}',
                            table=plan.destination_table) from e

    def build_insert(self, table_name: str, fields: Sequence[ColumnDescriptor],
                     rows: Sequence[Dict[str, Any]]) -> Tuple[str, List[Any]]:
        """Build one multi-row INSERT and its positional parameters.

        Args:
            table_name: Destination table.
            fields: Columns to populate, in order.
            rows: Source rows; values are coerced per column.

        Returns:
            Tuple[str, List[Any]]: The statement and its parameters in row-major order.
        """
        quote = self.destination.quote_identifier
        placeholder = self.destination.placeholder

        columns = ",".join(quote(field.name) for field in fields)
        row_sql = "(" + ", ".join([placeholder] * len(fields)) + ")"
        sql = (f"INSERT INTO {self.destination.quote_table(table_name)} ({columns}) VALUES "
               + ", ".join([row_sql] * len(rows)))

        params = []
        for row in rows:
            for field in fields:
                params.append(coerce(field, row.get(field.name, ABSENT)))
        return sql, params

    def load(self, plan: MigrationPlan, dry_run: bool = False) -> int:
        """Copy every row of the plan's source table into its destination table.

        Args:
            plan: The table pair and destination columns.
            dry_run: When True, statements are built but not executed.

        Returns:
            int: Number of rows read from the source.

        Raises:
            LoadError: If reading or inserting fails.
        """
        try:
            rows = list(self.source.fetch_rows(plan.source_table))
        except Exception as e:
            raise LoadError(f'Failed to read rows of "{plan.source_table}": {e}',
                            table=plan.source_table) from e

        if not rows:
            return 0

        for index, chunk in enumerate(chunked(rows, self.chunk_size), start=1):
            fields = select_fields(plan, chunk[0])
            sql, params = self.build_insert(plan.destination_table, fields, chunk)
            logger.debug(f'Chunk {index} of "{plan.destination_table}": {len(chunk)} rows, '
                         f'{len(fields)} columns')

            if dry_run:
                continue
            try:
                self.destination.execute(sql, params)
            except Exception as e:
                raise LoadError(f'Failed to insert chunk {index} into "{plan.destination_table}": {e}',
                                table=plan.destination_table) from e

        return len(rows)
