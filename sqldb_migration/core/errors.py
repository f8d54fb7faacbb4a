"""
Migration error types
"""


class MigrationError(Exception):
    """Base class for errors that abort a migration run."""


class CatalogError(MigrationError):
    """Listing tables or columns failed; no data has been moved."""


class LoadError(MigrationError):
    """Fetching source rows or inserting into the destination failed."""

    def __init__(self, message: str, table: str = None):
        super().__init__(message)
        self.table = table


class MappingWarning(UserWarning):
    """A source table has no counterpart in the destination and is skipped."""
