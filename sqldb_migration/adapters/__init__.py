"""
Database adapters package

This package contains source and destination adapters for different databases.
"""

from sqldb_migration.adapters.mysql import MySQLAdapter
from sqldb_migration.adapters.postgres import PostgresAdapter
from sqldb_migration.adapters.sqlite import SQLiteAdapter

# Registries of available adapters
SOURCE_ADAPTERS = {
    "sqlite": SQLiteAdapter,
}

DESTINATION_ADAPTERS = {
    "mysql": MySQLAdapter,
    "postgresql": PostgresAdapter,
}


def list_adapters():
    """Return the available adapter names, keyed by role."""
    return {
        "source": list(SOURCE_ADAPTERS.keys()),
        "destination": list(DESTINATION_ADAPTERS.keys()),
    }


def get_source_adapter(adapter_name):
    """Get a source adapter class by name.

    Args:
        adapter_name: Name of the adapter.

    Returns:
        The adapter class or None if not found.
    """
    return SOURCE_ADAPTERS.get(adapter_name.lower())


def get_destination_adapter(adapter_name):
    """Get a destination adapter class by name.

    Args:
        adapter_name: Name of the adapter.

    Returns:
        The adapter class or None if not found.
    """
    return DESTINATION_ADAPTERS.get(adapter_name.lower())
