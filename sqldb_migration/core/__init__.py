"""
Core functionality for sqldb_migration

This module provides the core classes and functions for the table migration framework.
"""

from sqldb_migration.core.adapter import SourceAdapter, DestinationAdapter
from sqldb_migration.core.coercer import coerce
from sqldb_migration.core.errors import MigrationError, CatalogError, LoadError, MappingWarning
from sqldb_migration.core.loader import BatchLoader
from sqldb_migration.core.mapper import SchemaMapper
from sqldb_migration.core.migrator import DBMigrator
from sqldb_migration.core.schema import ABSENT, ColumnDescriptor, ColumnInfo, ColumnType, MigrationPlan

__all__ = [
    'SourceAdapter', 'DestinationAdapter', 'DBMigrator', 'SchemaMapper', 'BatchLoader', 'coerce',
    'MigrationError', 'CatalogError', 'LoadError', 'MappingWarning',
    'ABSENT', 'ColumnDescriptor', 'ColumnInfo', 'ColumnType', 'MigrationPlan',
]
