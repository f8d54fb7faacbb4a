"""
Command-line interface package for SQL database migration

This package provides the command-line tools for the sqldb_migration package.
"""

from sqldb_migration.cli.migrate import main, run_migration
from sqldb_migration.cli.uri import ConnectionParams, parse_uri

__all__ = ['main', 'run_migration', 'ConnectionParams', 'parse_uri']
