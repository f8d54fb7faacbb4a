"""
Basic tests for the core functionality of the sqldb_migration package.

This module tests the migrator class end to end using in-memory mock adapters.
"""

import unittest
from unittest.mock import MagicMock

from sqldb_migration.core.adapter import DestinationAdapter, SourceAdapter
from sqldb_migration.core.errors import CatalogError, LoadError, MigrationError
from sqldb_migration.core.migrator import DBMigrator
from sqldb_migration.core.schema import ColumnInfo


class MockSource(SourceAdapter):
    """A simple in-memory source for testing the migrator."""

    def __init__(self, tables=None):
        self.connected = False
        self.tables = tables or {}
        self.connection_params = None

    def connect(self, **connection_params):
        self.connected = True
        self.connection_params = connection_params
        return True

    def disconnect(self):
        self.connected = False

    def list_tables(self):
        return list(self.tables)

    def fetch_rows(self, table_name):
        return [dict(row) for row in self.tables[table_name]]


class MockDestination(DestinationAdapter):
    """A simple in-memory destination that records every statement."""

    def __init__(self, columns=None):
        self.connected = False
        self.columns = columns or {}
        self.statements = []
        self.fail_on = None

    def connect(self, **connection_params):
        self.connected = True
        self.connection_params = connection_params
        return True

    def disconnect(self):
        self.connected = False

    def list_tables(self):
        return list(self.columns)

    def list_columns(self, table_name):
        return self.columns[table_name]

    def truncate_table(self, table_name):
        self.statements.append(("truncate", table_name))

    def execute(self, sql, params=()):
        if self.fail_on and self.fail_on in sql:
            raise RuntimeError("insert failed")
        self.statements.append(("execute", sql, list(params)))

    def quote_identifier(self, name):
        return f"`{name}`"


ORDERS = [
    ColumnInfo("id", "int", False, False),
    ColumnInfo("total", "decimal", False, False),
    ColumnInfo("paid", "tinyint", True, False),
]
CUSTOMERS = [
    ColumnInfo("id", "int", False, False),
    ColumnInfo("name", "varchar", False, False),
]


class TestDBMigrator(unittest.TestCase):
    """Tests for the migrator."""

    def setUp(self):
        self.source = MockSource({
            "customers": [{"id": 1, "name": "Ada"}, {"id": 2, "name": None}],
            "orders": [{"id": 1, "total": "9.5"}],
            "sessions": [{"token": "abc"}],
        })
        self.destination = MockDestination({"app_customers": CUSTOMERS, "orders": ORDERS})
        self.migrator = DBMigrator(self.source, self.destination, prefix="app_")

    def test_migrate(self):
        """Test the basic migration flow."""
        with self.assertLogs("sqldb_migration", level="INFO") as logs:
            total = self.migrator.migrate({"database": "src.sqlite"}, {"database": "dest"})

        self.assertEqual(total, 3)
        self.assertEqual(self.source.connection_params, {"database": "src.sqlite"})
        self.assertEqual(self.destination.connection_params, {"database": "dest"})
        self.assertEqual(self.destination.statements, [
            ("truncate", "app_customers"),
            ("execute", "INSERT INTO `app_customers` (`id`,`name`) VALUES (%s, %s), (%s, %s)",
             [1, "Ada", 2, ""]),
            ("truncate", "orders"),
            ("execute", "INSERT INTO `orders` (`id`,`total`,`paid`) VALUES (%s, %s, %s)", [1, 9.5, None]),
        ])

        output = "\n".join(logs.output)
        self.assertIn('Copying table "customers" to "app_customers" ... done (2 rows copied)', output)
        self.assertIn('table "sessions" not found in destination', output)

    def test_connections_released(self):
        self.migrator.migrate()
        self.assertFalse(self.source.connected)
        self.assertFalse(self.destination.connected)

    def test_dry_run(self):
        with self.assertLogs("sqldb_migration", level="INFO") as logs:
            total = self.migrator.migrate(dry_run=True)

        self.assertEqual(total, 3)
        self.assertEqual(self.destination.statements, [])
        self.assertIn("** Simulating table copy - no data gets changed! **", logs.output[0])

    def test_fail_fast(self):
        """The first failing table stops the run; earlier tables stay loaded."""
        self.destination.fail_on = "app_customers"

        with self.assertRaises(LoadError):
            self.migrator.migrate()

        self.assertEqual(self.destination.statements, [("truncate", "app_customers")])
        self.assertFalse(self.source.connected)
        self.assertFalse(self.destination.connected)

    def test_run_stops_after_failure(self):
        self.destination.fail_on = "orders"
        self.source.tables["zzz"] = [{"id": 1}]
        self.destination.columns["zzz"] = [ColumnInfo("id", "int", False, False)]

        with self.assertRaises(LoadError):
            self.migrator.migrate()

        truncated = [s[1] for s in self.destination.statements if s[0] == "truncate"]
        self.assertEqual(truncated, ["app_customers", "orders"])

    def test_no_matching_tables(self):
        destination = MockDestination({"unrelated": CUSTOMERS})
        migrator = DBMigrator(self.source, destination)
        with self.assertLogs("sqldb_migration", level="WARNING"):
            self.assertEqual(migrator.migrate(), 0)
        self.assertEqual(destination.statements, [])

    def test_source_connect_failure(self):
        source = MagicMock(spec=SourceAdapter)
        source.connect.return_value = False
        destination = MagicMock(spec=DestinationAdapter)

        with self.assertRaises(MigrationError):
            DBMigrator(source, destination).migrate()

        destination.connect.assert_not_called()
        source.disconnect.assert_called_once()
        destination.disconnect.assert_called_once()

    def test_catalog_failure(self):
        destination = MagicMock(spec=DestinationAdapter)
        destination.connect.return_value = True
        destination.list_tables.side_effect = RuntimeError("access denied")

        with self.assertRaises(CatalogError):
            DBMigrator(self.source, destination).migrate()

        destination.truncate_table.assert_not_called()
        destination.disconnect.assert_called_once()

    def test_context_manager_closes(self):
        source = MagicMock(spec=SourceAdapter)
        destination = MagicMock(spec=DestinationAdapter)
        with DBMigrator(source, destination):
            pass
        source.disconnect.assert_called_once()
        destination.disconnect.assert_called_once()


if __name__ == "__main__":
    unittest.main()
