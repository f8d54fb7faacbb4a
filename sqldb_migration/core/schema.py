"""
Migration data model

This module defines the column descriptors and per-table migration plans that
flow from the schema mapper to the batch loader.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Optional, Tuple


class _Absent:
    """Marker for a column that is missing from a source row (distinct from NULL)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = _Absent()


class ColumnType(Enum):
    """Coercion kinds for destination columns."""

    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    NATIVE_BOOLEAN = "native_boolean"
    TIMESTAMP = "timestamp"
    TEXT = "text"
    OTHER = "other"

    @classmethod
    def from_sql(cls, data_type: Optional[str]) -> "ColumnType":
        """Map a catalog ``data_type`` string to a coercion kind.

        Args:
            data_type: Raw type name as reported by information_schema.

        Returns:
            ColumnType: The matching kind, or OTHER for unknown types.
        """
        if not data_type:
            return cls.OTHER
        return _SQL_TYPES.get(data_type.strip().lower(), cls.OTHER)


_SQL_TYPES = {
    "int": ColumnType.INTEGER,
    "integer": ColumnType.INTEGER,
    "smallint": ColumnType.INTEGER,
    "mediumint": ColumnType.INTEGER,
    "bigint": ColumnType.INTEGER,
    "float": ColumnType.FLOAT,
    "double": ColumnType.FLOAT,
    "real": ColumnType.FLOAT,
    "double precision": ColumnType.FLOAT,
    "decimal": ColumnType.DECIMAL,
    "numeric": ColumnType.DECIMAL,
    # MySQL reports BOOLEAN columns as tinyint; native booleans need a real bool
    "tinyint": ColumnType.BOOLEAN,
    "boolean": ColumnType.NATIVE_BOOLEAN,
    "bool": ColumnType.NATIVE_BOOLEAN,
    "timestamp": ColumnType.TIMESTAMP,
    "timestamp without time zone": ColumnType.TIMESTAMP,
    "timestamp with time zone": ColumnType.TIMESTAMP,
    "varchar": ColumnType.TEXT,
    "char": ColumnType.TEXT,
    "character": ColumnType.TEXT,
    "character varying": ColumnType.TEXT,
    "text": ColumnType.TEXT,
    "tinytext": ColumnType.TEXT,
    "mediumtext": ColumnType.TEXT,
    "longtext": ColumnType.TEXT,
}


def get_default(column_type: ColumnType, nullable: bool) -> Any:
    """Return the value used when a source value is absent or an illegal NULL."""
    if nullable:
        return None
    if column_type is ColumnType.TEXT:
        return ""
    if column_type is ColumnType.NATIVE_BOOLEAN:
        return False
    return 0


class ColumnInfo(NamedTuple):
    """Raw column metadata as reported by a destination catalog."""

    name: str
    data_type: str
    nullable: bool
    has_default: bool


@dataclass(frozen=True)
class ColumnDescriptor:
    """A destination column together with the rules used to coerce values into it."""

    name: str
    type: ColumnType
    nullable: bool
    required: bool
    default: Any
    data_type: str = ""

    @classmethod
    def from_info(cls, info: ColumnInfo) -> "ColumnDescriptor":
        column_type = ColumnType.from_sql(info.data_type)
        return cls(
            name=info.name,
            type=column_type,
            nullable=info.nullable,
            required=not info.has_default,
            default=get_default(column_type, info.nullable),
            data_type=info.data_type,
        )


@dataclass(frozen=True)
class MigrationPlan:
    """One matched source/destination table pair."""

    source_table: str
    destination_table: str
    fields: Tuple[ColumnDescriptor, ...]

    @property
    def field_names(self):
        return [field.name for field in self.fields]
