# File: pgtozod/database.py
"""
pgtozod - PostgreSQL Catalog Access
====================================
SQLAlchemy engine factory and the three catalog queries the generator needs:

    fetch_tables(schema)          → table names of one schema
    fetch_columns(table, schema)  → ColumnMetadata rows
    fetch_enums()                 → EnumRow rows, ordered by type and sort order

All queries use bound parameters.  Array columns are reported with their
element type plus ``[]`` (``text[]``, ``USER-DEFINED[]``) and the element's
udt name, so enum arrays resolve against the enum registry.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Protocol

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.engine import URL, Connection
from sqlalchemy.exc import OperationalError

from pgtozod.models import ARRAY_SUFFIX, ColumnMetadata, ConnectionSettings, EnumRow

logger: logging.Logger = logging.getLogger("pgtozod.database")

DRIVER_NAME: str = "postgresql+psycopg2"


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

TABLES_QUERY = text(
    """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = :schema
    ORDER BY table_name
    """
)

COLUMNS_QUERY = text(
    """
    SELECT
        c.column_name,
        CASE WHEN c.data_type = 'ARRAY' THEN e.data_type || '[]'
             ELSE c.data_type END AS data_type,
        c.is_nullable,
        c.column_default,
        CASE WHEN c.data_type = 'ARRAY' THEN e.udt_name
             ELSE c.udt_name END AS udt_name,
        c.is_identity,
        c.character_maximum_length
    FROM information_schema.columns c
    LEFT JOIN information_schema.element_types e
        ON (c.table_catalog, c.table_schema, c.table_name, 'TABLE', c.dtd_identifier)
         = (e.object_catalog, e.object_schema, e.object_name, e.object_type,
            e.collection_type_identifier)
    WHERE c.table_name = :table
      AND c.table_schema = :schema
    ORDER BY c.ordinal_position
    """
)

ENUMS_QUERY = text(
    """
    SELECT t.typname AS enum_name, e.enumlabel AS enum_value,
           e.enumsortorder AS sort_order
    FROM pg_type t
    JOIN pg_enum e ON t.oid = e.enumtypid
    ORDER BY t.typname, e.enumsortorder
    """
)


# ---------------------------------------------------------------------------
# Row conversion
# ---------------------------------------------------------------------------


def column_from_row(row: Mapping[str, Any]) -> ColumnMetadata:
    """Build ``ColumnMetadata`` from one row of ``COLUMNS_QUERY``."""
    data_type: str = row["data_type"] or ""
    if data_type == "ARRAY":
        # element type could not be resolved
        data_type = f"unknown{ARRAY_SUFFIX}"
    return ColumnMetadata(
        name=row["column_name"],
        sql_type=data_type,
        nullable=row["is_nullable"],
        raw_default=row["column_default"],
        underlying_type_name=row["udt_name"] or "",
        is_identity=row["is_identity"] or "NO",
        max_length=row["character_maximum_length"],
    )


def enum_from_row(row: Mapping[str, Any]) -> EnumRow:
    return EnumRow(
        type_name=row["enum_name"],
        label=row["enum_value"],
        sort_order=row["sort_order"],
    )


# ---------------------------------------------------------------------------
# Catalog interface
# ---------------------------------------------------------------------------


class Catalog(Protocol):
    """What the generator needs from a metadata source."""

    def fetch_tables(self, schema: str) -> List[str]: ...

    def fetch_columns(self, table: str, schema: str) -> List[ColumnMetadata]: ...

    def fetch_enums(self) -> List[EnumRow]: ...


class PostgresCatalog:
    """
    Catalog queries over an open SQLAlchemy connection.

    The caller owns the connection and closes it.
    """

    def __init__(self, connection: Connection) -> None:
        self._connection: Connection = connection

    def fetch_tables(self, schema: str) -> List[str]:
        rows = self._connection.execute(TABLES_QUERY, {"schema": schema})
        tables: List[str] = [row.table_name for row in rows]
        logger.info("Discovered %d tables in schema '%s'.", len(tables), schema)
        return tables

    def fetch_columns(self, table: str, schema: str) -> List[ColumnMetadata]:
        rows = self._connection.execute(
            COLUMNS_QUERY, {"table": table, "schema": schema}
        ).mappings()
        columns: List[ColumnMetadata] = [column_from_row(row) for row in rows]
        logger.debug("Fetched %d columns for %s.%s.", len(columns), schema, table)
        return columns

    def fetch_enums(self) -> List[EnumRow]:
        rows = self._connection.execute(ENUMS_QUERY).mappings()
        return [enum_from_row(row) for row in rows]


# ---------------------------------------------------------------------------
# Engine factory
# ---------------------------------------------------------------------------


def build_url(settings: ConnectionSettings) -> URL:
    return URL.create(
        DRIVER_NAME,
        username=settings.user,
        password=settings.password or None,
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )


def create_catalog_engine(settings: ConnectionSettings) -> Engine:
    """Build and test a SQLAlchemy engine for *settings*."""
    engine: Engine = create_engine(build_url(settings), pool_pre_ping=True)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except OperationalError as e:
        engine.dispose()
        raise ValueError(f"Could not connect to database: {e}") from e
    logger.info("Connected to %r.", settings)
    return engine


__all__: List[str] = [
    "Catalog",
    "PostgresCatalog",
    "column_from_row",
    "enum_from_row",
    "build_url",
    "create_catalog_engine",
]
