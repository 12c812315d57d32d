"""
tests/conftest.py
Shared fixtures for the pgtozod test suite.

No database is needed: ``FakeCatalog`` implements the catalog interface
over in-memory column lists.  File output goes to pytest's ``tmp_path``.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Any, Dict, List, Optional, Set

import pytest
from sqlalchemy.exc import OperationalError

from pgtozod.enums import EnumRegistry
from pgtozod.models import ColumnMetadata, EnumRow, GenerationConfig


# ---------------------------------------------------------------------------
# Logging state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_pgtozod_logging():
    """Undo what cli._setup_logging does so caplog sees every record."""
    yield
    logging.disable(logging.NOTSET)
    root_logger = logging.getLogger("pgtozod")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True


# ---------------------------------------------------------------------------
# Column helpers
# ---------------------------------------------------------------------------


def make_column(name: str, sql_type: str, **kwargs: Any) -> ColumnMetadata:
    """Build a column the way the catalog reports it (``YES``/``NO`` flags)."""
    return ColumnMetadata(
        name=name,
        sql_type=sql_type,
        nullable=kwargs.pop("nullable", "NO"),
        raw_default=kwargs.pop("raw_default", None),
        underlying_type_name=kwargs.pop("underlying_type_name", sql_type),
        is_identity=kwargs.pop("is_identity", "NO"),
        max_length=kwargs.pop("max_length", None),
    )


# ---------------------------------------------------------------------------
# In-memory catalog
# ---------------------------------------------------------------------------


class FakeCatalog:
    """Catalog double: ``{schema: {table: [columns]}}`` plus enum rows."""

    def __init__(
        self,
        tables: Dict[str, Dict[str, List[ColumnMetadata]]],
        enum_rows: Optional[List[EnumRow]] = None,
        failing_tables: Optional[Set[str]] = None,
    ) -> None:
        self.tables = tables
        self.enum_rows = enum_rows or []
        self.failing_tables = failing_tables or set()
        self.calls: List[str] = []

    def fetch_tables(self, schema: str) -> List[str]:
        self.calls.append(f"tables:{schema}")
        return sorted(self.tables.get(schema, {}))

    def fetch_columns(self, table: str, schema: str) -> List[ColumnMetadata]:
        self.calls.append(f"columns:{schema}.{table}")
        if table in self.failing_tables:
            raise OperationalError("SELECT ...", {}, Exception("connection lost"))
        return list(self.tables.get(schema, {}).get(table, []))

    def fetch_enums(self) -> List[EnumRow]:
        self.calls.append("enums")
        return list(self.enum_rows)


# ---------------------------------------------------------------------------
# Enum fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def status_enum_rows() -> List[EnumRow]:
    return [
        EnumRow(type_name="status", label="active", sort_order=1),
        EnumRow(type_name="status", label="inactive", sort_order=2),
        EnumRow(type_name="mood", label="happy", sort_order=1),
        EnumRow(type_name="mood", label="sad", sort_order=2),
    ]


@pytest.fixture()
def enums(status_enum_rows: List[EnumRow]) -> EnumRegistry:
    return EnumRegistry.build(status_enum_rows)


@pytest.fixture()
def empty_enums() -> EnumRegistry:
    return EnumRegistry()


# ---------------------------------------------------------------------------
# Table fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def users_columns() -> List[ColumnMetadata]:
    """``users``: identity id, email, created_at default now()."""
    return [
        make_column("id", "integer", is_identity="YES", underlying_type_name="int4"),
        make_column("email", "character varying", underlying_type_name="varchar"),
        make_column(
            "created_at",
            "timestamp with time zone",
            raw_default="now()",
            underlying_type_name="timestamptz",
        ),
    ]


@pytest.fixture()
def accounts_columns() -> List[ColumnMetadata]:
    """A wider table touching every supported type."""
    return [
        make_column(
            "account_id", "bigint", is_identity="YES", underlying_type_name="int8"
        ),
        make_column(
            "country_code", "character", max_length=2, underlying_type_name="bpchar"
        ),
        make_column("bio", "text", nullable="YES"),
        make_column(
            "status",
            "USER-DEFINED",
            raw_default="'inactive'::status",
            underlying_type_name="status",
        ),
        make_column(
            "is_admin", "boolean", raw_default="false", underlying_type_name="bool"
        ),
        make_column("birth_date", "date", nullable="YES"),
        make_column("external_ref", "uuid"),
        make_column("tags", "text[]", underlying_type_name="text"),
        make_column("balance", "numeric", raw_default="'0.5'::numeric"),
    ]


@pytest.fixture()
def fake_catalog(
    users_columns: List[ColumnMetadata],
    accounts_columns: List[ColumnMetadata],
    status_enum_rows: List[EnumRow],
) -> FakeCatalog:
    return FakeCatalog(
        tables={"public": {"users": users_columns, "accounts": accounts_columns}},
        enum_rows=status_enum_rows,
    )


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config(tmp_path: pathlib.Path) -> GenerationConfig:
    """Single-table config writing under tmp_path."""
    return GenerationConfig(table="users", output=str(tmp_path / "schemas"))


@pytest.fixture()
def all_tables_config(tmp_path: pathlib.Path) -> GenerationConfig:
    return GenerationConfig(
        table="all", include_nullable=True, output=str(tmp_path / "schemas")
    )
