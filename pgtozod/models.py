# File: pgtozod/models.py
"""
pgtozod - Core Data Models
===========================
Pydantic V2 models for the raw catalog rows handed to the core and for the
configuration that drives a generation run.

    Catalog rows (ColumnMetadata, EnumRow) → Assembler → TableSchemaResult

``FieldEntry`` and ``TableSchemaResult`` are transient per-table results and
live next to the assembler as plain dataclasses.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pgtozod.models")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ALL_TABLES: str = "all"
ARRAY_SUFFIX: str = "[]"

DEFAULT_SCHEMA_NAME: str = "public"
DEFAULT_OUTPUT_DIR: str = "./schemas"

# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    frozen=False,
    extra="forbid",
)

_ROW_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
)


# ---------------------------------------------------------------------------
# Catalog rows
# ---------------------------------------------------------------------------


class ColumnMetadata(BaseModel):
    """
    One column of one table, as reported by the database catalog.

    ``sql_type`` uses the catalog's spelling (``character varying``,
    ``timestamp with time zone``); array columns carry a trailing ``[]``.
    ``underlying_type_name`` is the catalog type name used to detect enum
    membership (the element type for arrays).
    """

    model_config = _ROW_CONFIG

    name: str = Field(..., min_length=1, description="Column name.")
    sql_type: str = Field(..., min_length=1, description="SQL data type name.")
    nullable: bool = Field(default=False, description="Whether NULL is allowed.")
    raw_default: Optional[str] = Field(
        default=None, description="Default expression text, dialect syntax."
    )
    underlying_type_name: str = Field(
        default="", description="udt name used for enum detection."
    )
    is_identity: bool = Field(default=False, description="Generated identity column?")
    max_length: Optional[int] = Field(
        default=None, ge=1, description="Declared length of character types."
    )

    @field_validator("nullable", "is_identity", mode="before")
    @classmethod
    def _yes_no_to_bool(cls, v: Any) -> Any:
        # information_schema reports these as 'YES' / 'NO'
        if isinstance(v, str):
            return v.strip().upper() == "YES"
        return v

    @computed_field  # type: ignore[misc]
    @property
    def has_default(self) -> bool:
        return self.raw_default is not None

    @computed_field  # type: ignore[misc]
    @property
    def is_array(self) -> bool:
        return self.sql_type.endswith(ARRAY_SUFFIX)

    @computed_field  # type: ignore[misc]
    @property
    def element_type(self) -> str:
        """``sql_type`` without the array marker."""
        if self.is_array:
            return self.sql_type[: -len(ARRAY_SUFFIX)]
        return self.sql_type

    def as_report_row(self) -> Dict[str, str]:
        """Column values in the layout of the processed-columns table."""
        return {
            "Column Name": self.name,
            "Data Type": self.sql_type,
            "Is Nullable": "YES" if self.nullable else "NO",
            "Column Default": "" if self.raw_default is None else self.raw_default,
            "UDT Name": self.underlying_type_name,
            "Is Identity": "YES" if self.is_identity else "NO",
        }

    def __repr__(self) -> str:
        null_flag: str = " NULL" if self.nullable else " NOT NULL"
        ident_flag: str = " IDENTITY" if self.is_identity else ""
        return f"<Column {self.name} {self.sql_type}{null_flag}{ident_flag}>"


class EnumRow(BaseModel):
    """One (type, label, sort order) row of the enum catalog."""

    model_config = _ROW_CONFIG

    type_name: str = Field(..., min_length=1, description="Enum type name.")
    label: str = Field(..., min_length=1, description="Enum label.")
    sort_order: float = Field(default=0.0, description="Declaration sort order.")


# ---------------------------------------------------------------------------
# Connection settings
# ---------------------------------------------------------------------------


class ConnectionSettings(BaseModel):
    """
    PostgreSQL connection details.

    Serialised with the ``DB_*`` keys used by the config file.
    """

    model_config = _SHARED_CONFIG

    user: str = Field(..., min_length=1, alias="DB_USER")
    host: str = Field(..., min_length=1, alias="DB_HOST")
    database: str = Field(..., min_length=1, alias="DB_NAME")
    password: str = Field(default="", alias="DB_PASSWORD")
    port: int = Field(default=5432, ge=1, le=65535, alias="DB_PORT")

    def to_file_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def __repr__(self) -> str:
        return f"<ConnectionSettings {self.user}@{self.host}:{self.port}/{self.database}>"


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Settings for one generation run.

    Passed explicitly to the assembler and the generator; nothing reads
    command-line options as globals.
    """

    model_config = _SHARED_CONFIG

    table: str = Field(
        ...,
        min_length=1,
        description=f"Table name, or '{ALL_TABLES}' for every table in the schema.",
    )
    exclude_defaults: bool = Field(
        default=False, description="Skip columns that have a default value."
    )
    include_nullable: bool = Field(
        default=False, description="Include nullable columns (as optional fields)."
    )
    schema_name: str = Field(
        default=DEFAULT_SCHEMA_NAME,
        min_length=1,
        description="Database schema to read tables from.",
    )
    output: str = Field(
        default=DEFAULT_OUTPUT_DIR, min_length=1, description="Output directory."
    )
    require_positive_numbers: bool = Field(
        default=True,
        description="Numeric fields must be greater than zero.",
    )
    dry_run: bool = Field(
        default=False, description="Render files without writing them."
    )

    @computed_field  # type: ignore[misc]
    @property
    def all_tables(self) -> bool:
        return self.table == ALL_TABLES


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ALL_TABLES",
    "ARRAY_SUFFIX",
    "DEFAULT_SCHEMA_NAME",
    "DEFAULT_OUTPUT_DIR",
    "ColumnMetadata",
    "EnumRow",
    "ConnectionSettings",
    "GenerationConfig",
]
