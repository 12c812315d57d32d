# File: pgtozod/validators.py
"""
pgtozod - Input & Configuration Validators
===========================================
Checks run before any database work starts (table and schema identifiers,
output path) and sanity checks on the catalog data handed to the core.

Every validator returns a ``ValidationResult``; results are merged by
``validate_config``.

Usage::

    from pgtozod.validators import validate_config
    result = validate_config(config)
    if not result.is_valid:
        raise SystemExit(...)
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Set

from pgtozod.models import ALL_TABLES, ColumnMetadata, GenerationConfig
from pgtozod.templates import TYPES_FILE_NAME, TemplateGenerator
from pgtozod.utils import to_field_name

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pgtozod.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight error descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationError`` instances."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def is_valid(self) -> bool:
        return not any(e.is_error for e in self._items)

    def summary(self) -> str:
        return (
            f"Validation: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)


# ---------------------------------------------------------------------------
# Patterns & word lists
# ---------------------------------------------------------------------------

_TABLE_NAME_RE: re.Pattern[str] = re.compile(r"^[a-zA-Z0-9_-]+$")
_SCHEMA_NAME_RE: re.Pattern[str] = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_$]*$")

# Statement keywords refused as table names
_RESERVED_TABLE_NAMES: FrozenSet[str] = frozenset(
    {
        "select", "insert", "update", "delete", "drop", "create", "alter",
        "truncate", "grant", "revoke",
    }
)


# ---------------------------------------------------------------------------
# Individual validators
# ---------------------------------------------------------------------------


def validate_table_name(name: str) -> ValidationResult:
    """
    Validate the requested table name (or the ``all`` sentinel).

    Only letters, digits, ``_`` and ``-`` are accepted, and statement
    keywords such as ``select`` are refused.
    """
    result: ValidationResult = ValidationResult()
    ctx: Dict[str, Any] = {"table": name}

    if not name or not _TABLE_NAME_RE.match(name):
        result.add_error(
            "INVALID_TABLE_NAME",
            f"Table name '{name}' may only contain letters, digits, '_' and '-'.",
            ctx,
        )
        return result

    if name.lower() in _RESERVED_TABLE_NAMES:
        result.add_error(
            "TABLE_NAME_RESERVED",
            f"Table name '{name}' is a reserved SQL word.",
            ctx,
        )

    if name != ALL_TABLES:
        result.merge(validate_schema_file_name(name))

    return result


def validate_schema_file_name(table_name: str) -> ValidationResult:
    """The table's schema file may not collide with the auxiliary file."""
    result: ValidationResult = ValidationResult()
    if TemplateGenerator.schema_file_name(table_name) == TYPES_FILE_NAME:
        result.add_error(
            "TABLE_NAME_SHADOWS_TYPES",
            f"Schema file for table '{table_name}' would be overwritten by {TYPES_FILE_NAME}.",
            {"table": table_name},
        )
    return result


def validate_schema_name(name: str) -> ValidationResult:
    """The schema to enumerate tables from must be a plain identifier."""
    result: ValidationResult = ValidationResult()
    if not _SCHEMA_NAME_RE.match(name):
        result.add_error(
            "INVALID_SCHEMA_NAME",
            f"Schema name '{name}' is not a valid identifier.",
            {"schema": name},
        )
    return result


def validate_output_path(output: str) -> ValidationResult:
    """The output path may not point at an existing regular file."""
    result: ValidationResult = ValidationResult()
    path: Path = Path(output)
    if path.exists() and not path.is_dir():
        result.add_error(
            "OUTPUT_NOT_A_DIRECTORY",
            f"Output path '{output}' exists and is not a directory.",
            {"output": output},
        )
    return result


def validate_unique_column_names(
    table_name: str, columns: Sequence[ColumnMetadata]
) -> ValidationResult:
    """
    Column names must be unique within a table, and so must the field names
    they turn into (``user_id`` and ``userId`` both become ``userId``).
    """
    result: ValidationResult = ValidationResult()
    seen: Set[str] = set()
    fields: Dict[str, str] = {}
    for column in columns:
        if column.name in seen:
            result.add_error(
                "DUPLICATE_COLUMN_NAME",
                f"Column '{column.name}' appears more than once in table '{table_name}'.",
                {"table": table_name, "column": column.name},
            )
            continue
        seen.add(column.name)

        field_name: str = to_field_name(column.name)
        other: Optional[str] = fields.get(field_name)
        if other is not None:
            result.add_error(
                "DUPLICATE_FIELD_NAME",
                f"Columns '{other}' and '{column.name}' of table '{table_name}' "
                f"both map to field '{field_name}'.",
                {"table": table_name, "column": column.name, "field": field_name},
            )
        else:
            fields[field_name] = column.name
    return result


def validate_config(config: GenerationConfig) -> ValidationResult:
    """
    **Master validation entry point** for a generation run.

    Runs before any connection is opened.
    """
    result: ValidationResult = ValidationResult()
    result.merge(validate_table_name(config.table))
    result.merge(validate_schema_name(config.schema_name))
    result.merge(validate_output_path(config.output))

    if result.is_valid:
        logger.debug("Config validation passed. %s", result.summary())
    else:
        logger.error("Config validation FAILED. %s", result.summary())
    return result


__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_table_name",
    "validate_schema_file_name",
    "validate_schema_name",
    "validate_output_path",
    "validate_unique_column_names",
    "validate_config",
]

logger.debug("pgtozod.validators loaded - %d public symbols.", len(__all__))
