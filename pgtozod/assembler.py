# File: pgtozod/assembler.py
"""
pgtozod - Column Schema Assembler
==================================
Turns one table's column metadata into the ordered list of schema fields.

For each column, independently of the others:

    1. filter   - exclude_defaults / include_nullable policies
    2. map      - Type Mapper (array aware)
    3. default  - Default-Value Parser → ``.default(...)``
    4. optional - nullable columns → ``.optional()``

The identity column (if any) is pinned first and the remaining fields are
sorted by field name.  Problems with a single column never abort the table:
they are logged and returned as warnings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from pgtozod.defaults import UnparseableDefaultError, parse_default
from pgtozod.enums import EnumRegistry
from pgtozod.expressions import (
    ArraySchema,
    EnumSchema,
    OptionalWrapper,
    SchemaNode,
    UnknownSchema,
    ZodRenderer,
    with_default,
)
from pgtozod.models import ColumnMetadata, GenerationConfig
from pgtozod.type_mapper import map_type, unsupported_type_message
from pgtozod.utils import to_field_name

logger: logging.Logger = logging.getLogger("pgtozod.assembler")

_RENDERER: ZodRenderer = ZodRenderer()


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FieldEntry:
    """One generated field: camelCase name plus its schema tree."""

    field_name: str
    schema: SchemaNode
    column: ColumnMetadata

    @property
    def expression(self) -> str:
        """Zod source text of the field's schema."""
        return _RENDERER.render(self.schema)


@dataclass(frozen=True, slots=True)
class TableSchemaResult:
    """Ordered fields of one table plus diagnostics."""

    table_name: str
    entries: Tuple[FieldEntry, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def processed_count(self) -> int:
        return len(self.entries)

    @property
    def field_names(self) -> List[str]:
        return [entry.field_name for entry in self.entries]

    @property
    def columns(self) -> List[ColumnMetadata]:
        return [entry.column for entry in self.entries]


@dataclass(slots=True)
class _ColumnOutcome:
    entry: Optional[FieldEntry] = None
    warnings: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Per-column assembly
# ---------------------------------------------------------------------------


def is_included(column: ColumnMetadata, config: GenerationConfig) -> bool:
    """Apply the exclude-defaults and include-nullable policies."""
    if config.exclude_defaults and column.has_default:
        return False
    return not column.nullable or config.include_nullable


def build_field(
    column: ColumnMetadata,
    enums: EnumRegistry,
    config: GenerationConfig,
) -> _ColumnOutcome:
    """Schema tree for one column, or an empty outcome if it is filtered out."""
    outcome = _ColumnOutcome()
    if not is_included(column, config):
        logger.debug("Skipping column '%s'.", column.name)
        return outcome

    node: SchemaNode = map_type(
        column.element_type,
        enums,
        column.name,
        column.underlying_type_name,
        column.max_length,
        require_positive_numbers=config.require_positive_numbers,
    )
    if isinstance(node, UnknownSchema):
        outcome.warnings.append(unsupported_type_message(column.sql_type, column.name))
    if column.is_array:
        node = ArraySchema(item=node)

    if column.raw_default is not None:
        try:
            value = parse_default(column.raw_default, column.sql_type, enums)
        except UnparseableDefaultError as exc:
            message: str = f"Column '{column.name}': {exc}"
            logger.warning("%s", message)
            outcome.warnings.append(message)
            if isinstance(node, EnumSchema):
                # The first label only stands in for a missing default.
                node = EnumSchema(labels=node.labels)
        else:
            node = with_default(node, value)

    if column.nullable:
        node = OptionalWrapper(inner=node)

    outcome.entry = FieldEntry(
        field_name=to_field_name(column.name), schema=node, column=column
    )
    return outcome


# ---------------------------------------------------------------------------
# Table assembly
# ---------------------------------------------------------------------------


def assemble_table_schema(
    table_name: str,
    columns: Sequence[ColumnMetadata],
    enums: EnumRegistry,
    config: GenerationConfig,
) -> TableSchemaResult:
    """
    Build the ordered field list of *table_name*.

    If several included columns are identity columns the last one takes the
    pinned slot and the earlier ones are dropped, as the tool always did.
    """
    identity: Optional[FieldEntry] = None
    others: List[FieldEntry] = []
    warnings: List[str] = []

    for column in columns:
        outcome: _ColumnOutcome = build_field(column, enums, config)
        warnings.extend(outcome.warnings)
        if outcome.entry is None:
            continue

        if column.is_identity:
            if identity is not None:
                logger.warning(
                    "Table '%s' has more than one identity column; "
                    "'%s' replaces '%s'.",
                    table_name,
                    column.name,
                    identity.column.name,
                )
            identity = outcome.entry
        else:
            others.append(outcome.entry)

    others.sort(key=lambda entry: entry.field_name)
    entries: List[FieldEntry] = ([identity] if identity is not None else []) + others

    logger.info("Processed %d columns for table '%s'.", len(entries), table_name)
    return TableSchemaResult(
        table_name=table_name,
        entries=tuple(entries),
        warnings=tuple(warnings),
    )


__all__: List[str] = [
    "FieldEntry",
    "TableSchemaResult",
    "is_included",
    "build_field",
    "assemble_table_schema",
]
