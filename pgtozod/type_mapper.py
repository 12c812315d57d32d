# File: pgtozod/type_mapper.py
"""
pgtozod - Type Mapper
======================
Maps a column's SQL type to the base schema node, before any default or
optional wrapper is applied.

Resolution goes through ``TYPE_RULES``, an ordered list of
(name, predicate, handler) entries consulted once per column; the first
matching predicate wins.  Keeping the order in one table makes it easy to
audit and to test rule by rule.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from pgtozod.defaults import (
    BOOLEAN_TYPE,
    DATE_TYPE,
    NUMERIC_TYPES,
    TIMESTAMPTZ_TYPE,
)
from pgtozod.enums import EnumRegistry
from pgtozod.expressions import (
    BooleanSchema,
    CustomSchema,
    EnumSchema,
    NumberSchema,
    SchemaNode,
    StringSchema,
    UnknownSchema,
)
from pgtozod.utils import to_readable_label

logger: logging.Logger = logging.getLogger("pgtozod.type_mapper")

# Names of the constructs exported by the generated types.ts
UTC_DATE: str = "zodUtcDate"
DATE_ONLY: str = "zodDateOnly"
UUID_STRING: str = "zodUuid"

FIXED_CHARACTER_TYPE: str = "character"
VARYING_CHARACTER_TYPE: str = "character varying"
TEXT_TYPE: str = "text"
UUID_TYPE: str = "uuid"


@dataclass(frozen=True, slots=True)
class TypeRequest:
    """Everything a mapping rule may look at."""

    sql_type: str
    enums: EnumRegistry
    column_name: str
    underlying_type_name: str
    max_length: Optional[int] = None
    require_positive_numbers: bool = True

    @property
    def label(self) -> str:
        return to_readable_label(self.column_name)


Predicate = Callable[[TypeRequest], bool]
Handler = Callable[[TypeRequest], SchemaNode]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _enum_schema(req: TypeRequest) -> SchemaNode:
    labels: Tuple[str, ...] = req.enums.labels_of(req.underlying_type_name)
    return EnumSchema(labels=labels, default=labels[0])


def _fixed_length_string(req: TypeRequest) -> SchemaNode:
    return StringSchema(
        exact_length=req.max_length,
        message=f"{req.label} must be exactly {req.max_length} characters",
    )


def _required_string(req: TypeRequest) -> SchemaNode:
    return StringSchema(min_length=1, message=f"{req.label} is required")


def _number(req: TypeRequest) -> SchemaNode:
    # gt(0) also rejects zero and negatives; see require_positive_numbers.
    if not req.require_positive_numbers:
        return NumberSchema()
    return NumberSchema(gt=0, message=f"{req.label} is required")


def _is_character_varying(req: TypeRequest) -> bool:
    return (
        req.sql_type.startswith(VARYING_CHARACTER_TYPE)
        or req.sql_type in (TEXT_TYPE, FIXED_CHARACTER_TYPE)
    )


TYPE_RULES: Tuple[Tuple[str, Predicate, Handler], ...] = (
    (
        "enum",
        lambda req: req.enums.has(req.underlying_type_name),
        _enum_schema,
    ),
    (
        "fixed_length_character",
        lambda req: req.sql_type == FIXED_CHARACTER_TYPE and req.max_length is not None,
        _fixed_length_string,
    ),
    (
        "character",
        _is_character_varying,
        _required_string,
    ),
    (
        "numeric",
        lambda req: req.sql_type in NUMERIC_TYPES,
        _number,
    ),
    (
        "boolean",
        lambda req: req.sql_type == BOOLEAN_TYPE,
        lambda req: BooleanSchema(),
    ),
    (
        "timestamp_with_time_zone",
        lambda req: req.sql_type == TIMESTAMPTZ_TYPE,
        lambda req: CustomSchema(UTC_DATE),
    ),
    (
        "date",
        lambda req: req.sql_type == DATE_TYPE,
        lambda req: CustomSchema(DATE_ONLY),
    ),
    (
        "uuid",
        lambda req: req.sql_type == UUID_TYPE,
        lambda req: CustomSchema(UUID_STRING, args=(req.label,)),
    ),
)


def unsupported_type_message(sql_type: str, column_name: str) -> str:
    return f"Unsupported data type: {sql_type} for column: {column_name}"


def resolve_rule(req: TypeRequest) -> Optional[str]:
    """Name of the first rule matching *req*, or ``None``."""
    for name, predicate, _handler in TYPE_RULES:
        if predicate(req):
            return name
    return None


def map_type(
    sql_type: str,
    enums: EnumRegistry,
    column_name: str,
    underlying_type_name: str,
    max_length: Optional[int] = None,
    *,
    require_positive_numbers: bool = True,
) -> SchemaNode:
    """
    Base schema node for one column type.

    *sql_type* must not carry an array marker; the assembler strips it and
    wraps the result.  Unsupported types map to ``UnknownSchema`` and log a
    warning.
    """
    req = TypeRequest(
        sql_type=sql_type,
        enums=enums,
        column_name=column_name,
        underlying_type_name=underlying_type_name,
        max_length=max_length,
        require_positive_numbers=require_positive_numbers,
    )
    for name, predicate, handler in TYPE_RULES:
        if predicate(req):
            logger.debug("Column '%s' (%s) matched rule '%s'.", column_name, sql_type, name)
            return handler(req)

    logger.warning("%s", unsupported_type_message(sql_type, column_name))
    return UnknownSchema()


__all__: List[str] = [
    "UTC_DATE",
    "DATE_ONLY",
    "UUID_STRING",
    "TypeRequest",
    "TYPE_RULES",
    "resolve_rule",
    "unsupported_type_message",
    "map_type",
]
