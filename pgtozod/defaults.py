# File: pgtozod/defaults.py
"""
pgtozod - Default-Value Parser
===============================
Translates PostgreSQL column default expressions (as stored in
``information_schema.columns.column_default``) into literal nodes.

This is a best-effort parser over the handful of forms PostgreSQL actually
produces for the supported types, not an expression evaluator:

    '5'::integer                              → NumberLiteral(5)
    'hello'::character varying                → StringLiteral('hello')
    now()                                     → CurrentDateLiteral()
    '2024-01-31'::date                        → DateLiteral(date(2024, 1, 31))
    'active'::status   (registered enum)      → StringLiteral('active')

Anything else raises ``UnparseableDefaultError``; callers treat that as
"no default" and carry on.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime
from typing import Callable, Dict, FrozenSet, List, Union

from pgtozod.enums import EnumRegistry
from pgtozod.expressions import (
    BooleanLiteral,
    CurrentDateLiteral,
    DateLiteral,
    LiteralNode,
    NumberLiteral,
    StringLiteral,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pgtozod.defaults")


class UnparseableDefaultError(ValueError):
    """The default expression matches no recognised form for its type."""

    def __init__(self, raw_default: str, sql_type: str, reason: str) -> None:
        self.raw_default: str = raw_default
        self.sql_type: str = sql_type
        super().__init__(f"{reason}: {raw_default}")


# ---------------------------------------------------------------------------
# Type families
# ---------------------------------------------------------------------------

NUMERIC_TYPES: FrozenSet[str] = frozenset(
    {"integer", "bigint", "numeric", "smallint", "double precision"}
)
CHARACTER_TYPES: FrozenSet[str] = frozenset(
    {"character varying", "character", "text"}
)
DATE_TYPE: str = "date"
TIMESTAMPTZ_TYPE: str = "timestamp with time zone"
BOOLEAN_TYPE: str = "boolean"

# ---------------------------------------------------------------------------
# Pre-compiled patterns
# ---------------------------------------------------------------------------

_NUMBER: str = r"[-+]?\d*\.?\d+(?:[eE][-+]?\d+)?"
_QUOTED_NUMBER_RE: re.Pattern[str] = re.compile(rf"^'({_NUMBER})'::\w+(?: \w+)*$")
_BARE_NUMBER_RE: re.Pattern[str] = re.compile(rf"^({_NUMBER})$")
_INTEGER_RE: re.Pattern[str] = re.compile(r"^[-+]?\d+$")

_CHARACTER_CAST_RE: re.Pattern[str] = re.compile(
    r"::(?:character varying|character|bpchar|varchar|text)$", re.IGNORECASE
)
_SURROUNDING_QUOTES_RE: re.Pattern[str] = re.compile(r"^'(.*)'$", re.DOTALL)

_DATE_LITERAL_RE: re.Pattern[str] = re.compile(
    r"^'(\d{4})-(\d{2})-(\d{2})'::date$"
)
_TIMESTAMP_LITERAL_RE: re.Pattern[str] = re.compile(
    r"^'(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})'::timestamp with time zone$"
)

_ENUM_LITERAL_RE: re.Pattern[str] = re.compile(r"^'((?:[^']|'')*)'::(.+)$", re.DOTALL)
_QUOTED_TYPE_RE: re.Pattern[str] = re.compile(r'"((?:[^"]|"")*)"$')

_CURRENT_DATE_FORMS: FrozenSet[str] = frozenset(
    {"now()::date", "current_date", "('now'::text)::date"}
)
_CURRENT_TIMESTAMP_FORMS: FrozenSet[str] = frozenset(
    {"(now() at time zone 'utc'::text)", "now()", "current_timestamp"}
)


# ---------------------------------------------------------------------------
# Per-family parsers
# ---------------------------------------------------------------------------


def _parse_number(raw: str, sql_type: str) -> LiteralNode:
    match = _QUOTED_NUMBER_RE.match(raw) or _BARE_NUMBER_RE.match(raw)
    if match is None:
        raise UnparseableDefaultError(
            raw, sql_type, "Unhandled default value format for numeric type"
        )
    text: str = match.group(1)
    value: Union[int, float]
    if _INTEGER_RE.match(text):
        value = int(text)
    else:
        value = float(text)
        if not math.isfinite(value):
            raise UnparseableDefaultError(raw, sql_type, "Numeric default out of range")
    return NumberLiteral(value)


def _parse_boolean(raw: str, sql_type: str) -> LiteralNode:
    # Anything other than the exact text 'true' counts as false.
    return BooleanLiteral(raw == "true")


def _parse_character(raw: str, sql_type: str) -> LiteralNode:
    text: str = _CHARACTER_CAST_RE.sub("", raw)
    if text.upper() == "NULL":
        raise UnparseableDefaultError(raw, sql_type, "NULL is not a string default")
    match = _SURROUNDING_QUOTES_RE.match(text)
    if match is not None:
        text = match.group(1).replace("''", "'")
    return StringLiteral(text)


def _parse_date(raw: str, sql_type: str) -> LiteralNode:
    lowered: str = raw.lower()
    if lowered in _CURRENT_DATE_FORMS:
        return CurrentDateLiteral()

    match = _DATE_LITERAL_RE.match(lowered)
    if match is not None:
        try:
            return DateLiteral(date(*(int(part) for part in match.groups())))
        except ValueError as exc:
            raise UnparseableDefaultError(raw, sql_type, f"Invalid date ({exc})") from exc

    raise UnparseableDefaultError(raw, sql_type, "Unhandled default value for date type")


def _parse_timestamp(raw: str, sql_type: str) -> LiteralNode:
    lowered: str = raw.lower()
    if lowered in _CURRENT_TIMESTAMP_FORMS:
        return CurrentDateLiteral()

    match = _TIMESTAMP_LITERAL_RE.match(lowered)
    if match is not None:
        try:
            return DateLiteral(datetime(*(int(part) for part in match.groups())))
        except ValueError as exc:
            raise UnparseableDefaultError(
                raw, sql_type, f"Invalid timestamp ({exc})"
            ) from exc

    raise UnparseableDefaultError(
        raw, sql_type, "Unhandled default value for timestamp with time zone type"
    )


def _cast_type_name(cast: str) -> str:
    """Bare type name of a cast target: ``status``, ``"Role"`` or ``app.status``."""
    quoted = _QUOTED_TYPE_RE.search(cast)
    if quoted is not None:
        return quoted.group(1).replace('""', '"')
    return cast.rsplit(".", 1)[-1]


def _parse_enum(raw: str, sql_type: str, enums: EnumRegistry) -> LiteralNode:
    match = _ENUM_LITERAL_RE.match(raw)
    if match is not None and _cast_type_name(match.group(2)) in enums:
        return StringLiteral(match.group(1).replace("''", "'"))
    raise UnparseableDefaultError(
        raw, sql_type, f"Unhandled data type for default value ({sql_type})"
    )


_FAMILY_PARSERS: Dict[str, Callable[[str, str], LiteralNode]] = {
    **{name: _parse_number for name in NUMERIC_TYPES},
    **{name: _parse_character for name in CHARACTER_TYPES},
    BOOLEAN_TYPE: _parse_boolean,
    DATE_TYPE: _parse_date,
    TIMESTAMPTZ_TYPE: _parse_timestamp,
}


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def parse_default(raw_default: str, sql_type: str, enums: EnumRegistry) -> LiteralNode:
    """
    Parse *raw_default* according to the column's *sql_type*.

    Dispatch is on *sql_type* alone; types outside the known families are
    only accepted when the expression is cast to a registered enum type.

    Raises:
        UnparseableDefaultError: the text matches no recognised form.
    """
    raw: str = raw_default.strip()
    parser = _FAMILY_PARSERS.get(sql_type)
    if parser is not None:
        return parser(raw, sql_type)
    return _parse_enum(raw, sql_type, enums)


__all__: List[str] = [
    "UnparseableDefaultError",
    "NUMERIC_TYPES",
    "CHARACTER_TYPES",
    "DATE_TYPE",
    "TIMESTAMPTZ_TYPE",
    "BOOLEAN_TYPE",
    "parse_default",
]

logger.debug("pgtozod.defaults loaded.")
