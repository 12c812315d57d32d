# File: pgtozod/expressions.py
"""
pgtozod - Schema Expression Model & Zod Renderer
=================================================
Each generated field is first built as a small tree of immutable nodes:

    OptionalWrapper
      └── DefaultWrapper(value=CurrentDateLiteral)
            └── CustomSchema("zodUtcDate")

and only then serialised to source text by ``ZodRenderer``.  The mapping
logic never concatenates target-language strings, so another renderer can be
added without touching it.

Schema nodes describe the validator; literal nodes describe default values.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Set, Tuple, Union

logger: logging.Logger = logging.getLogger("pgtozod.expressions")


# ---------------------------------------------------------------------------
# Literal nodes (default values)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    value: Union[int, float]


@dataclass(frozen=True, slots=True)
class BooleanLiteral:
    value: bool


@dataclass(frozen=True, slots=True)
class StringLiteral:
    value: str


@dataclass(frozen=True, slots=True)
class CurrentDateLiteral:
    """The instant at validation time (``now()``, ``current_date``, ...)."""


@dataclass(frozen=True, slots=True)
class DateLiteral:
    """A fixed calendar date, or date and time of day."""

    value: Union[date, datetime]


LiteralNode = Union[
    NumberLiteral, BooleanLiteral, StringLiteral, CurrentDateLiteral, DateLiteral
]


# ---------------------------------------------------------------------------
# Schema nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StringSchema:
    min_length: Optional[int] = None
    exact_length: Optional[int] = None
    message: str = ""


@dataclass(frozen=True, slots=True)
class NumberSchema:
    gt: Optional[Union[int, float]] = None
    message: str = ""


@dataclass(frozen=True, slots=True)
class BooleanSchema:
    pass


@dataclass(frozen=True, slots=True)
class EnumSchema:
    labels: Tuple[str, ...]
    default: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CustomSchema:
    """Reference to a construct exported by the auxiliary ``types.ts``."""

    name: str
    args: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class UnknownSchema:
    pass


@dataclass(frozen=True, slots=True)
class ArraySchema:
    item: "SchemaNode"


@dataclass(frozen=True, slots=True)
class DefaultWrapper:
    inner: "SchemaNode"
    value: LiteralNode


@dataclass(frozen=True, slots=True)
class OptionalWrapper:
    inner: "SchemaNode"


SchemaNode = Union[
    StringSchema,
    NumberSchema,
    BooleanSchema,
    EnumSchema,
    CustomSchema,
    UnknownSchema,
    ArraySchema,
    DefaultWrapper,
    OptionalWrapper,
]


def with_default(node: SchemaNode, value: LiteralNode) -> SchemaNode:
    """
    Attach a default value to *node*.

    Enum schemas already carry a synthesized default; a real one replaces it
    instead of stacking a second ``.default()``.
    """
    if isinstance(node, EnumSchema) and isinstance(value, StringLiteral):
        return EnumSchema(labels=node.labels, default=value.value)
    return DefaultWrapper(inner=node, value=value)


def custom_names(node: SchemaNode) -> Set[str]:
    """Names of every ``CustomSchema`` referenced inside *node*."""
    if isinstance(node, CustomSchema):
        return {node.name}
    if isinstance(node, ArraySchema):
        return custom_names(node.item)
    if isinstance(node, (DefaultWrapper, OptionalWrapper)):
        return custom_names(node.inner)
    return set()


# ---------------------------------------------------------------------------
# Zod renderer
# ---------------------------------------------------------------------------


def js_string(value: str) -> str:
    """Single-quoted JavaScript string literal."""
    escaped: str = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"


def js_number(value: Union[int, float]) -> str:
    if isinstance(value, bool):
        raise TypeError("booleans are not numeric literals")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite number cannot be rendered: {value}")
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


class ZodRenderer:
    """
    Serialises schema and literal nodes to Zod source text.

    Stateless; one instance can render any number of fields.
    """

    def __init__(self) -> None:
        self._schema_handlers: Dict[type, Callable[..., str]] = {
            StringSchema: self._render_string,
            NumberSchema: self._render_number,
            BooleanSchema: lambda node: "z.boolean()",
            EnumSchema: self._render_enum,
            CustomSchema: self._render_custom,
            UnknownSchema: lambda node: "z.unknown()",
            ArraySchema: lambda node: f"z.array({self.render(node.item)})",
            DefaultWrapper: lambda node: (
                f"{self.render(node.inner)}.default({self.render_literal(node.value)})"
            ),
            OptionalWrapper: lambda node: f"{self.render(node.inner)}.optional()",
        }

    def render(self, node: SchemaNode) -> str:
        handler: Optional[Callable[..., str]] = self._schema_handlers.get(type(node))
        if handler is None:
            raise TypeError(f"Cannot render schema node {node!r}")
        return handler(node)

    def render_literal(self, value: LiteralNode) -> str:
        if isinstance(value, NumberLiteral):
            return js_number(value.value)
        if isinstance(value, BooleanLiteral):
            return "true" if value.value else "false"
        if isinstance(value, StringLiteral):
            return js_string(value.value)
        if isinstance(value, CurrentDateLiteral):
            return "new Date()"
        if isinstance(value, DateLiteral):
            if isinstance(value.value, datetime):
                text: str = value.value.strftime("%Y-%m-%d %H:%M:%S")
            else:
                text = value.value.isoformat()
            return f"new Date({js_string(text)})"
        raise TypeError(f"Cannot render literal node {value!r}")

    # -- schema handlers ----------------------------------------------------

    def _render_string(self, node: StringSchema) -> str:
        parts: List[str] = ["z.string()"]
        if node.exact_length is not None:
            parts.append(f".length({node.exact_length}, {js_string(node.message)})")
        if node.min_length is not None:
            parts.append(f".min({node.min_length}, {js_string(node.message)})")
        return "".join(parts)

    def _render_number(self, node: NumberSchema) -> str:
        if node.gt is None:
            return "z.number()"
        return f"z.number().gt({js_number(node.gt)}, {js_string(node.message)})"

    def _render_enum(self, node: EnumSchema) -> str:
        labels: str = ", ".join(js_string(label) for label in node.labels)
        text: str = f"z.enum([{labels}])"
        if node.default is not None:
            text += f".default({js_string(node.default)})"
        return text

    def _render_custom(self, node: CustomSchema) -> str:
        if not node.args:
            return node.name
        args: str = ", ".join(js_string(arg) for arg in node.args)
        return f"{node.name}({args})"


__all__: List[str] = [
    "NumberLiteral",
    "BooleanLiteral",
    "StringLiteral",
    "CurrentDateLiteral",
    "DateLiteral",
    "LiteralNode",
    "StringSchema",
    "NumberSchema",
    "BooleanSchema",
    "EnumSchema",
    "CustomSchema",
    "UnknownSchema",
    "ArraySchema",
    "DefaultWrapper",
    "OptionalWrapper",
    "SchemaNode",
    "with_default",
    "custom_names",
    "js_string",
    "js_number",
    "ZodRenderer",
]
