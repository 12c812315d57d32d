"""
tests/test_expressions.py
Unit tests for the schema expression tree and ZodRenderer.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from pgtozod.expressions import (
    ArraySchema,
    BooleanLiteral,
    BooleanSchema,
    CurrentDateLiteral,
    CustomSchema,
    DateLiteral,
    DefaultWrapper,
    EnumSchema,
    NumberLiteral,
    NumberSchema,
    OptionalWrapper,
    StringLiteral,
    StringSchema,
    UnknownSchema,
    ZodRenderer,
    custom_names,
    js_number,
    js_string,
    with_default,
)


@pytest.fixture()
def renderer() -> ZodRenderer:
    return ZodRenderer()


class TestLiterals:
    @pytest.mark.parametrize(
        "literal,expected",
        [
            (NumberLiteral(5), "5"),
            (NumberLiteral(2.0), "2"),
            (NumberLiteral(-0.25), "-0.25"),
            (BooleanLiteral(True), "true"),
            (BooleanLiteral(False), "false"),
            (StringLiteral("hi"), "'hi'"),
            (CurrentDateLiteral(), "new Date()"),
            (DateLiteral(date(2024, 1, 31)), "new Date('2024-01-31')"),
            (
                DateLiteral(datetime(2024, 1, 31, 8, 5, 0)),
                "new Date('2024-01-31 08:05:00')",
            ),
        ],
    )
    def test_render_literal(self, renderer: ZodRenderer, literal, expected: str) -> None:
        assert renderer.render_literal(literal) == expected

    def test_js_string_escapes(self) -> None:
        assert js_string("it's") == "'it\\'s'"
        assert js_string("a\\b") == "'a\\\\b'"
        assert js_string("line\nbreak") == "'line\\nbreak'"

    def test_js_number_rejects_non_finite(self) -> None:
        with pytest.raises(ValueError):
            js_number(float("nan"))


class TestSchemaNodes:
    def test_wrappers_compose(self, renderer: ZodRenderer) -> None:
        node = OptionalWrapper(
            DefaultWrapper(CustomSchema("zodUtcDate"), CurrentDateLiteral())
        )
        assert renderer.render(node) == "zodUtcDate.default(new Date()).optional()"

    def test_array_of_strings(self, renderer: ZodRenderer) -> None:
        node = ArraySchema(StringSchema(min_length=1, message="Tags is required"))
        assert renderer.render(node) == "z.array(z.string().min(1, 'Tags is required'))"

    def test_simple_nodes(self, renderer: ZodRenderer) -> None:
        assert renderer.render(BooleanSchema()) == "z.boolean()"
        assert renderer.render(UnknownSchema()) == "z.unknown()"
        assert renderer.render(NumberSchema()) == "z.number()"
        assert renderer.render(EnumSchema(labels=("a", "b"))) == "z.enum(['a', 'b'])"

    def test_unknown_node_type_raises(self, renderer: ZodRenderer) -> None:
        with pytest.raises(TypeError):
            renderer.render("z.string()")  # type: ignore[arg-type]


class TestWithDefault:
    def test_enum_default_is_replaced(self) -> None:
        node = with_default(
            EnumSchema(labels=("active", "inactive"), default="active"),
            StringLiteral("inactive"),
        )
        assert node == EnumSchema(labels=("active", "inactive"), default="inactive")

    def test_other_nodes_are_wrapped(self) -> None:
        node = with_default(BooleanSchema(), BooleanLiteral(False))
        assert node == DefaultWrapper(BooleanSchema(), BooleanLiteral(False))


class TestCustomNames:
    def test_nested(self) -> None:
        node = OptionalWrapper(ArraySchema(CustomSchema("zodUuid", args=("Ref",))))
        assert custom_names(node) == {"zodUuid"}

    def test_none(self) -> None:
        assert custom_names(StringSchema(min_length=1)) == set()
