"""
tests/test_templates.py
Unit tests for pgtozod.templates.TemplateGenerator.

Tests cover:
- Layout of a generated <table>.ts file
- Imports limited to the custom constructs actually used
- types.ts content
- generate_all file naming
"""

from __future__ import annotations

from typing import List

import pytest

from conftest import make_column
from pgtozod.assembler import TableSchemaResult, assemble_table_schema
from pgtozod.enums import EnumRegistry
from pgtozod.models import ColumnMetadata, GenerationConfig
from pgtozod.templates import TYPES_FILE_NAME, TemplateGenerator, object_key


@pytest.fixture()
def generator() -> TemplateGenerator:
    return TemplateGenerator()


@pytest.fixture()
def users_result(
    users_columns: List[ColumnMetadata], empty_enums: EnumRegistry
) -> TableSchemaResult:
    return assemble_table_schema(
        "users", users_columns, empty_enums, GenerationConfig(table="users")
    )


@pytest.fixture()
def accounts_result(
    accounts_columns: List[ColumnMetadata], enums: EnumRegistry
) -> TableSchemaResult:
    config = GenerationConfig(table="accounts", include_nullable=True)
    return assemble_table_schema("accounts", accounts_columns, enums, config)


class TestGenerateTableSchema:
    def test_users_file(
        self, generator: TemplateGenerator, users_result: TableSchemaResult
    ) -> None:
        source = generator.generate_table_schema(users_result)
        assert source == "\n".join(
            [
                "import { z } from 'zod';",
                "import { zodUtcDate } from './types';",
                "",
                "export const usersSchema = z.object({",
                "  id: z.number().gt(0, ' is required'),",
                "  createdAt: zodUtcDate.default(new Date()),",
                "  email: z.string().min(1, 'Email is required'),",
                "});",
                "",
                "export type UsersType = z.infer<typeof usersSchema>;",
                "",
            ]
        )

    def test_imports_only_used_constructs(
        self, generator: TemplateGenerator, accounts_result: TableSchemaResult
    ) -> None:
        source = generator.generate_table_schema(accounts_result)
        assert "import { zodDateOnly, zodUuid } from './types';" in source
        assert "zodUtcDate" not in source

    def test_no_types_import_without_custom_constructs(
        self, generator: TemplateGenerator
    ) -> None:
        result = TableSchemaResult(table_name="empty")
        source = generator.generate_table_schema(result)
        assert "./types" not in source
        assert "export const emptySchema = z.object({\n});" in source

    def test_identifiers_for_snake_case_table(self, generator: TemplateGenerator) -> None:
        source = generator.generate_table_schema(TableSchemaResult(table_name="order_items"))
        assert "export const orderItemsSchema" in source
        assert "export type OrderItemsType = z.infer<typeof orderItemsSchema>;" in source

    def test_non_identifier_field_names_are_quoted(
        self, generator: TemplateGenerator, empty_enums: EnumRegistry
    ) -> None:
        columns = [
            make_column("order-date", "date"),
            make_column("2fa_code", "text"),
            make_column("$meta", "boolean"),
        ]
        result = assemble_table_schema(
            "orders", columns, empty_enums, GenerationConfig(table="orders")
        )
        source = generator.generate_table_schema(result)
        assert "  '2faCode': z.string().min(1, '2fa Code is required')," in source
        assert "  'order-date': zodDateOnly," in source
        assert "  $meta: z.boolean()," in source


class TestObjectKey:
    @pytest.mark.parametrize("name", ["id", "createdAt", "_private", "$ref", "line_2"])
    def test_identifiers_stay_bare(self, name: str) -> None:
        assert object_key(name) == name

    @pytest.mark.parametrize(
        "name,expected",
        [("order-date", "'order-date'"), ("2faCode", "'2faCode'"), ("it's", "'it\\'s'")],
    )
    def test_other_names_are_quoted(self, name: str, expected: str) -> None:
        assert object_key(name) == expected


class TestTypesFile:
    def test_declares_every_construct(self, generator: TemplateGenerator) -> None:
        source = generator.generate_types_file()
        assert source.startswith("import { z } from 'zod';")
        for name in ("zodUtcDate", "zodDateOnly", "zodUuid"):
            assert f"export const {name}" in source
        assert "Invalid date" in source
        assert "must be a valid UUID" in source


class TestGenerateAll:
    def test_file_names(
        self,
        generator: TemplateGenerator,
        users_result: TableSchemaResult,
        accounts_result: TableSchemaResult,
    ) -> None:
        files = generator.generate_all([users_result, accounts_result])
        assert sorted(files) == ["accounts.ts", TYPES_FILE_NAME, "users.ts"]

    def test_types_file_always_present(self, generator: TemplateGenerator) -> None:
        assert list(generator.generate_all([])) == [TYPES_FILE_NAME]
