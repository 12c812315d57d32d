"""
tests/test_validators.py
Unit tests for pgtozod.validators.

Tests cover:
- Table name rules (characters, reserved words, the 'all' sentinel)
- Schema name and output path checks
- Duplicate column detection
- validate_config merging
- The ValidationResult container
"""

from __future__ import annotations

import pathlib

import pytest

from conftest import make_column
from pgtozod.models import GenerationConfig
from pgtozod.validators import (
    ValidationResult,
    validate_config,
    validate_output_path,
    validate_schema_file_name,
    validate_schema_name,
    validate_table_name,
    validate_unique_column_names,
)


class TestValidationResult:
    def test_empty_result_is_valid(self) -> None:
        result = ValidationResult()
        assert result.is_valid
        assert bool(result)
        assert len(result) == 0

    def test_errors_and_warnings(self) -> None:
        result = ValidationResult()
        result.add_error("E1", "broken")
        result.add_warning("W1", "odd")
        assert not result.is_valid
        assert [e.code for e in result.errors] == ["E1"]
        assert [w.code for w in result.warnings] == ["W1"]
        assert result.summary() == "Validation: 1 error(s), 1 warning(s)."
        assert str(result.errors[0]) == "[ERROR] E1: broken"

    def test_merge(self) -> None:
        first, second = ValidationResult(), ValidationResult()
        second.add_error("E1", "broken")
        first.merge(second)
        assert not first.is_valid


class TestValidateTableName:
    @pytest.mark.parametrize("name", ["users", "order_items", "audit-log", "Table2", "all"])
    def test_valid_names(self, name: str) -> None:
        assert validate_table_name(name).is_valid

    @pytest.mark.parametrize("name", ["", "users;drop", "my table", "users.x", "naïve"])
    def test_invalid_characters(self, name: str) -> None:
        result = validate_table_name(name)
        assert not result.is_valid
        assert result.errors[0].code == "INVALID_TABLE_NAME"

    @pytest.mark.parametrize("name", ["select", "DELETE", "Update", "drop"])
    def test_reserved_words(self, name: str) -> None:
        result = validate_table_name(name)
        assert not result.is_valid
        assert result.errors[0].code == "TABLE_NAME_RESERVED"

    def test_types_table_is_rejected(self) -> None:
        result = validate_table_name("types")
        assert not result.is_valid
        assert [e.code for e in result.errors] == ["TABLE_NAME_SHADOWS_TYPES"]

    def test_schema_file_name_only_rejects_types(self) -> None:
        assert not validate_schema_file_name("types").is_valid
        assert validate_schema_file_name("types_archive").is_valid


class TestOtherValidators:
    @pytest.mark.parametrize("name", ["public", "app_data", "_private"])
    def test_valid_schema_names(self, name: str) -> None:
        assert validate_schema_name(name).is_valid

    @pytest.mark.parametrize("name", ["1abc", "bad-name", "a b"])
    def test_invalid_schema_names(self, name: str) -> None:
        assert not validate_schema_name(name).is_valid

    def test_output_path_missing_is_fine(self, tmp_path: pathlib.Path) -> None:
        assert validate_output_path(str(tmp_path / "new")).is_valid

    def test_output_path_existing_dir_is_fine(self, tmp_path: pathlib.Path) -> None:
        assert validate_output_path(str(tmp_path)).is_valid

    def test_output_path_regular_file_fails(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("x", encoding="utf-8")
        assert not validate_output_path(str(target)).is_valid

    def test_duplicate_columns(self) -> None:
        columns = [make_column("id", "integer"), make_column("id", "text")]
        result = validate_unique_column_names("users", columns)
        assert not result.is_valid
        assert result.errors[0].code == "DUPLICATE_COLUMN_NAME"

    def test_columns_collapsing_to_one_field(self) -> None:
        columns = [make_column("user_id", "integer"), make_column("userId", "integer")]
        result = validate_unique_column_names("users", columns)
        assert not result.is_valid
        assert result.errors[0].code == "DUPLICATE_FIELD_NAME"
        assert result.errors[0].context["field"] == "userId"

    def test_unique_columns(self) -> None:
        columns = [make_column("id", "integer"), make_column("email", "text")]
        assert validate_unique_column_names("users", columns).is_valid


class TestValidateConfig:
    def test_valid_config(self, config: GenerationConfig) -> None:
        assert validate_config(config).is_valid

    def test_collects_every_error(self, tmp_path: pathlib.Path) -> None:
        blocker = tmp_path / "out"
        blocker.write_text("x", encoding="utf-8")
        config = GenerationConfig(table="select", schema_name="1bad", output=str(blocker))
        result = validate_config(config)
        assert sorted(e.code for e in result.errors) == [
            "INVALID_SCHEMA_NAME",
            "OUTPUT_NOT_A_DIRECTORY",
            "TABLE_NAME_RESERVED",
        ]
