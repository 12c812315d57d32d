"""
tests/test_cli.py
Tests for pgtozod.cli: argument parsing and exit codes.

The database engine and catalog are replaced through monkeypatch, so no
server is needed.
"""

from __future__ import annotations

import contextlib
import json
import pathlib
from typing import List

import pytest

from conftest import FakeCatalog
from pgtozod import cli
from pgtozod.cli import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    _build_generation_config,
    _build_parser,
    cli_main,
)


class _FakeEngine:
    def __init__(self) -> None:
        self.disposed = False

    def connect(self):
        return contextlib.nullcontext(object())

    def dispose(self) -> None:
        self.disposed = True


@pytest.fixture()
def config_file(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "DB_USER": "postgres",
                "DB_HOST": "localhost",
                "DB_NAME": "app",
                "DB_PASSWORD": "secret",
                "DB_PORT": 5432,
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def fake_engine(
    monkeypatch: pytest.MonkeyPatch, fake_catalog: FakeCatalog
) -> _FakeEngine:
    engine = _FakeEngine()
    monkeypatch.setattr(cli, "create_catalog_engine", lambda settings: engine)
    monkeypatch.setattr(cli, "PostgresCatalog", lambda conn: fake_catalog)
    return engine


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(argv)
    return exc_info.value.code


class TestParser:
    def test_defaults(self) -> None:
        args = _build_parser().parse_args(["-t", "users"])
        assert args.table == "users"
        assert args.schema == "public"
        assert args.output == "./schemas"
        assert not args.exclude_defaults
        assert not args.nullable
        assert not args.reset

    def test_short_flags_map_to_config(self) -> None:
        args = _build_parser().parse_args(
            ["-t", "all", "-e", "-n", "-s", "app", "-o", "out", "--allow-non-positive", "--dry-run"]
        )
        config = _build_generation_config(args)
        assert config.all_tables
        assert config.exclude_defaults
        assert config.include_nullable
        assert config.schema_name == "app"
        assert config.output == "out"
        assert not config.require_positive_numbers
        assert config.dry_run

    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        assert _run(["--version"]) == 0
        assert "pgtozod v" in capsys.readouterr().out


class TestExitCodes:
    def test_missing_table(self) -> None:
        assert _run([]) == EXIT_VALIDATION_ERROR

    @pytest.mark.parametrize("table", ["select", "bad name", "users;drop"])
    def test_invalid_table(self, table: str) -> None:
        assert _run(["-t", table]) == EXIT_VALIDATION_ERROR

    def test_unreadable_config_file(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{oops", encoding="utf-8")
        assert _run(["-t", "users", "--config", str(path)]) == EXIT_INPUT_ERROR

    def test_connection_failure(
        self, monkeypatch: pytest.MonkeyPatch, config_file: pathlib.Path
    ) -> None:
        def _refuse(settings):
            raise ValueError("Could not connect to database: refused")

        monkeypatch.setattr(cli, "create_catalog_engine", _refuse)
        assert _run(["-t", "users", "--config", str(config_file)]) == EXIT_CONNECTION_ERROR

    def test_success(
        self,
        tmp_path: pathlib.Path,
        config_file: pathlib.Path,
        fake_engine: _FakeEngine,
        capsys: pytest.CaptureFixture,
    ) -> None:
        output = tmp_path / "schemas"
        code = _run(["-t", "users", "-o", str(output), "--config", str(config_file)])

        assert code == EXIT_SUCCESS
        assert (output / "users.ts").exists()
        assert (output / "types.ts").exists()
        assert fake_engine.disposed
        assert "Generation Report" in capsys.readouterr().out

    def test_unknown_table_is_a_generation_error(
        self, tmp_path: pathlib.Path, config_file: pathlib.Path, fake_engine: _FakeEngine
    ) -> None:
        code = _run(
            ["-t", "ghosts", "-o", str(tmp_path / "out"), "--config", str(config_file), "-q"]
        )
        assert code == EXIT_GENERATION_ERROR
        assert fake_engine.disposed

    def test_prompts_when_config_missing(
        self,
        tmp_path: pathlib.Path,
        monkeypatch: pytest.MonkeyPatch,
        fake_engine: _FakeEngine,
    ) -> None:
        answers = iter(["postgres", "localhost", "app", "5432"])
        monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
        monkeypatch.setattr("getpass.getpass", lambda prompt: "pw")
        config_path = tmp_path / "cfg" / "config.json"

        code = _run(
            ["-t", "users", "-o", str(tmp_path / "out"), "--config", str(config_path)]
        )
        assert code == EXIT_SUCCESS
        assert json.loads(config_path.read_text(encoding="utf-8"))["DB_PASSWORD"] == "pw"
