# File: pgtozod/cli.py
"""
pgtozod - Command-Line Interface
=================================

Command-line front end built on the standard-library ``argparse`` module.

Usage examples::

    # One table
    pgtozod --table users

    # Include nullable columns, custom output directory
    pgtozod -t users -n -o ./src/schemas

    # Every table of a schema
    pgtozod -t all -s inventory

    # Enter new connection details
    pgtozod -t users --reset

Exit codes:
    0 - success
    1 - validation error (bad table / schema name, output path)
    2 - generation error
    3 - export error
    4 - input error (config file, prompts)
    5 - connection error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import Engine

from pgtozod.config import CONFIG_PATH, resolve_connection_settings
from pgtozod.database import PostgresCatalog, create_catalog_engine
from pgtozod.generator import GenerationReport, SchemaGenerator
from pgtozod.models import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SCHEMA_NAME,
    ConnectionSettings,
    GenerationConfig,
)
from pgtozod.validators import ValidationResult, validate_config

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pgtozod")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4
EXIT_CONNECTION_ERROR: int = 5


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root pgtozod logger based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("pgtozod")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from pgtozod import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="pgtozod",
        description="pgtozod: Generate zod schemas from postgresql tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s --table users\n"
            "  %(prog)s --table users --nullable\n"
            "  %(prog)s --table users --schema public\n"
            "  %(prog)s --table users --output ./schemas\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"pgtozod v{__version__}",
    )

    # --- Table selection ---
    parser.add_argument(
        "-t", "--table",
        type=str,
        default=None,
        metavar="NAME",
        help="Table name. Use 'all' to generate schemas for all tables (required).",
    )
    parser.add_argument(
        "-s", "--schema",
        type=str,
        default=DEFAULT_SCHEMA_NAME,
        metavar="NAME",
        help=f"Schema name (default: {DEFAULT_SCHEMA_NAME}).",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        metavar="PATH",
        help=f"Output path (default: {DEFAULT_OUTPUT_DIR}).",
    )

    # --- Column policies ---
    column_group = parser.add_argument_group("column options")
    column_group.add_argument(
        "-e", "--exclude-defaults",
        action="store_true",
        default=False,
        help="Exclude db columns that have a default value configured.",
    )
    column_group.add_argument(
        "-n", "--nullable",
        action="store_true",
        default=False,
        help="Include nullable columns (as optional fields).",
    )
    column_group.add_argument(
        "--allow-non-positive",
        action="store_true",
        default=False,
        help="Don't require numeric fields to be greater than zero.",
    )

    # --- Connection ---
    connection_group = parser.add_argument_group("connection")
    connection_group.add_argument(
        "-r", "--reset",
        action="store_true",
        default=False,
        help="Set new database connection details.",
    )
    connection_group.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help=f"Connection settings file (default: {CONFIG_PATH}).",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Run the full pipeline but don't write files to disk.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


def _build_generation_config(args: argparse.Namespace) -> GenerationConfig:
    """Map parsed arguments onto ``GenerationConfig``."""
    return GenerationConfig(
        table=args.table,
        exclude_defaults=args.exclude_defaults,
        include_nullable=args.nullable,
        schema_name=args.schema,
        output=args.output,
        require_positive_numbers=not args.allow_non_positive,
        dry_run=args.dry_run,
    )


def _exit_code_for(report: GenerationReport) -> int:
    if report.success:
        return EXIT_SUCCESS
    if report.generation_errors:
        return EXIT_GENERATION_ERROR
    if report.export_errors:
        return EXIT_EXPORT_ERROR
    return EXIT_GENERATION_ERROR


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _run_generation(config: GenerationConfig, settings: ConnectionSettings) -> int:
    """
    Connect, run the pipeline and print the report.

    Returns the appropriate exit code.
    """
    print("Connecting to database...", file=sys.stderr)
    try:
        engine: Engine = create_catalog_engine(settings)
    except ValueError as exc:
        logger.error("%s", exc)
        return EXIT_CONNECTION_ERROR

    try:
        with engine.connect() as conn:
            report: GenerationReport = SchemaGenerator(
                config, PostgresCatalog(conn)
            ).generate()
    finally:
        engine.dispose()

    print(report.summary())
    return _exit_code_for(report)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    # --- Verbosity ---
    if args.quiet:
        verbosity: int = -1
        logging.disable(logging.CRITICAL)
    else:
        verbosity = args.verbose

    _setup_logging(verbosity)

    # --- Table name is required ---
    if not args.table:
        logger.error(
            "The --table option is required and must be a valid table name."
        )
        parser.print_help(sys.stderr)
        sys.exit(EXIT_VALIDATION_ERROR)

    try:
        config: GenerationConfig = _build_generation_config(args)
    except PydanticValidationError as exc:
        logger.error("Invalid options: %s", exc)
        sys.exit(EXIT_INPUT_ERROR)

    result: ValidationResult = validate_config(config)
    for warn in result.warnings:
        logger.warning("%s", warn)
    if not result.is_valid:
        for err in result.errors:
            logger.error("%s", err)
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_VALIDATION_ERROR)

    # --- Connection settings ---
    config_path: Path = Path(args.config).expanduser() if args.config else CONFIG_PATH
    try:
        settings: ConnectionSettings = resolve_connection_settings(
            config_path, reset=args.reset
        )
    except (ValueError, OSError) as exc:
        # pydantic's ValidationError is a ValueError too
        logger.error("Could not load connection settings: %s", exc)
        sys.exit(EXIT_INPUT_ERROR)
    except (EOFError, KeyboardInterrupt):
        logger.error("Connection details were not provided.")
        sys.exit(EXIT_INPUT_ERROR)

    logger.info("Table:   %s", config.table)
    logger.info("Schema:  %s", config.schema_name)
    logger.info("Output:  %s", Path(config.output).resolve())

    exit_code: int = _run_generation(config, settings)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
    "EXIT_CONNECTION_ERROR",
]

logger.debug("pgtozod.cli loaded.")
