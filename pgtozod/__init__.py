# File: pgtozod/__init__.py
"""
pgtozod - Zod Schemas from PostgreSQL Tables
=============================================

Reads table metadata from a PostgreSQL catalog and writes one TypeScript
file per table containing a Zod validation schema and its inferred type,
plus ``types.ts`` with the custom Zod constructs the schemas use.

Architecture overview::

    ┌──────────────┐     ┌─────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ SchemaGenerator │────▶│ TemplateGenerator│
    │   (cli.py)   │     │ (generator.py)  │     │  (templates.py)  │
    └──────────────┘     └────────┬────────┘     └──────────────────┘
                                  │
             ┌────────────┬───────┴─────┬─────────────┐
             ▼            ▼             ▼             ▼
       ┌──────────┐ ┌───────────┐ ┌───────────┐ ┌───────────┐
       │ database │ │ assembler │ │type_mapper│ │ exporters │
       │  (.py)   │ │  (.py)    │ │ defaults  │ │  (.py)    │
       └──────────┘ └───────────┘ └───────────┘ └───────────┘

Usage::

    # As a library
    from pgtozod import GenerationConfig, SchemaGenerator, PostgresCatalog
    with engine.connect() as conn:
        report = SchemaGenerator(GenerationConfig(table="users"),
                                 PostgresCatalog(conn)).generate()

    # From the command line
    pgtozod --table users --nullable -v
"""

from __future__ import annotations

__version__: str = "0.1.0"
__license__: str = "MIT"

from pgtozod.models import (
    ColumnMetadata,
    ConnectionSettings,
    EnumRow,
    GenerationConfig,
)
from pgtozod.enums import EnumRegistry
from pgtozod.defaults import UnparseableDefaultError, parse_default
from pgtozod.type_mapper import map_type
from pgtozod.assembler import FieldEntry, TableSchemaResult, assemble_table_schema
from pgtozod.expressions import ZodRenderer
from pgtozod.templates import TemplateGenerator
from pgtozod.exporters import ExportResult, SchemaExporter
from pgtozod.validators import ValidationResult, validate_config, validate_table_name
from pgtozod.database import PostgresCatalog, create_catalog_engine
from pgtozod.generator import GenerationReport, SchemaGenerator
from pgtozod.utils import Timer, to_field_name, to_readable_label

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Core orchestrator
    "SchemaGenerator",
    "GenerationReport",
    # Models
    "ColumnMetadata",
    "ConnectionSettings",
    "EnumRow",
    "GenerationConfig",
    # Core
    "EnumRegistry",
    "UnparseableDefaultError",
    "parse_default",
    "map_type",
    "FieldEntry",
    "TableSchemaResult",
    "assemble_table_schema",
    "ZodRenderer",
    # Validation
    "ValidationResult",
    "validate_config",
    "validate_table_name",
    # Output
    "TemplateGenerator",
    "SchemaExporter",
    "ExportResult",
    # Database
    "PostgresCatalog",
    "create_catalog_engine",
    # Utilities
    "Timer",
    "to_field_name",
    "to_readable_label",
]
