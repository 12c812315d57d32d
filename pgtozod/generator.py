# File: pgtozod/generator.py
"""
pgtozod - Generation Pipeline (Orchestrator)
=============================================

Connects every phase of a run:

    Catalog → Enum Registry → Column Assembly → Template Rendering → File Export

Workflow::

    1. Fetch the enum catalog once and build the ``EnumRegistry``.
    2. Resolve the tables to process (``all`` → every table of the schema).
    3. For each table: fetch columns, check them, assemble the field list.
    4. Render ``<table>.ts`` for each table plus ``types.ts``.
    5. Hand off to ``SchemaExporter``.
    6. Return a ``GenerationReport`` with metrics and status.

Error handling strategy:
    - A table whose columns can't be fetched or checked is recorded in
      ``generation_errors`` and skipped; the other tables still run.
    - Column-level problems are warnings on the table report.
    - Export errors are recorded per file.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from pgtozod.assembler import TableSchemaResult, assemble_table_schema
from pgtozod.database import Catalog
from pgtozod.enums import EnumRegistry
from pgtozod.exporters import ExportResult, SchemaExporter
from pgtozod.models import ColumnMetadata, GenerationConfig
from pgtozod.templates import TemplateGenerator
from pgtozod.utils import Timer
from pgtozod.validators import (
    ValidationResult,
    validate_schema_file_name,
    validate_unique_column_names,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pgtozod.generator")

_REPORT_COLUMNS: List[str] = [
    "Column Name",
    "Data Type",
    "Is Nullable",
    "Column Default",
    "UDT Name",
    "Is Identity",
]


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class TableReport:
    """What happened to one table."""

    table_name: str = ""
    processed_count: int = 0
    columns: List[ColumnMetadata] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_result(cls, result: TableSchemaResult) -> "TableReport":
        return cls(
            table_name=result.table_name,
            processed_count=result.processed_count,
            columns=result.columns,
            warnings=list(result.warnings),
        )


def format_column_table(columns: Sequence[ColumnMetadata]) -> List[str]:
    """Plain-text grid of the processed columns, one line per column."""
    rows: List[Dict[str, str]] = [column.as_report_row() for column in columns]
    widths: Dict[str, int] = {
        name: max([len(name)] + [len(row[name]) for row in rows])
        for name in _REPORT_COLUMNS
    }
    header: str = " | ".join(name.ljust(widths[name]) for name in _REPORT_COLUMNS)
    lines: List[str] = [header, "-+-".join("-" * widths[name] for name in _REPORT_COLUMNS)]
    for row in rows:
        lines.append(" | ".join(row[name].ljust(widths[name]) for name in _REPORT_COLUMNS))
    return lines


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by ``SchemaGenerator.generate()``.

    Contains timing information, per-table results, file counts and any
    errors/warnings encountered.
    """

    success: bool = False
    schema_name: str = ""
    output_directory: str = ""
    dry_run: bool = False

    # Metrics
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    # Sub-reports
    tables: List[TableReport] = field(default_factory=list)
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)
    skipped_tables: List[str] = field(default_factory=list)

    export_result: Optional[ExportResult] = None

    @property
    def total_tables_processed(self) -> int:
        return len(self.tables)

    @property
    def warnings(self) -> List[str]:
        return [warning for table in self.tables for warning in table.warnings]

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "SUCCESS" if self.success else "FAILED"
        lines.append(f"{'='*60}")
        lines.append("  pgtozod - Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:           {status}")
        lines.append(f"  Schema:           {self.schema_name}")
        lines.append(f"  Output:           {self.output_directory}")
        if self.dry_run:
            lines.append("  Mode:             dry run (nothing written)")
        lines.append(f"  Tables processed: {self.total_tables_processed}")
        lines.append(f"  Files generated:  {self.total_files}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total bytes:      {self.total_bytes:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'-'*60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "+" if step.success else "x"
                lines.append(
                    f"    {icon} {step.step_name:<28s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        for table in self.tables:
            lines.append(f"{'-'*60}")
            lines.append(
                f"  Table '{table.table_name}': processed {table.processed_count} columns"
            )
            if table.columns:
                lines.extend(f"    {row}" for row in format_column_table(table.columns))

        warnings: List[str] = self.warnings
        if warnings:
            lines.append(f"{'-'*60}")
            lines.append(f"  Warnings ({len(warnings)}):")
            for warn in warnings:
                lines.append(f"    ! {warn}")

        if self.generation_errors:
            lines.append(f"{'-'*60}")
            lines.append(f"  Generation Errors ({len(self.generation_errors)}):")
            for err in self.generation_errors:
                lines.append(f"    x {err}")

        if self.export_errors:
            lines.append(f"{'-'*60}")
            lines.append(f"  Export Errors ({len(self.export_errors)}):")
            for err in self.export_errors:
                lines.append(f"    x {err}")

        if self.skipped_tables:
            lines.append(f"{'-'*60}")
            lines.append(f"  Skipped Tables ({len(self.skipped_tables)}):")
            for tbl in self.skipped_tables:
                lines.append(f"    - {tbl}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# SchemaGenerator - master orchestrator
# ---------------------------------------------------------------------------


class SchemaGenerator:
    """
    Pipeline orchestrator for one generation run.

    Usage::

        with engine.connect() as conn:
            generator = SchemaGenerator(config, PostgresCatalog(conn))
            report = generator.generate()
        print(report.summary())
    """

    def __init__(
        self,
        config: GenerationConfig,
        catalog: Catalog,
        *,
        template_generator: Optional[TemplateGenerator] = None,
    ) -> None:
        self._config: GenerationConfig = config
        self._catalog: Catalog = catalog
        self._templates: TemplateGenerator = template_generator or TemplateGenerator()

        logger.debug(
            "SchemaGenerator initialised: table=%s, schema=%s, output=%s.",
            config.table,
            config.schema_name,
            config.output,
        )

    # -----------------------------------------------------------------
    # Public
    # -----------------------------------------------------------------

    def generate(self) -> GenerationReport:
        """Run every step and return the report."""
        report: GenerationReport = GenerationReport(
            schema_name=self._config.schema_name,
            output_directory=str(Path(self._config.output).resolve()),
            dry_run=self._config.dry_run,
        )
        pipeline_start: float = time.perf_counter()

        enums: Optional[EnumRegistry] = self._step_load_enums(report)
        if enums is None:
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        tables: List[str] = self._step_resolve_tables(report)
        results: List[TableSchemaResult] = self._step_assemble(tables, enums, report)

        if not results:
            report.generation_errors.append("No tables were processed; nothing to export.")
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        files: Dict[str, str] = self._step_render(results, report)
        self._step_export(files, report)

        return self._finalise_report(report, time.perf_counter() - pipeline_start)

    # -----------------------------------------------------------------
    # Pipeline steps
    # -----------------------------------------------------------------

    def _step_load_enums(self, report: GenerationReport) -> Optional[EnumRegistry]:
        with Timer("load_enums") as t:
            try:
                enums: EnumRegistry = EnumRegistry.build(self._catalog.fetch_enums())
            except SQLAlchemyError as exc:
                error_msg: str = f"Failed to load enum types: {exc}"
                report.generation_errors.append(error_msg)
                logger.error(error_msg)
                report.step_metrics.append(GenerationStepMetric(
                    step_name="Load Enum Types",
                    success=False,
                    elapsed_seconds=t.elapsed,
                    detail=type(exc).__name__,
                ))
                return None

        report.step_metrics.append(GenerationStepMetric(
            step_name="Load Enum Types",
            success=True,
            elapsed_seconds=t.elapsed,
            detail=f"{len(enums)} enum type(s)",
        ))
        return enums

    def _step_resolve_tables(self, report: GenerationReport) -> List[str]:
        if not self._config.all_tables:
            return [self._config.table]

        with Timer("resolve_tables") as t:
            try:
                tables: List[str] = self._catalog.fetch_tables(self._config.schema_name)
            except SQLAlchemyError as exc:
                error_msg: str = (
                    f"Failed to list tables of schema '{self._config.schema_name}': {exc}"
                )
                report.generation_errors.append(error_msg)
                logger.error(error_msg)
                tables = []

        report.step_metrics.append(GenerationStepMetric(
            step_name="Resolve Tables",
            success=bool(tables),
            elapsed_seconds=t.elapsed,
            detail=f"{len(tables)} table(s) in '{self._config.schema_name}'",
        ))
        return tables

    def _step_assemble(
        self,
        tables: List[str],
        enums: EnumRegistry,
        report: GenerationReport,
    ) -> List[TableSchemaResult]:
        """Assemble every table; a failing table is skipped, not fatal."""
        results: List[TableSchemaResult] = []

        with Timer("assemble") as t:
            for table_name in tables:
                result: Optional[TableSchemaResult] = self._assemble_one(
                    table_name, enums, report
                )
                if result is None:
                    report.skipped_tables.append(table_name)
                    continue
                results.append(result)
                report.tables.append(TableReport.from_result(result))

        report.step_metrics.append(GenerationStepMetric(
            step_name="Assemble Schemas",
            success=len(results) == len(tables),
            elapsed_seconds=t.elapsed,
            detail=f"{len(results)}/{len(tables)} table(s)",
        ))
        return results

    def _assemble_one(
        self,
        table_name: str,
        enums: EnumRegistry,
        report: GenerationReport,
    ) -> Optional[TableSchemaResult]:
        file_check: ValidationResult = validate_schema_file_name(table_name)
        if not file_check.is_valid:
            self._record_validation_errors(file_check, report)
            return None

        try:
            columns: List[ColumnMetadata] = self._catalog.fetch_columns(
                table_name, self._config.schema_name
            )
        except SQLAlchemyError as exc:
            error_msg: str = f"Failed to read columns of '{table_name}': {exc}"
            report.generation_errors.append(error_msg)
            logger.error(error_msg)
            return None

        if not columns:
            error_msg = (
                f"Table '{table_name}' not found in schema '{self._config.schema_name}'."
            )
            report.generation_errors.append(error_msg)
            logger.error(error_msg)
            return None

        checked: ValidationResult = validate_unique_column_names(table_name, columns)
        if not checked.is_valid:
            self._record_validation_errors(checked, report)
            return None

        return assemble_table_schema(table_name, columns, enums, self._config)

    @staticmethod
    def _record_validation_errors(
        checked: ValidationResult, report: GenerationReport
    ) -> None:
        report.generation_errors.extend(str(err) for err in checked.errors)
        for err in checked.errors:
            logger.error("%s", err)

    def _step_render(
        self,
        results: List[TableSchemaResult],
        report: GenerationReport,
    ) -> Dict[str, str]:
        with Timer("render") as t:
            files: Dict[str, str] = self._templates.generate_all(results)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Render Files",
            success=True,
            elapsed_seconds=t.elapsed,
            detail=f"{len(files)} file(s)",
        ))
        return files

    def _step_export(self, files: Dict[str, str], report: GenerationReport) -> None:
        exporter: SchemaExporter = SchemaExporter(
            Path(self._config.output), dry_run=self._config.dry_run
        )
        export_result: ExportResult = exporter.export(files)

        report.export_result = export_result
        report.total_files = export_result.total_files
        report.total_bytes = export_result.total_bytes
        report.total_lines = sum(record.line_count for record in export_result.files)
        report.export_errors.extend(export_result.errors)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Export to Filesystem",
            success=export_result.success,
            elapsed_seconds=export_result.elapsed_seconds,
            detail=(
                f"{export_result.total_files} files, "
                f"{export_result.total_bytes:,} bytes"
            ),
        ))

    # -----------------------------------------------------------------
    # Internal: finalise report
    # -----------------------------------------------------------------

    def _finalise_report(
        self,
        report: GenerationReport,
        total_elapsed: float,
    ) -> GenerationReport:
        report.total_elapsed_seconds = total_elapsed
        report.success = not report.generation_errors and not report.export_errors
        if report.success:
            logger.info(
                "Generation finished: %d table(s) in %.3fs.",
                report.total_tables_processed,
                total_elapsed,
            )
        else:
            logger.error(
                "Generation finished with %d error(s) in %.3fs.",
                len(report.generation_errors) + len(report.export_errors),
                total_elapsed,
            )
        return report


__all__: List[str] = [
    "SchemaGenerator",
    "GenerationReport",
    "GenerationStepMetric",
    "TableReport",
    "format_column_table",
]

logger.debug("pgtozod.generator loaded.")
