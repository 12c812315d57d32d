# File: pgtozod/exporters.py
"""
pgtozod - Schema Exporter (File-System Manager)
================================================

Responsible for:
    1. Creating the output directory.
    2. Writing rendered schema files atomically (write-to-temp then rename).
    3. Recording what was written (size, line count, checksum).

A failed write is recorded and the remaining files are still written;
files written earlier in the batch stay in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from pgtozod.utils import Timer, atomic_write, count_lines, ensure_directory, sha256_hex

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pgtozod.exporters")


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single exported file."""

    relative_path: str
    absolute_path: str
    size_bytes: int
    line_count: int
    sha256: str
    written: bool = True


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Final result returned by ``SchemaExporter.export()``."""

    success: bool
    files: Tuple[FileRecord, ...]
    errors: Tuple[str, ...]
    elapsed_seconds: float

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_bytes(self) -> int:
        return sum(f.size_bytes for f in self.files)


# ---------------------------------------------------------------------------
# SchemaExporter class
# ---------------------------------------------------------------------------


class SchemaExporter:
    """
    Writes rendered files under one output directory.

    Usage::

        exporter = SchemaExporter(Path("./schemas"))
        result = exporter.export({"users.ts": "..."})

    With ``dry_run=True`` nothing touches the disk but the records are still
    produced.  Not thread-safe; use one exporter per output directory.
    """

    def __init__(
        self,
        output_dir: Path,
        *,
        dry_run: bool = False,
        atomic_writes: bool = True,
    ) -> None:
        self._output_dir: Path = output_dir.resolve()
        self._dry_run: bool = dry_run
        self._atomic_writes: bool = atomic_writes

        logger.debug(
            "SchemaExporter initialised: output_dir=%s, dry_run=%s.",
            self._output_dir,
            self._dry_run,
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def export(self, files: Dict[str, str]) -> ExportResult:
        """
        Write every ``relative_path → content`` pair.

        Returns:
            ExportResult with one FileRecord per file that was handled.
        """
        records: List[FileRecord] = []
        errors: List[str] = []

        with Timer("export") as timer:
            if not self._dry_run:
                try:
                    ensure_directory(self._output_dir)
                except OSError as exc:
                    errors.append(
                        f"Failed to create directory {self._output_dir}: {exc}"
                    )

            if not errors:
                for rel_path, content in files.items():
                    try:
                        records.append(self._write_single_file(rel_path, content))
                    except OSError as exc:
                        error_msg: str = (
                            f"Failed to write {rel_path}: {type(exc).__name__}: {exc}"
                        )
                        errors.append(error_msg)
                        logger.error(error_msg)

        if errors:
            logger.error(
                "Export completed with %d error(s) in %.3fs.",
                len(errors),
                timer.elapsed,
            )
        else:
            logger.info(
                "Export completed: %d file(s) to %s in %.3fs.",
                len(records),
                self._output_dir,
                timer.elapsed,
            )

        return ExportResult(
            success=not errors,
            files=tuple(records),
            errors=tuple(errors),
            elapsed_seconds=timer.elapsed,
        )

    def _write_single_file(self, rel_path: str, content: str) -> FileRecord:
        full_path: Path = self._output_dir / rel_path
        encoded: bytes = content.encode("utf-8")

        if not self._dry_run:
            if self._atomic_writes:
                atomic_write(full_path, encoded)
            else:
                full_path.write_bytes(encoded)
            logger.info("Added schema to the output directory: %s", full_path)

        return FileRecord(
            relative_path=rel_path,
            absolute_path=str(full_path),
            size_bytes=len(encoded),
            line_count=count_lines(content),
            sha256=sha256_hex(content),
            written=not self._dry_run,
        )


__all__: List[str] = [
    "SchemaExporter",
    "ExportResult",
    "FileRecord",
]

logger.debug("pgtozod.exporters loaded.")
