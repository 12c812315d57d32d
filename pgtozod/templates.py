# File: pgtozod/templates.py
"""
pgtozod - Schema File Templates
================================
Turns assembled ``TableSchemaResult`` objects into TypeScript source:

    1. ``<table>.ts``  - one ``z.object`` schema plus its inferred type
    2. ``types.ts``    - the custom constructs the schemas refer to by name

All string assembly uses the ``List[str]`` + ``"\\n".join()`` pattern and
the generator holds no per-table state.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Set

from pgtozod.assembler import TableSchemaResult
from pgtozod.expressions import ZodRenderer, custom_names, js_string
from pgtozod.type_mapper import DATE_ONLY, UTC_DATE, UUID_STRING
from pgtozod.utils import to_js_identifier, to_type_name

logger: logging.Logger = logging.getLogger("pgtozod.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TYPES_MODULE: str = "types"
TYPES_FILE_NAME: str = f"{TYPES_MODULE}.ts"
SCHEMA_FILE_SUFFIX: str = ".ts"

_INDENT: str = "  "
_JS_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Order in which custom constructs are declared in types.ts and imported.
_CUSTOM_CONSTRUCTS: List[str] = [UTC_DATE, DATE_ONLY, UUID_STRING]

_TYPES_FILE_LINES: List[str] = [
    "import { z } from 'zod';",
    "",
    "const UUID_PATTERN =",
    "  /^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$/i;",
    "",
    "const toDate = (value: unknown): Date | null => {",
    "  if (value instanceof Date) {",
    "    return Number.isNaN(value.getTime()) ? null : value;",
    "  }",
    "  if (typeof value === 'string' || typeof value === 'number') {",
    "    const date = new Date(value);",
    "    return Number.isNaN(date.getTime()) ? null : date;",
    "  }",
    "  return null;",
    "};",
    "",
    "/**",
    " * Date-like value re-expressed from its UTC calendar date and time of day.",
    " * Missing values default to the current instant.",
    " */",
    f"export const {UTC_DATE} = z",
    "  .unknown()",
    "  .transform((value, ctx) => {",
    "    const date = value === undefined ? new Date() : toDate(value);",
    "    if (date === null) {",
    "      ctx.addIssue({ code: z.ZodIssueCode.custom, message: 'Invalid date' });",
    "      return z.NEVER;",
    "    }",
    "    return new Date(",
    "      Date.UTC(",
    "        date.getUTCFullYear(),",
    "        date.getUTCMonth(),",
    "        date.getUTCDate(),",
    "        date.getUTCHours(),",
    "        date.getUTCMinutes(),",
    "        date.getUTCSeconds(),",
    "      ),",
    "    );",
    "  });",
    "",
    "/**",
    " * Date-like value without a time of day.",
    " */",
    f"export const {DATE_ONLY} = z",
    "  .unknown()",
    "  .transform((value, ctx) => {",
    "    const date = toDate(value);",
    "    if (",
    "      date === null ||",
    "      date.getUTCHours() !== 0 ||",
    "      date.getUTCMinutes() !== 0 ||",
    "      date.getUTCSeconds() !== 0 ||",
    "      date.getUTCMilliseconds() !== 0",
    "    ) {",
    "      ctx.addIssue({",
    "        code: z.ZodIssueCode.custom,",
    "        message: 'Invalid date, expected a date without a time component',",
    "      });",
    "      return z.NEVER;",
    "    }",
    "    return date;",
    "  });",
    "",
    "/**",
    " * Canonically formatted UUID string.",
    " */",
    f"export const {UUID_STRING} = (label: string) =>",
    "  z.string().regex(UUID_PATTERN, `${label} must be a valid UUID`);",
    "",
]


def object_key(field_name: str) -> str:
    """Object literal key; quoted unless it is a plain identifier."""
    if _JS_IDENTIFIER_RE.fullmatch(field_name):
        return field_name
    return js_string(field_name)


# ---------------------------------------------------------------------------
# TemplateGenerator class
# ---------------------------------------------------------------------------


class TemplateGenerator:
    """
    Renders schema files for assembled tables.

    Thread-safe: no mutable instance state.
    """

    def __init__(self, renderer: Optional[ZodRenderer] = None) -> None:
        self._renderer: ZodRenderer = renderer or ZodRenderer()

    @staticmethod
    def schema_file_name(table_name: str) -> str:
        return f"{table_name}{SCHEMA_FILE_SUFFIX}"

    def generate_table_schema(self, result: TableSchemaResult) -> str:
        """
        Generate the ``<table>.ts`` file for one table.

        Only the custom constructs actually used by the fields are imported.
        """
        schema_const: str = f"{to_js_identifier(result.table_name)}Schema"
        used: Set[str] = set()
        for entry in result.entries:
            used |= custom_names(entry.schema)

        lines: List[str] = ["import { z } from 'zod';"]
        imported: List[str] = [name for name in _CUSTOM_CONSTRUCTS if name in used]
        if imported:
            lines.append(
                f"import {{ {', '.join(imported)} }} from './{TYPES_MODULE}';"
            )
        lines.append("")

        lines.append(f"export const {schema_const} = z.object({{")
        for entry in result.entries:
            key: str = object_key(entry.field_name)
            lines.append(f"{_INDENT}{key}: {self._renderer.render(entry.schema)},")
        lines.append("});")
        lines.append("")
        lines.append(
            f"export type {to_type_name(result.table_name)} = "
            f"z.infer<typeof {schema_const}>;"
        )
        lines.append("")

        logger.debug(
            "Rendered schema for '%s' (%d fields).",
            result.table_name,
            result.processed_count,
        )
        return "\n".join(lines)

    def generate_types_file(self) -> str:
        """Generate ``types.ts`` with the custom Zod constructs."""
        return "\n".join(_TYPES_FILE_LINES)

    def generate_all(self, results: List[TableSchemaResult]) -> Dict[str, str]:
        """
        Render every table plus the auxiliary file.

        Returns a dict of relative_path → file_content.
        """
        files: Dict[str, str] = {}
        for result in results:
            files[self.schema_file_name(result.table_name)] = (
                self.generate_table_schema(result)
            )
        files[TYPES_FILE_NAME] = self.generate_types_file()
        logger.info("Rendered %d file(s).", len(files))
        return files


__all__: List[str] = [
    "TYPES_FILE_NAME",
    "object_key",
    "TemplateGenerator",
]

logger.debug("pgtozod.templates loaded.")
