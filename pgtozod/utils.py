# File: pgtozod/utils.py
"""
pgtozod - Utility Functions & Helpers
======================================
Identifier transformation, file I/O and timing helpers used throughout the
generation pipeline.

- String-conversion functions are decorated with ``@lru_cache(maxsize=None)``
  because the same column names are transformed several times per run
  (field name, readable label, console report).
- File I/O helpers use atomic rename for safety.
- No external dependencies beyond the Python standard library.
"""

from __future__ import annotations

import functools
import hashlib
import logging
import os
import re
import tempfile
import time
from pathlib import Path
from typing import List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pgtozod.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (compiled once at module load)
# ---------------------------------------------------------------------------

_UNDERSCORE_LOWER_RE: re.Pattern[str] = re.compile(r"_([a-z])")
_NON_JS_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9_$]")


# ---------------------------------------------------------------------------
# Cached identifier transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def to_field_name(name: str) -> str:
    """
    Convert a snake_case SQL identifier to a camelCase field name.

    Only an underscore followed by a lowercase letter is collapsed; every
    other character is left untouched.

    Examples:
        >>> to_field_name("user_id")
        'userId'
        >>> to_field_name("id")
        'id'
        >>> to_field_name("line_2")
        'line_2'
    """
    return _UNDERSCORE_LOWER_RE.sub(lambda m: m.group(1).upper(), name)


def capitalize_first(value: str) -> str:
    """Upper-case the first character and leave the rest alone."""
    if not value:
        return ""
    return value[0].upper() + value[1:]


@functools.lru_cache(maxsize=None)
def to_readable_label(name: str) -> str:
    """
    Convert a snake_case column name to a label for validation messages.

    A trailing ``id`` (any case) is dropped, then the words are capitalised
    and joined with single spaces.

    Examples:
        >>> to_readable_label("user_id")
        'User'
        >>> to_readable_label("first_name")
        'First Name'
        >>> to_readable_label("")
        ''
    """
    stem: str = name
    if name.lower().endswith("id"):
        stem = name[:-2]
    words: List[str] = [w for w in stem.strip().split("_") if w]
    return " ".join(capitalize_first(w) for w in words)


@functools.lru_cache(maxsize=None)
def to_js_identifier(name: str) -> str:
    """
    Turn a table name into a usable TypeScript identifier.

    ``order_items`` → ``orderItems``, ``audit-log`` → ``audit_log``.
    """
    ident: str = _NON_JS_IDENTIFIER_RE.sub("_", to_field_name(name))
    if ident and ident[0].isdigit():
        ident = f"_{ident}"
    return ident


@functools.lru_cache(maxsize=None)
def to_type_name(name: str) -> str:
    """
    Name of the exported inferred type.

    ``users`` → ``UsersType``, ``order_items`` → ``OrderItemsType``.
    """
    return f"{capitalize_first(to_js_identifier(name))}Type"


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def atomic_write(target_path: Path, data: bytes) -> None:
    """
    Write *data* to *target_path* through a temporary file in the same
    directory followed by ``os.replace``.

    The temporary file is removed and the error re-raised if anything fails.
    """
    fd: int = -1
    tmp_path: str = ""
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(target_path.parent),
            prefix=f".{target_path.name}.",
            suffix=".tmp",
        )
        os.write(fd, data)
        os.fsync(fd)
        os.close(fd)
        fd = -1

        os.replace(tmp_path, str(target_path))
    except BaseException:
        if fd >= 0:
            try:
                os.close(fd)
            except OSError:
                pass
        if tmp_path and os.path.exists(tmp_path):
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling generation steps.

    Usage:
        with Timer("fetch enums") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "to_field_name",
    "to_readable_label",
    "to_js_identifier",
    "to_type_name",
    "capitalize_first",
    "ensure_directory",
    "atomic_write",
    "sha256_hex",
    "count_lines",
    "Timer",
]

logger.debug("pgtozod.utils loaded - %d public symbols.", len(__all__))
