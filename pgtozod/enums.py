# File: pgtozod/enums.py
"""
pgtozod - Enum Registry
========================
Read-only mapping from enum type name to its ordered labels, built once per
run from the catalog's enum rows and shared by every table.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from pgtozod.models import EnumRow

logger: logging.Logger = logging.getLogger("pgtozod.enums")


class EnumRegistry:
    """
    Enum type name → labels in declaration order.

    Types appear in first-seen order; a type never maps to an empty tuple.
    """

    __slots__ = ("_labels",)

    def __init__(self, labels: Optional[Mapping[str, Iterable[str]]] = None) -> None:
        self._labels: Dict[str, Tuple[str, ...]] = {}
        for type_name, values in (labels or {}).items():
            values = tuple(values)
            if values:
                self._labels[type_name] = values

    @classmethod
    def build(cls, rows: Iterable[EnumRow]) -> "EnumRegistry":
        """
        Group enum rows by type name.

        Rows must already be ordered by sort order within each type; they are
        grouped, never re-sorted.
        """
        grouped: Dict[str, List[str]] = {}
        for row in rows:
            grouped.setdefault(row.type_name, []).append(row.label)

        registry = cls(grouped)
        logger.debug(
            "Enum registry built: %d type(s), %d label(s).",
            len(registry),
            sum(len(v) for v in registry._labels.values()),
        )
        return registry

    def has(self, type_name: str) -> bool:
        return type_name in self._labels

    def labels_of(self, type_name: str) -> Tuple[str, ...]:
        """Labels of *type_name*; raises ``KeyError`` for unknown types."""
        try:
            return self._labels[type_name]
        except KeyError:
            raise KeyError(f"Enum type '{type_name}' is not registered.") from None

    @property
    def type_names(self) -> Tuple[str, ...]:
        return tuple(self._labels)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._labels

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def __repr__(self) -> str:
        return f"<EnumRegistry {len(self._labels)} type(s)>"


__all__: List[str] = ["EnumRegistry"]
