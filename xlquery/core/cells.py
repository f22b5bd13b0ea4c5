"""Cell classification and display formatting.

The store hands back plain Python values. Every value is first classified
into one of five storage kinds, then turned into the text shown in the
result table (and later written to CSV).
"""
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Sequence

from xlquery.core.errors import CellReadError
from xlquery.utils.constants import NULL_TOKEN, BLOB_TOKEN


class CellKind(Enum):
    NULL = 'null'
    INTEGER = 'integer'
    REAL = 'real'
    TEXT = 'text'
    BLOB = 'blob'


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    value: Any = None

    @classmethod
    def from_value(cls, value: Any) -> "Cell":
        """Classify an engine value.

        Values outside the five storage kinds (dates, UUIDs, nested types)
        are carried as their ``str()`` text.
        """
        if value is None:
            return cls(CellKind.NULL)
        if isinstance(value, bool):
            return cls(CellKind.INTEGER, int(value))
        if isinstance(value, int):
            return cls(CellKind.INTEGER, value)
        if isinstance(value, (float, Decimal)):
            return cls(CellKind.REAL, value)
        if isinstance(value, str):
            return cls(CellKind.TEXT, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(CellKind.BLOB, bytes(value))
        return cls(CellKind.TEXT, str(value))


def read_cell(row: Sequence[Any], index: int) -> Cell:
    """Read the cell at ``index`` of a fetched row."""
    try:
        value = row[index]
    except (IndexError, KeyError, TypeError) as e:
        raise CellReadError(f"column index {index} unavailable: {e}") from e
    try:
        return Cell.from_value(value)
    except (TypeError, ValueError) as e:
        raise CellReadError(f"column index {index} has unreadable value: {e}") from e


def _format_number(value: Any, group_digits: bool) -> str:
    if group_digits:
        return format(value, ',')
    return str(value)


def format_cell(cell: Cell, group_digits: bool = True) -> str:
    """Map a cell to its display string.

    With ``group_digits`` the integer part of numbers is grouped with commas
    (``1234567.5`` -> ``1,234,567.5``); the CSV exporter strips them again.
    """
    kind = cell.kind
    if kind is CellKind.NULL:
        return NULL_TOKEN
    if kind is CellKind.INTEGER or kind is CellKind.REAL:
        return _format_number(cell.value, group_digits)
    if kind is CellKind.TEXT:
        return cell.value
    if kind is CellKind.BLOB:
        return BLOB_TOKEN
    raise ValueError(f"Unhandled cell kind: {kind}")  # pragma: no cover
