"""Worksheet loading and bulk import into the store."""
from __future__ import annotations
import logging
import math
import numbers
import os
import zipfile
from dataclasses import dataclass, asdict
from typing import Any, List, Optional, Sequence

import pandas as pd

from xlquery.core.errors import IngestionError, StatementError
from xlquery.core.sql_engine import Store
from xlquery.utils.constants import INSERT_ROW_SQL, SCHEMA_COLUMNS
from xlquery.utils.profiler import profiler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SheetRow:
    service_name: str
    average_response_time_95_ms: float
    count: int
    max_response_time_95_ms: float
    min_response_time_95_ms: float


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _as_float(value: Any) -> float:
    """Numeric cells as float; anything else counts as 0.0."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or _is_missing(value):
        return 0.0
    return float(value)


def _as_int(value: Any) -> int:
    """Integral numeric cells as int; anything else counts as 0."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or _is_missing(value):
        return 0
    as_float = float(value)
    if math.isinf(as_float) or not as_float.is_integer():
        return 0
    return int(as_float)


def _cell(values: Sequence[Any], idx: int) -> Any:
    return values[idx] if idx < len(values) else None


def row_from_values(values: Sequence[Any], line_no: int) -> SheetRow:
    """Build a row from the positional cells of one worksheet line.

    ``line_no`` is the 1-based worksheet row, used in error messages.
    """
    name = _cell(values, 0)
    if _is_missing(name) or str(name).strip() == "":
        raise IngestionError(f"Row {line_no}: missing service_name")
    if isinstance(name, float) and name.is_integer():
        name = int(name)
    return SheetRow(
        service_name=str(name),
        average_response_time_95_ms=_as_float(_cell(values, 1)),
        count=_as_int(_cell(values, 2)),
        max_response_time_95_ms=_as_float(_cell(values, 3)),
        min_response_time_95_ms=_as_float(_cell(values, 4)),
    )


def load_sheet_rows(path: str, sheet_name: str) -> List[SheetRow]:
    """Read ``sheet_name`` from the workbook at ``path``.

    The first worksheet row is the header and is skipped. Data columns are
    taken by position in the order of the ``excel_rows`` schema.
    """
    logger.debug("Loading excel with file name: %s and sheet name: %s", path, sheet_name)
    if not os.path.isfile(path):
        raise IngestionError(f"Input file not found: {path}")
    with profiler.profile("Load Excel"):
        try:
            with pd.ExcelFile(path) as xls:
                if sheet_name not in xls.sheet_names:
                    raise IngestionError(
                        "Sheet '%s' not found. Available sheets: %s" % (sheet_name, ", ".join(xls.sheet_names)))
                df = xls.parse(sheet_name, header=0)
        except IngestionError:
            raise
        except (OSError, ValueError, KeyError, ImportError, zipfile.BadZipFile) as e:
            raise IngestionError(f"Cannot read workbook {path}: {e}") from e
        # Excel data starts on line 2, after the header
        return [row_from_values(list(values), idx + 2)
                for idx, values in enumerate(df.itertuples(index=False, name=None))]


def import_rows(store: Store, rows: Sequence[SheetRow], log: Optional[logging.Logger] = None) -> int:
    """Insert rows one statement at a time; rows before a failure stay inserted."""
    log = log or logger
    with profiler.profile("Import data"):
        for row in rows:
            store.execute(INSERT_ROW_SQL, asdict(row))
            log.debug("Insert excel row: %s", row.service_name)
    return len(rows)


def ingest(store: Store, path: str, sheet_name: str, log: Optional[logging.Logger] = None) -> bool:
    """Create the schema and load the worksheet into it.

    Every failure is logged and swallowed so the REPL can still start over
    whatever part of the store was created.
    """
    log = log or logger
    try:
        store.create_schema()
    except StatementError as e:
        log.error("Create Table Error: %s", e)
        return False
    log.info("Create table excel_rows successfully (%s)", ", ".join(SCHEMA_COLUMNS))
    try:
        rows = load_sheet_rows(path, sheet_name)
    except IngestionError as e:
        log.error("Load excel error: %s", e)
        return False
    log.info("Load excel successfully (%d rows)", len(rows))
    try:
        import_rows(store, rows, log=log)
    except StatementError as e:
        log.error("Import excel rows error: %s", e)
        return False
    log.info("Import excel rows successfully")
    return True
