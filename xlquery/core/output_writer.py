"""CSV export of a rendered result table."""
from __future__ import annotations
import logging
from typing import List, Optional

import pandas as pd

from xlquery.core.errors import ExportError
from xlquery.core.table_render import RenderedTable

logger = logging.getLogger(__name__)


def strip_grouping(text: str) -> str:
    """Drop thousands-grouping commas so ``1,234`` is written as ``1234``."""
    return text.replace(',', '')


def csv_records(table: RenderedTable) -> List[List[str]]:
    """Every table row, header first, with grouping commas removed.

    Rows that lost a cell are padded with empty fields to the header width.
    """
    width = len(table.columns)
    records = []
    for row in table:
        record = [strip_grouping(cell) for cell in row[:width]]
        record.extend([''] * (width - len(record)))
        records.append(record)
    return records


def export_csv(table: RenderedTable, path: str, log: Optional[logging.Logger] = None) -> int:
    """Write ``table`` to ``path`` (created or truncated), header included.

    The file is always plain CSV whatever its extension. Returns the number
    of records written. Raises ``ExportError`` when the destination cannot
    be written.
    """
    log = log or logger
    records = csv_records(table)
    # Header is the first record, so pandas must not add its own
    frame = pd.DataFrame(records, dtype=object)
    try:
        frame.to_csv(path, index=False, header=False, lineterminator='\n', compression=None)
    except (OSError, ValueError, ImportError) as e:
        raise ExportError(f"{path}: {e}") from e
    log.info("Export csv successfully at file %s", path)
    return len(records)
