"""Build the in-memory result table and print it as a text grid."""
from __future__ import annotations
import logging
import sys
import unicodedata
from typing import Any, Iterable, List, Optional, Sequence, TextIO

from xlquery.core.cells import read_cell, format_cell
from xlquery.core.errors import CellReadError

logger = logging.getLogger(__name__)


class RenderedTable:
    """Header row plus data rows, every entry already a display string.

    The same structure feeds the terminal grid and the CSV exporter.
    """

    def __init__(self, columns: Sequence[str]):
        self.columns = [str(c) for c in columns]
        self.rows: List[List[str]] = [list(self.columns)]

    def add_row(self, cells: List[str]) -> None:
        self.rows.append(cells)

    @property
    def data_rows(self) -> List[List[str]]:
        return self.rows[1:]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)


def build_table(columns: Sequence[str],
                rows: Iterable[Sequence[Any]],
                group_digits: bool = True,
                log: Optional[logging.Logger] = None) -> RenderedTable:
    """Normalize every fetched row into a ``RenderedTable``.

    A cell that cannot be read is logged and left out; the rest of its row
    is still added.
    """
    log = log or logger
    table = RenderedTable(columns)
    width = len(table.columns)
    for row in rows:
        cells: List[str] = []
        for i in range(width):
            try:
                cell = read_cell(row, i)
            except CellReadError as e:
                log.error("Get value error: %s", e)
                continue
            cells.append(format_cell(cell, group_digits=group_digits))
        table.add_row(cells)
    return table


def disp_width(s: str) -> int:
    w = 0
    for ch in s:
        if unicodedata.east_asian_width(ch) in ('F', 'W'):
            w += 2
        elif not unicodedata.combining(ch):
            w += 1
    return w


def pad_right(s: str, width: int) -> str:
    extra = width - disp_width(s)
    if extra > 0:
        return s + ' ' * extra
    return s


def truncate(s: str, width: Optional[int]) -> str:
    if not width or disp_width(s) <= width:
        return s
    out = ''
    for ch in s:
        if disp_width(out + ch) > width - 1:
            break
        out += ch
    return out + '…'


def render_table(table: RenderedTable, max_col_width: Optional[int] = None) -> List[str]:
    """Lay the table out as grid lines (no trailing newlines).

    ``max_col_width`` truncates cells on screen only.
    """
    ncols = len(table.columns)
    display = []
    for row in table.rows:
        cells = [truncate(c.replace('\n', ' '), max_col_width) for c in row[:ncols]]
        # Rows that lost a cell are padded on screen only
        cells.extend([''] * (ncols - len(cells)))
        display.append(cells)
    widths = [max(disp_width(r[i]) for r in display) for i in range(ncols)]

    border = '+' + '+'.join('-' * (w + 2) for w in widths) + '+'

    def line(cells: List[str]) -> str:
        return '|' + '|'.join(' ' + pad_right(c, w) + ' ' for c, w in zip(cells, widths)) + '|'

    lines = [border, line(display[0]), border]
    for cells in display[1:]:
        lines.append(line(cells))
    if len(display) > 1:
        lines.append(border)
    n = len(table.data_rows)
    lines.append(f"({n} row{'s' if n != 1 else ''})")
    return lines


def print_table(table: RenderedTable, max_col_width: Optional[int] = None, out: Optional[TextIO] = None) -> None:
    out = out or sys.stdout
    if not table.columns:
        print('OK', file=out)
        return
    for text in render_table(table, max_col_width=max_col_width):
        print(text, file=out)
