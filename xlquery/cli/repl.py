r"""Interactive SQL prompt over the ingested worksheet.

Every line is sent to the store as SQL. Appending ``|out=<path>`` to a line
also writes the result table to a CSV file at ``<path>``:

  [SQL] >> SELECT * FROM excel_rows ORDER BY count DESC |out=top.csv

Ctrl-D or Ctrl-C leaves the prompt.
"""
from __future__ import annotations
from enum import Enum
from typing import Callable, List, Optional, TextIO
import logging
import os
import sys

from xlquery.core.directive import ExportDirective, parse_directive
from xlquery.core.errors import ExportError, StatementError
from xlquery.core.output_writer import export_csv
from xlquery.core.sql_engine import Store
from xlquery.core.table_render import RenderedTable, build_table, print_table
from xlquery.utils.constants import DEFAULT_HISTORY_LENGTH, PROMPT
from xlquery.utils.profiler import profiler

try:
    import readline  # type: ignore
except ImportError:  # pragma: no cover
    readline = None
# Attempt gnureadline fallback if readline missing
if readline is None:
    try:
        import gnureadline as readline  # type: ignore
    except ImportError:  # pragma: no cover
        readline = None

logger = logging.getLogger(__name__)


class LoopState(Enum):
    READING = 'reading'
    DISPATCHING = 'dispatching'
    EXECUTING = 'executing'
    RENDERING = 'rendering'
    EXPORTING = 'exporting'
    STOPPED = 'stopped'


class Session:
    """REPL session: owns the store connection and the line history."""

    def __init__(self,
                 store: Store,
                 history_file: Optional[str] = None,
                 group_digits: bool = True,
                 max_col_width: Optional[int] = None,
                 history_length: int = DEFAULT_HISTORY_LENGTH,
                 out: Optional[TextIO] = None,
                 log: Optional[logging.Logger] = None):
        self.store = store
        self.history_file = history_file
        self.group_digits = group_digits
        self.max_col_width = max_col_width
        self.history_length = history_length
        self.out = out or sys.stdout
        self.log = log or logger
        self.history: List[str] = []
        self.last_table: Optional[RenderedTable] = None
        self.state = LoopState.READING

    def load_history(self) -> None:
        if readline is None:
            return
        # Caps the file written by save_history
        readline.set_history_length(self.history_length)
        if not self.history_file:
            return
        try:
            readline.read_history_file(self.history_file)
        except OSError as e:
            print("No previous history.", file=self.out)
            self.log.debug("History not loaded from %s: %s", self.history_file, e)

    def save_history(self) -> None:
        if not self.history_file or readline is None:
            return
        try:
            readline.write_history_file(self.history_file)
        except OSError as e:
            self.log.warning("Failed to save history to %s: %s", self.history_file, e)

    def run_line(self, line: str) -> Optional[RenderedTable]:
        """Record ``line`` in the history, then run it through the pipeline."""
        self.history.append(line)
        del self.history[:-self.history_length]
        self.state = LoopState.DISPATCHING
        directive = parse_directive(line, log=self.log)
        try:
            return self.execute(directive)
        finally:
            self.state = LoopState.READING

    def execute(self, directive: ExportDirective) -> Optional[RenderedTable]:
        """Run the statement, print its table and export it when requested.

        Returns the rendered table, or None when the statement failed.
        """
        with profiler.profile("Query and Display"):
            self.state = LoopState.EXECUTING
            try:
                result = self.store.query(directive.sql)
                self.state = LoopState.RENDERING
                table = build_table(result.columns, result, group_digits=self.group_digits, log=self.log)
            except StatementError as e:
                self.log.error("Statement error: %s", e)
                return None
            print_table(table, max_col_width=self.max_col_width, out=self.out)
            self.last_table = table
            if directive.wants_export and not table.columns:
                self.log.warning("Nothing to export to %s: statement returned no columns", directive.destination)
            elif directive.wants_export:
                self.state = LoopState.EXPORTING
                try:
                    export_csv(table, directive.destination, log=self.log)
                except ExportError as e:
                    self.log.error("Create csv writer error: %s", e)
            return table

    def close(self) -> None:
        self.state = LoopState.STOPPED
        self.save_history()
        self.store.close()


def _read_input() -> str:
    return input(PROMPT)


def run_loop(sess: Session, read_line: Optional[Callable[[], str]] = None) -> int:
    """Read and run lines until end of input, interrupt or a read failure.

    Returns the process exit code (always 0; query errors never stop the loop).
    """
    read_line = read_line or _read_input
    while True:
        sess.state = LoopState.READING
        try:
            line = read_line()
        except KeyboardInterrupt:
            print("CTRL-C", file=sess.out)
            break
        except EOFError:
            print("CTRL-D", file=sess.out)
            break
        except Exception as e:
            print(f"Error: {e!r}", file=sess.out)
            sess.log.error("Input error: %s", e)
            break
        if not line.strip():
            continue
        sess.run_line(line)
    sess.state = LoopState.STOPPED
    return 0


def configure_readline() -> None:
    if readline is None:
        return
    try:
        # libedit (macOS default) needs a different binding than GNU readline
        docstr = getattr(readline, '__doc__', '') or ''
        if 'libedit' in docstr.lower():
            readline.parse_and_bind('bind ^I rl_complete')
        else:
            readline.parse_and_bind('tab: complete')
        readline.set_auto_history(True)
    except (AttributeError, OSError) as e:  # pragma: no cover
        logger.debug("readline configuration skipped: %s", e)


def start_repl(store: Store,
               history_file: Optional[str] = None,
               group_digits: bool = True,
               max_col_width: Optional[int] = None,
               history_length: int = DEFAULT_HISTORY_LENGTH) -> int:
    """Start the interactive prompt; the store is closed when it ends."""
    if history_file:
        history_file = os.path.expanduser(history_file)
    sess = Session(store, history_file=history_file, group_digits=group_digits,
                   max_col_width=max_col_width, history_length=history_length)
    configure_readline()
    sess.load_history()
    try:
        return run_loop(sess)
    finally:
        sess.close()
