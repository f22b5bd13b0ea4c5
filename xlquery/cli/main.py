"""CLI entry for xlquery.

Loads one worksheet into an in-memory table named ``excel_rows`` and opens
the SQL prompt over it:

  xlquery -f report.xlsx -s Services
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from xlquery import __version__
from xlquery.cli.repl import start_repl
from xlquery.core.sheet_io import ingest
from xlquery.core.sql_engine import Store
from xlquery.core.errors import ConfigError, StoreError
from xlquery.utils.config import Config, to_positive_int
from xlquery.utils.constants import LOG_LEVELS, TABLE_NAME
from xlquery.utils.logging_setup import configure_logging
from xlquery.utils.profiler import profiler

logger = logging.getLogger(__name__)

BANNER = r"""
      _
__  _| | __ _ _   _  ___ _ __ _   _
\ \/ / |/ _` | | | |/ _ \ '__| | | |
 >  <| | (_| | |_| |  __/ |  | |_| |
/_/\_\_|\__, |\__,_|\___|_|   \__, |
           |_|                |___/
    SQL over one Excel worksheet
"""


def _positive_int(text: str) -> int:
    try:
        return to_positive_int(text)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog='xlquery', description='Query an Excel worksheet with SQL')
    p.add_argument('-f', '--file', dest='file_name', required=True, help='The file name of the excel')
    p.add_argument('-s', '--sheet', dest='sheet_name', required=True, help='The sheet name of the excel')
    p.add_argument('--log-level', choices=LOG_LEVELS, help='Logging level (default: config or INFO)')
    p.add_argument('--log-file', help='Also write logs to this file')
    p.add_argument('--history-file', help='Prompt history file (default: config history_file)')
    p.add_argument('--no-history', action='store_true', help='Do not load or save prompt history')
    p.add_argument('--no-group-digits', action='store_true', help='Print numbers without thousands separators')
    p.add_argument('--max-col-width', type=_positive_int, help='Truncate displayed cells to this width')
    p.add_argument('--no-banner', action='store_true', help='Suppress banner on start')
    p.add_argument('--profile', action='store_true', help='Print timing statistics on exit')
    p.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return p


def resolve_settings(args: argparse.Namespace, config: Config) -> None:
    """Fold config-file and environment settings into ``args`` (flags win)."""
    if args.log_level is None:
        level = str(config.get('log_level') or 'INFO').upper()
        args.log_level = level if level in LOG_LEVELS else 'INFO'
    if args.no_history or not config.get('history_enabled', True):
        args.history_file = None
    elif args.history_file is None:
        args.history_file = config.get('history_file')
    args.group_digits = not args.no_group_digits and bool(config.get('group_digits', True))
    if args.max_col_width is None:
        args.max_col_width = config.get('max_col_width')
    args.history_length = config.get('history_length')
    args.profile = args.profile or bool(config.get('profiling_enabled', False))


def main(argv: Optional[List[str]] = None, config: Optional[Config] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    resolve_settings(args, config or Config())
    configure_logging(args.log_level, log_file=args.log_file)
    profiler.enabled = args.profile

    try:
        store = Store.open()
    except StoreError as e:
        logger.critical("Store error: %s", e)
        sys.exit(1)

    # Ingestion failures are logged inside; the prompt still opens
    ingest(store, args.file_name, args.sheet_name)

    if not args.no_banner:
        print(BANNER)
        print(f"xlquery {__version__}: query table '{TABLE_NAME}' "
              f"from {args.file_name} [{args.sheet_name}]")
    try:
        code = start_repl(
            store,
            history_file=args.history_file,
            group_digits=args.group_digits,
            max_col_width=args.max_col_width,
            history_length=args.history_length,
        )
    except KeyboardInterrupt:
        logging.warning("Operation interrupted by user")
        code = 130
    profiler.print_report()
    sys.exit(code)


if __name__ == '__main__':
    main()
