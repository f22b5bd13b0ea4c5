"""Inline export directive parsing.

Grammar of one REPL line::

    line := <sql> [ '|out=' <path> ]

The SQL is everything before the first marker. When the marker occurs more
than once the path is taken from the text after the last one.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from xlquery.utils.constants import EXPORT_MARKER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportDirective:
    sql: str
    destination: Optional[str] = None

    @property
    def wants_export(self) -> bool:
        return self.destination is not None


def parse_directive(line: str, log: Optional[logging.Logger] = None) -> ExportDirective:
    """Split ``line`` into the SQL to run and an optional CSV destination."""
    log = log or logger
    head, marker, _ = line.partition(EXPORT_MARKER)
    if not marker:
        return ExportDirective(sql=line)
    destination = line.rpartition(EXPORT_MARKER)[2].strip()
    if not destination:
        log.warning("Export marker without a file path; running query without export")
        return ExportDirective(sql=head)
    log.info("Require export: with parameter %s", destination)
    return ExportDirective(sql=head, destination=destination)
