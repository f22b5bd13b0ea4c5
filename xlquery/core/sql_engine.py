"""In-memory DuckDB store holding the ingested worksheet."""
from __future__ import annotations
from typing import Any, Dict, Iterator, List, Optional, Tuple
import logging
import duckdb

from xlquery.core.errors import StoreError, StatementError
from xlquery.utils.constants import CREATE_TABLE_SQL, CREATE_INDEX_SQL

logger = logging.getLogger(__name__)


class ResultSet:
    """Column names plus lazily fetched rows of one statement."""

    def __init__(self, columns: List[str], cursor: Optional[duckdb.DuckDBPyConnection]):
        self.columns = columns
        self._cursor = cursor

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        if self._cursor is None:
            return
        while True:
            try:
                row = self._cursor.fetchone()
            except duckdb.Error as e:
                raise StatementError(str(e)) from e
            if row is None:
                return
            yield row


class Store:
    """Owns the single DuckDB connection for the lifetime of a session."""

    def __init__(self, con: duckdb.DuckDBPyConnection):
        self.con = con

    @classmethod
    def open(cls) -> "Store":
        try:
            con = duckdb.connect(database=':memory:')
        except duckdb.Error as e:
            raise StoreError(f"Cannot open in-memory store: {e}") from e
        return cls(con)

    def create_schema(self) -> None:
        """Create the ``excel_rows`` table and its unique service-name index."""
        self.execute(CREATE_TABLE_SQL)
        self.execute(CREATE_INDEX_SQL)

    def execute(self, sql: str, params: Optional[Dict[str, Any]] = None) -> None:
        try:
            if params is None:
                self.con.execute(sql)
            else:
                self.con.execute(sql, params)
        except duckdb.Error as e:
            raise StatementError(str(e)) from e

    def query(self, sql: str) -> ResultSet:
        """Run ``sql`` and return its result set; rows are fetched on iteration."""
        if not sql.strip():
            return ResultSet([], None)
        try:
            cursor = self.con.execute(sql)
        except duckdb.Error as e:
            raise StatementError(str(e)) from e
        # Comment-only or empty input runs no statement and has no result
        description = cursor.description if cursor is not None else None
        if not description:
            return ResultSet([], None)
        return ResultSet([str(d[0]) for d in description], cursor)

    def close(self) -> None:
        try:
            self.con.close()
        except duckdb.Error as e:
            logger.warning("Failed to close store: %s", e)
