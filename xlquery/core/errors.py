# Error taxonomy; each category maps to one logged prefix in the REPL.
from enum import Enum, auto

class ErrorCategory(Enum):
    STARTUP = auto()
    INGESTION = auto()
    STATEMENT = auto()
    CELL = auto()
    EXPORT = auto()
    CONFIG = auto()
    INTERNAL = auto()

class XlQueryError(Exception):
    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(self, message: str, *, category: ErrorCategory | None = None):
        super().__init__(message)
        if category:
            self.category = category

class StoreError(XlQueryError):
    """The embedded store could not be opened (fatal at startup)."""
    category = ErrorCategory.STARTUP

class IngestionError(XlQueryError):
    category = ErrorCategory.INGESTION

class StatementError(XlQueryError):
    category = ErrorCategory.STATEMENT

class CellReadError(XlQueryError):
    category = ErrorCategory.CELL

class ExportError(XlQueryError):
    category = ErrorCategory.EXPORT

class ConfigError(XlQueryError):
    category = ErrorCategory.CONFIG

__all__ = [
    'ErrorCategory', 'XlQueryError', 'StoreError', 'IngestionError',
    'StatementError', 'CellReadError', 'ExportError', 'ConfigError',
]
