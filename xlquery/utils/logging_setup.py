"""Logging configuration for xlquery application."""
from __future__ import annotations
import logging
import sys
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'

def configure_logging(level: str = "INFO",
                      log_file: Optional[str] = None,
                      format_str: Optional[str] = None) -> None:
    """Configure the root logger once for the whole process.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to also write logs to
        format_str: Optional custom format string
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    formatter = logging.Formatter(format_str or DEFAULT_FORMAT)
    handlers = []

    # Logs go to stderr so result tables on stdout stay clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            print(f"Warning: Could not configure log file: {e}", file=sys.stderr)
        else:
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    logging.getLogger("duckdb").setLevel(logging.WARNING)