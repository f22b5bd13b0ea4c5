"""Constants used throughout the xlquery package."""

# Inline export directive: `<sql> |out=<path>`
EXPORT_MARKER = '|out='

PROMPT = '[SQL] >> '

# Lines kept in the session and written to the history file
DEFAULT_HISTORY_LENGTH = 1000

# Display tokens for cells that have no textual value of their own
NULL_TOKEN = 'NULL'
BLOB_TOKEN = 'BLOB'

# Store schema
TABLE_NAME = 'excel_rows'
SCHEMA_COLUMNS = [
    'service_name',
    'average_response_time_95_ms',
    'count',
    'max_response_time_95_ms',
    'min_response_time_95_ms',
]

CREATE_TABLE_SQL = f"""
CREATE TABLE {TABLE_NAME} (
    service_name VARCHAR NOT NULL,
    average_response_time_95_ms DOUBLE NOT NULL,
    count BIGINT NOT NULL,
    max_response_time_95_ms DOUBLE NOT NULL,
    min_response_time_95_ms DOUBLE NOT NULL
)
"""

CREATE_INDEX_SQL = f"CREATE UNIQUE INDEX idx_service_name ON {TABLE_NAME} (service_name)"

INSERT_ROW_SQL = f"""
INSERT INTO {TABLE_NAME} (
    service_name,
    average_response_time_95_ms,
    count,
    max_response_time_95_ms,
    min_response_time_95_ms
)
VALUES (
    $service_name,
    $average_response_time_95_ms,
    $count,
    $max_response_time_95_ms,
    $min_response_time_95_ms
)
"""

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
