"""Configuration management for xlquery application."""
from __future__ import annotations
from typing import Callable, Dict, Any, Mapping, Optional
import os
import json
import logging

from xlquery.core.errors import ConfigError
from xlquery.utils.constants import DEFAULT_HISTORY_LENGTH, LOG_LEVELS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "~/.xlquery_config.json"

# Default configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    "history_file": "history.txt",
    "history_enabled": True,
    "history_length": DEFAULT_HISTORY_LENGTH,
    "group_digits": True,
    "max_col_width": None,
    "log_level": "INFO",
    "profiling_enabled": False,
}

TRUE_WORDS = ("1", "true", "yes", "on")
FALSE_WORDS = ("0", "false", "no", "off")


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in TRUE_WORDS:
            return True
        if word in FALSE_WORDS:
            return False
    raise ConfigError(f"expected a boolean, got {value!r}")


def to_positive_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"expected a positive integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"expected a positive integer, got {value!r}")
    if isinstance(value, float) and value != number:
        raise ConfigError(f"expected a positive integer, got {value!r}")
    if number < 1:
        raise ConfigError(f"expected a positive integer, got {value!r}")
    return number


def to_optional_positive_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return to_positive_int(value)


def to_text(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"expected a non-empty string, got {value!r}")
    return value


def to_log_level(value: Any) -> str:
    level = str(value).strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"unknown log level {value!r}")
    return level


# Config key -> validator; a ConfigError drops the value and keeps the previous one
VALIDATORS: Dict[str, Callable[[Any], Any]] = {
    "history_file": to_text,
    "history_enabled": to_bool,
    "history_length": to_positive_int,
    "group_digits": to_bool,
    "max_col_width": to_optional_positive_int,
    "log_level": to_log_level,
    "profiling_enabled": to_bool,
}

# Environment variable -> config key
ENV_OVERRIDES = {
    "XLQUERY_HISTORY_FILE": "history_file",
    "XLQUERY_HISTORY_LENGTH": "history_length",
    "XLQUERY_GROUP_DIGITS": "group_digits",
    "XLQUERY_MAX_COL_WIDTH": "max_col_width",
    "XLQUERY_LOG": "log_level",
}


class Config:
    """Configuration manager for xlquery settings.

    Precedence, lowest first: built-in defaults, the JSON config file,
    ``XLQUERY_*`` environment variables, then whatever the CLI sets.
    Values that fail validation are logged and ignored.
    """

    def __init__(self, config_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
        self.settings: Dict[str, Any] = DEFAULT_CONFIG.copy()
        self.config_file = os.path.expanduser(config_file or DEFAULT_CONFIG_FILE)
        self._load_config()
        self._apply_env(os.environ if environ is None else environ)

    def _load_config(self) -> None:
        """Load configuration from file if exists."""
        if not os.path.exists(self.config_file):
            return
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load config %s: %s", self.config_file, e)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: expected a JSON object", self.config_file)
            return
        for key, value in data.items():
            try:
                self.set(key, value)
            except ConfigError as e:
                logger.warning("Ignoring config %s in %s: %s", key, self.config_file, e)

    def _apply_env(self, environ: Mapping[str, str]) -> None:
        for var, key in ENV_OVERRIDES.items():
            raw = environ.get(var)
            if raw is None or raw == "":
                continue
            try:
                self.set(key, raw)
            except ConfigError as e:
                logger.warning("Ignoring %s: %s", var, e)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self.settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Validate and set a configuration value; raises ``ConfigError``."""
        validate = VALIDATORS.get(key)
        self.settings[key] = validate(value) if validate else value
