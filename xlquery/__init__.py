"""xlquery package: query an Excel worksheet with SQL from an interactive prompt."""
from __future__ import annotations
from importlib import metadata
import pathlib
import re

PACKAGE_NAME = "xlquery"

def _read_pyproject_version() -> str | None:
    # Editable checkouts may not have installed metadata yet
    root = pathlib.Path(__file__).resolve().parent.parent
    pyproject = root / "pyproject.toml"
    try:
        text = pyproject.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None
    m = re.search(r'^version\s*=\s*"([^"]+)"', text, flags=re.MULTILINE)
    return m.group(1) if m else None

try:
    __version__ = metadata.version(PACKAGE_NAME)
except metadata.PackageNotFoundError:
    __version__ = _read_pyproject_version() or "0.0.0.dev0"

__all__ = ["__version__"]
