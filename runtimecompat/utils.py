"""Utility functions for runtimecompat."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

from .exceptions import InvalidJSONError
from .models import LogLevel

_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}

CONSOLE_FORMAT = "%(levelname)s | %(message)s"


def configure_logging(level: LogLevel = LogLevel.INFO):
    """Send runtimecompat log records to stderr at the given level."""
    logging.basicConfig(format=CONSOLE_FORMAT, level=_LEVELS[level], force=True)


def load_json(path: str | Path) -> Any:
    """Load a JSON file; object key order is kept as written."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidJSONError(path, str(e)) from e


def write_json(path: str | Path, data: Any):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)


def write_csv(path: str | Path, rows: list[list]):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8', newline='') as f:
        csv.writer(f, lineterminator='\n').writerows(rows)
