from __future__ import annotations

import logging
import os
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

LOG_FORMAT_ENV = "INDICATOR_BROWSER_LOG_FORMAT"
LOG_LEVEL_ENV = "INDICATOR_BROWSER_LOG_LEVEL"

_PLAIN_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
_JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"

# request lines from the Dash dev server drown out our own records
_NOISY_LOGGERS = ("werkzeug",)


def _resolve_level(level: Optional[Union[int, str]]) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def _build_formatter(format_mode: str) -> logging.Formatter:
    if format_mode == "plain":
        return logging.Formatter(_PLAIN_FORMAT)
    return jsonlogger.JsonFormatter(
        _JSON_FIELDS,
        rename_fields={"levelname": "level", "name": "logger"},
    )


def configure_logging(
        level: Optional[Union[int, str]] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Set up the root logger once at startup.

    Output is JSON lines (one object per record, `extra=` fields included)
    unless plain text is asked for. `force_format` beats the
    INDICATOR_BROWSER_LOG_FORMAT env var; `level` beats
    INDICATOR_BROWSER_LOG_LEVEL. Existing root handlers are replaced.
    """
    format_mode = (force_format or os.getenv(LOG_FORMAT_ENV, "json")).lower()

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(format_mode))

    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
