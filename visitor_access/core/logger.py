"""
Logging setup for the visitor access service.

Every module logs through `visitor_access_logger` and passes structured
context with `extra={...}`. Set LOG_FORMAT=json to emit one JSON object per
record (extra fields included), otherwise a human-readable line is written.
"""

import json
import logging
import sys
from typing import Any

from visitor_access.core.config import get_log_format, get_log_level

# Attributes present on every LogRecord; anything else came in via `extra`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord('', logging.INFO, '', 0, '', None, None)).keys()
) | {'message', 'asctime', 'taskName'}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith('_')
    }


class JSONFormatter(logging.Formatter):
    """Formatter that outputs JSON strings with the record's extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_record: dict[str, Any] = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'line': record.lineno,
        }
        log_record.update(_extra_fields(record))

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter that appends extra fields as key=value pairs."""

    def __init__(self) -> None:
        super().__init__('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = _extra_fields(record)
        if extra:
            line += ' ' + ' '.join(f'{key}={value}' for key, value in extra.items())
        return line


def _build_logger() -> logging.Logger:
    logger = logging.getLogger('visitor_access')
    logger.setLevel(get_log_level())
    logger.propagate = False

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        if get_log_format() == 'json':
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(TextFormatter())
        logger.addHandler(handler)

    return logger


visitor_access_logger = _build_logger()
