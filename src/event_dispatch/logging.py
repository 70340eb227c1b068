"""Logging setup for dispatch diagnostics.

Dispatch log calls attach ``contract``, ``event_name``, ``error_kind`` and
``target`` through ``extra=``. Both formatters here surface those fields
directly: the JSON formatter as top-level keys, the text formatter as a
``key=value`` suffix. Any other extra attributes end up under ``"extra"``
in JSON output.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

DISPATCH_FIELDS: tuple[str, ...] = ("contract", "event_name", "error_kind", "target")

# Attributes every LogRecord carries, plus those Formatter.format() adds.
_STANDARD_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def dispatch_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Dispatch fields present on ``record``, in ``DISPATCH_FIELDS`` order."""

    return {key: record.__dict__[key] for key in DISPATCH_FIELDS if key in record.__dict__}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, dispatch fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(dispatch_fields(record))

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS
            and key not in DISPATCH_FIELDS
            and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception_type"] = record.exc_info[0].__name__
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Plain-text lines with dispatch fields appended as ``key=value``."""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    def formatMessage(self, record: logging.LogRecord) -> str:  # noqa: N802
        line = super().formatMessage(record)
        fields = dispatch_fields(record)
        if not fields:
            return line
        return line + " [" + " ".join(f"{k}={v}" for k, v in fields.items()) + "]"


def configure_logging(level: str, *, json_format: bool = True) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        level: Level name, case-insensitive.
        json_format: Use :class:`JsonFormatter` when True, else
            :class:`TextFormatter`.
    """

    root = logging.getLogger()

    # Re-configuring replaces handlers instead of stacking them.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter() if json_format else TextFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())
