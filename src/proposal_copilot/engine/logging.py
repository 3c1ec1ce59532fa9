"""Structured logging configuration.

Uses standard library logging with a JSON formatter. Structured fields are
passed with `extra=` and land under the "extra" key of each line.

Logs go to stderr by default: the CLI prints the session transcript on stdout.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

_RESERVED_LOG_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with the asyncio task name when there is one."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        task_name = getattr(record, "taskName", None)
        if task_name:
            payload["task"] = task_name

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str, *, stream: TextIO | None = None) -> None:
    """Configure root logging with structured JSON output."""

    root = logging.getLogger()

    # Remove any existing handlers to avoid duplicate logs when re-configuring.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.setFormatter(JsonFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())

    # asyncio logs slow callbacks at DEBUG; keep it quiet unless explicitly configured.
    logging.getLogger("asyncio").setLevel(max(root.level, logging.WARNING))
