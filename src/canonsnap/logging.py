"""JSON log records for canonsnap.

Logs go to stderr as one JSON object per line; stdout is reserved for
snapshot text. Library modules only create loggers. ``configure_logging`` is
called by the command line front end.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

# Structured fields passed through ``extra=`` by the pipeline, the
# redaction engine and the formatter registry.
SNAPSHOT_FIELDS = ("format", "location", "selector", "path", "count", "code")

DEFAULT_LEVEL = "WARNING"

_CONFIGURED = False


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, getattr(record, key)) for key in SNAPSHOT_FIELDS if hasattr(record, key)
        )

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str)


def configure_logging(*, level: str | None = None) -> None:
    """Install the JSON stderr handler once.

    ``level`` wins over ``LOG_LEVEL``; both fall back to ``DEFAULT_LEVEL``.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    log_level = (level or os.getenv("LOG_LEVEL") or DEFAULT_LEVEL).upper()
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers[:] = [handler]

    _CONFIGURED = True
