"""Structured Logging — one JSON object per line, carrying the note being touched.

Invariants:
    - Every entry has timestamp (record creation time, UTC), level, logger, message
    - Note fields passed via `extra=` (address, owner, operation, error_code,
      path) appear as top-level keys when set, and are omitted otherwise
    - Values that are not JSON types are rendered with str(), never dropped
    - setup_logging is idempotent: re-running it replaces the handler it
      installed instead of stacking a second one

Design Decisions:
    - stdlib logging + a small formatter: callers keep the plain
      `logger.info(..., extra={...})` API
    - fmt="text" for local development, "json" everywhere else
"""

import json
import logging
from datetime import datetime, timezone

NOTE_FIELDS = ("address", "owner", "operation", "error_code", "path")

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(note_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def note_fields(record: logging.LogRecord) -> dict:
    """The note-related `extra=` values present on record."""
    return {
        key: record.__dict__[key]
        for key in NOTE_FIELDS
        if record.__dict__.get(key) is not None
    }


class _NoteVaultHandler(logging.StreamHandler):
    """Marker type so setup_logging can find its own handler again."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the NoteVault handler on the root logger. Returns it."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _NoteVaultHandler)]:
        root.removeHandler(existing)

    handler = _NoteVaultHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
