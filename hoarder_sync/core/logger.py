"""Structured JSON logging for Hoarder Sync.

Every log line is a single JSON object so that daemon output can be piped
into any log collector. Context such as the bookmark being synced or the
note file being reconciled travels in ``extra`` fields.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

# Attributes every LogRecord carries; anything else came in via ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """Formats log records as JSON objects.

    Output format:
        {
            "ts": "2026-01-23T10:30:00.123456+00:00",
            "level": "INFO",
            "msg": "Created note",
            "logger": "hoarder_sync.core.sync_engine",
            "bookmark_id": "clx0k2f9a0000",
            "path": "Hoarder/2024-01-05-My-Title.md"
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="microseconds"
            ),
            "level": record.levelname,
            "msg": record.getMessage(),
        }
        if record.name and record.name != "root":
            entry["logger"] = record.name

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                entry[key] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that merges fixed context fields into every record.

    Usage:
        log = ContextLoggerAdapter(logging.getLogger(__name__), bookmark_id="abc")
        log.info("Created note")  # record carries bookmark_id="abc"

    Fields passed explicitly through ``extra`` win over the adapter's own.
    """

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def setup_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Configure the root logger with JSON formatting.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Output stream (defaults to sys.stderr).
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper()))

    # httpx logs every request at INFO; keep it to warnings unless debugging.
    if root.level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the logger for ``name`` (root logger when None)."""
    return logging.getLogger(name)


def get_bookmark_logger(name: str, bookmark_id: str) -> ContextLoggerAdapter:
    """Get a logger that tags every message with ``bookmark_id``.

    Example:
        log = get_bookmark_logger(__name__, bookmark.id)
        log.info("Pushed note")
        # {"ts": "...", "level": "INFO", "msg": "Pushed note", "bookmark_id": "..."}
    """
    return ContextLoggerAdapter(get_logger(name), {"bookmark_id": bookmark_id})


def reset_logging() -> None:
    """Remove all root handlers. Used by tests to isolate configuration."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    logging.getLogger("httpx").setLevel(logging.NOTSET)
