"""
Logging setup for commerce-advisor.

``configure_logging(config)`` is called once by the CLI.  Library modules only
ever call ``logging.getLogger(__name__)``.

Structured context
------------------
Advisor and runner log calls attach context through ``extra=``:

    advisor     restock | pricing | marketing | cross_sell | insights
    run_slug    batch run id (runner only)
    sku         product a skip line refers to
    reason      machine-readable skip reason, e.g. ``short_history``
    emitted     outputs produced
    considered  inputs examined
    counts      per-advisor output counts (runner only)

Only these ``CONTEXT_FIELDS`` are rendered.  The plain format appends them as
``key=value`` pairs; the JSON format (``json_format = true``) writes them as
top-level keys of a one-line object::

    {"ts": "2025-03-15T09:00:00Z", "level": "INFO", "logger": "commerce_advisor.advisors.restock",
     "msg": "Restock: 3 recommendations from 5 products", "advisor": "restock",
     "emitted": 3, "considered": 5}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from commerce_advisor.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

CONTEXT_FIELDS: tuple[str, ...] = (
    "advisor", "run_slug", "sku", "reason", "emitted", "considered", "counts",
)


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """The ``CONTEXT_FIELDS`` present on ``record``, in field order."""
    return {
        field: getattr(record, field)
        for field in CONTEXT_FIELDS
        if hasattr(record, field)
    }


class ContextFormatter(logging.Formatter):
    """Plain text line followed by ``key=value`` context pairs."""

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{line} | {pairs}"


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, then context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: "LoggingConfig") -> None:
    """Route all records to stderr (and ``config.log_file`` if set).

    stdout is left to the CLI's tables so it stays pipeable.
    """
    formatter = JsonFormatter() if config.json_format else ContextFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=config.level, handlers=handlers, force=True)
    logging.getLogger("pyarrow").setLevel(logging.WARNING)
