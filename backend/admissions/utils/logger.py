"""Structured JSON Logging with Correlation ID Support

Every record is one JSON object. Workflow context passed through ``extra``
(subject, statuses, actor, area) is lifted to top-level keys so log search
can follow a subject through its transitions, and the per-request
correlation ID ties a transition to its status event and notification.
"""
import json
import logging
import os
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Iterator, Optional
from contextvars import ContextVar

from ..config.settings import settings
from .idgen import generate_correlation_id


correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Workflow context lifted from ``extra`` to top-level JSON keys
EXTRA_FIELDS = (
    "subject_id",
    "from_status",
    "to_status",
    "actor_id",
    "actor_role",
    "area",
    "action",
    "event_kind",
    "attempt",
    "error_code",
)

_MAX_BYTES = 10 * 1024 * 1024


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class JsonFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = correlation_id_var.get()
        if correlation_id:
            entry["correlation_id"] = correlation_id

        for field in EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=_json_default)


def setup_logging(level: Optional[str] = None, log_to_files: bool = True) -> None:
    """
    Configure the root logger

    Args:
        level: Overrides settings.log_level
        log_to_files: Also write admissions.log and error.log under settings.logs_path
    """
    root_logger = logging.getLogger()
    root_logger.setLevel((level or settings.log_level).upper())
    root_logger.handlers.clear()

    formatter = JsonFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_to_files:
        os.makedirs(settings.logs_path, exist_ok=True)
        for filename, handler_level in (("admissions.log", logging.NOTSET), ("error.log", logging.ERROR)):
            handler = RotatingFileHandler(
                os.path.join(settings.logs_path, filename),
                maxBytes=_MAX_BYTES,
                backupCount=5,
                encoding="utf-8"
            )
            handler.setLevel(handler_level)
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


@contextmanager
def correlation_scope(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation ID (generated if omitted) for the duration of the block"""
    token = correlation_id_var.set(correlation_id or generate_correlation_id())
    try:
        yield correlation_id_var.get()
    finally:
        correlation_id_var.reset(token)
