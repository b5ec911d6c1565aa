"""Identifier generation

Subjects, status events and outbox entries get ``<PREFIX>-<12 hex>`` ids;
correlation ids carry a UTC timestamp so logs sort naturally.
"""
import uuid
from datetime import datetime, timezone
from typing import Optional

SUBJECT_PREFIX = "SUB"
STATUS_EVENT_PREFIX = "EVT"
NOTIFICATION_PREFIX = "NTF"


def generate_id(prefix: Optional[str] = None) -> str:
    """
    Short unique id, e.g. ``SUB-a1b2c3d4e5f6`` (or bare hex without a prefix)
    """
    unique_part = uuid.uuid4().hex[:12]
    return f"{prefix}-{unique_part}" if prefix else unique_part


def generate_subject_id() -> str:
    return generate_id(SUBJECT_PREFIX)


def generate_status_event_id() -> str:
    return generate_id(STATUS_EVENT_PREFIX)


def generate_notification_id() -> str:
    return generate_id(NOTIFICATION_PREFIX)


def generate_correlation_id() -> str:
    """``COR-<yyyymmddHHMMSS>-<8 hex>``"""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"COR-{stamp}-{uuid.uuid4().hex[:8]}"
