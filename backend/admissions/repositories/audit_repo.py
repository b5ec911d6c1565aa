"""Audit Repository - Data access for status events"""
from typing import Any, Dict, List, Optional
from pymongo.collection import Collection
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from .mongo_client import STATUS_EVENTS, get_collection
from ..domain.models import StatusEvent
from ..domain.errors import PersistenceFailureError
from ..utils.logger import get_logger
from ..utils.time import ensure_utc

logger = get_logger(__name__)


class AuditRepository:
    """Repository for status event operations (append-only)"""

    def __init__(self, collection: Optional[Collection] = None):
        self._events: Collection = collection if collection is not None else get_collection(STATUS_EVENTS)

    def create_event(self, event: StatusEvent) -> StatusEvent:
        """Create a status event (append-only)"""
        doc = event.model_dump(mode="json", exclude={"timestamp"})
        doc["timestamp"] = event.timestamp
        doc["_id"] = event.event_id

        try:
            self._events.insert_one(doc)
        except PyMongoError as e:
            raise PersistenceFailureError(
                f"Failed to record status event for subject {event.subject_id}",
                details={"subject_id": event.subject_id, "error_type": type(e).__name__}
            ) from e

        logger.info(
            f"Created status event: {event.from_status.value} -> {event.to_status.value}",
            extra={"subject_id": event.subject_id, "actor_id": event.actor_id}
        )
        return event

    def get_events_for_subject(
        self,
        subject_id: str,
        skip: int = 0,
        limit: int = 100
    ) -> List[StatusEvent]:
        """Get status events for a subject, newest first"""
        try:
            cursor = self._events.find(
                {"subject_id": subject_id}
            ).sort("timestamp", DESCENDING).skip(skip).limit(limit)
            return [self._from_document(doc) for doc in cursor]
        except PyMongoError as e:
            raise PersistenceFailureError(
                f"Failed to read status events for subject {subject_id}",
                details={"subject_id": subject_id, "error_type": type(e).__name__}
            ) from e

    @staticmethod
    def _from_document(doc: Dict[str, Any]) -> StatusEvent:
        doc = dict(doc)
        doc.pop("_id", None)
        doc["timestamp"] = ensure_utc(doc["timestamp"])
        return StatusEvent.model_validate(doc)
