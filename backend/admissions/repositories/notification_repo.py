"""Notification Repository - Data access for the notification outbox"""
from typing import Optional
from pymongo.collection import Collection

from .mongo_client import NOTIFICATION_OUTBOX, get_collection
from ..domain.models import NotificationOutbox
from ..utils.logger import get_logger

logger = get_logger(__name__)


class NotificationRepository:
    """Repository for notification outbox operations"""

    def __init__(self, collection: Optional[Collection] = None):
        self._outbox: Collection = collection if collection is not None else get_collection(NOTIFICATION_OUTBOX)

    def create_notification(self, notification: NotificationOutbox) -> NotificationOutbox:
        """Create a notification in outbox"""
        doc = notification.model_dump(mode="json", exclude={"created_at"})
        doc["created_at"] = notification.created_at
        doc["_id"] = notification.notification_id

        self._outbox.insert_one(doc)
        logger.info(
            f"Created notification: {notification.event_kind.value}",
            extra={
                "subject_id": notification.subject_id,
                "event_kind": notification.event_kind.value
            }
        )
        return notification
