"""Notification Service - Fire-and-forget workflow notifications

Queues one outbox entry per workflow event. Delivery (SMS, email) happens
outside this service; a failed enqueue is logged and never affects the
transition that triggered it.
"""
from typing import Dict, Optional
from pymongo.errors import PyMongoError

from ..domain.models import NotificationOutbox
from ..domain.enums import ApplicationStatus, WorkflowEvent
from ..repositories.notification_repo import NotificationRepository
from ..utils.idgen import generate_notification_id
from ..utils.logger import get_logger, get_correlation_id
from ..utils.time import utc_now

logger = get_logger(__name__)


class NotificationService:
    """Service for queueing workflow notifications"""

    # The event each target status announces
    STATUS_TO_EVENT: Dict[ApplicationStatus, WorkflowEvent] = {
        ApplicationStatus.CONSULTATION_PENDING: WorkflowEvent.CONSULTATION_BOOKED,
        ApplicationStatus.CONSULTATION_COMPLETED: WorkflowEvent.CONSULTATION_COMPLETED,
        ApplicationStatus.PAYMENT_PENDING: WorkflowEvent.PAYMENT_REQUESTED,
        ApplicationStatus.ENROLLMENT_SUBMITTED: WorkflowEvent.ENROLLMENT_SUBMITTED,
        ApplicationStatus.STUDENT: WorkflowEvent.ENROLLMENT_APPROVED,
    }

    def __init__(self, repo: Optional[NotificationRepository] = None):
        self.repo = repo or NotificationRepository()

    @classmethod
    def event_for_status(cls, status: ApplicationStatus) -> Optional[WorkflowEvent]:
        return cls.STATUS_TO_EVENT.get(status)

    def notify(self, subject_id: str, event_kind: WorkflowEvent) -> None:
        """Queue a notification; never raises on storage errors"""
        notification = NotificationOutbox(
            notification_id=generate_notification_id(),
            subject_id=subject_id,
            event_kind=event_kind,
            created_at=utc_now(),
            correlation_id=get_correlation_id()
        )
        try:
            self.repo.create_notification(notification)
        except PyMongoError as e:
            logger.error(
                f"Failed to queue notification: {e}",
                extra={"subject_id": subject_id, "event_kind": event_kind.value}
            )
