"""Audit Writer - Append-only status events"""
from typing import Optional

from ..domain.models import StatusEvent, ActorContext
from ..domain.enums import ApplicationStatus
from ..repositories.audit_repo import AuditRepository
from ..utils.idgen import generate_status_event_id
from ..utils.time import utc_now


class AuditWriter:
    """
    Write status events (append-only)

    Every committed transition produces one event.
    """

    def __init__(self, repo: Optional[AuditRepository] = None):
        self.repo = repo or AuditRepository()

    def write_transition(
        self,
        subject_id: str,
        from_status: ApplicationStatus,
        to_status: ApplicationStatus,
        actor: Optional[ActorContext] = None,
        correlation_id: Optional[str] = None
    ) -> StatusEvent:
        """Write a transition event"""
        event = StatusEvent(
            event_id=generate_status_event_id(),
            subject_id=subject_id,
            from_status=from_status,
            to_status=to_status,
            actor_id=actor.subject_id if actor else None,
            actor_role=actor.role if actor else None,
            timestamp=utc_now(),
            correlation_id=correlation_id
        )
        return self.repo.create_event(event)
