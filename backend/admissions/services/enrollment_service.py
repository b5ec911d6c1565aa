"""Enrollment Workflow Service - Business logic around the status engine

Composes the transition engine, access policy and notifications. Each
external event (consultation booked, consultation completed, payment
requested, enrollment submitted, enrollment approved) maps to exactly one
forward transition followed by one notification.
"""
from typing import Dict, List, Optional, Union

from ..config.settings import settings
from ..domain.models import (
    ActorContext, Subject, StatusEvent, StatusOverview, TransitionResult
)
from ..domain.enums import ApplicationStatus, Role, WorkflowEvent
from ..domain.errors import PersistenceConflictError, ValidationError
from ..engine.access_policy import AccessPolicy, permitted_actions
from ..engine.audit_writer import AuditWriter
from ..engine.status_model import (
    current_status, next_status, parse_status, previous_status, progress, status_display
)
from ..engine.transition_engine import TransitionEngine
from ..repositories.audit_repo import AuditRepository
from ..repositories.subject_repo import SubjectRepository
from ..utils.idgen import generate_subject_id
from ..utils.logger import get_logger, get_correlation_id
from ..utils.time import utc_now
from .notification_service import NotificationService

logger = get_logger(__name__)


EVENT_TARGETS: Dict[WorkflowEvent, ApplicationStatus] = {
    WorkflowEvent.CONSULTATION_BOOKED: ApplicationStatus.CONSULTATION_PENDING,
    WorkflowEvent.CONSULTATION_COMPLETED: ApplicationStatus.CONSULTATION_COMPLETED,
    WorkflowEvent.PAYMENT_REQUESTED: ApplicationStatus.PAYMENT_PENDING,
    WorkflowEvent.ENROLLMENT_SUBMITTED: ApplicationStatus.ENROLLMENT_SUBMITTED,
    WorkflowEvent.ENROLLMENT_APPROVED: ApplicationStatus.STUDENT,
}


class EnrollmentWorkflowService:
    """Service for moving subjects through the enrollment lifecycle"""

    def __init__(
        self,
        subject_repo: Optional[SubjectRepository] = None,
        audit_repo: Optional[AuditRepository] = None,
        notifier: Optional[NotificationService] = None,
        policy: Optional[AccessPolicy] = None,
        engine: Optional[TransitionEngine] = None,
        max_retries: Optional[int] = None
    ):
        self.subject_repo = subject_repo or SubjectRepository()
        self.audit_repo = audit_repo or AuditRepository()
        self.notifier = notifier or NotificationService()
        self.policy = policy or AccessPolicy()
        self.engine = engine or TransitionEngine(
            self.subject_repo,
            policy=self.policy,
            audit_writer=AuditWriter(self.audit_repo)
        )
        self.max_retries = settings.transition_max_retries if max_retries is None else max_retries

    # =========================================================================
    # Registration
    # =========================================================================

    def register_subject(
        self,
        role: Role = Role.STUDENT,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        subject_id: Optional[str] = None
    ) -> Subject:
        """Create a subject; students start as applicants"""
        now = utc_now()
        subject = Subject(
            subject_id=subject_id or generate_subject_id(),
            role=role,
            status=ApplicationStatus.APPLICANT if role == Role.STUDENT else None,
            active=True,
            display_name=display_name,
            email=email,
            phone=phone,
            created_at=now,
            updated_at=now
        )
        return self.subject_repo.create_subject(subject)

    def list_subjects(
        self,
        role: Optional[Role] = None,
        status: Optional[ApplicationStatus] = None,
        include_inactive: bool = False,
        skip: int = 0,
        limit: int = 50
    ) -> List[Subject]:
        """Subjects filtered by role and status (e.g. everyone awaiting payment)"""
        return self.subject_repo.list_subjects(
            role=role, status=status, include_inactive=include_inactive, skip=skip, limit=limit
        )

    def archive_subject(self, subject_id: str) -> Subject:
        return self.subject_repo.set_active(subject_id, False)

    def restore_subject(self, subject_id: str) -> Subject:
        return self.subject_repo.set_active(subject_id, True)

    # =========================================================================
    # Transitions
    # =========================================================================

    def advance(
        self,
        subject_id: str,
        target: Union[ApplicationStatus, str],
        actor: Optional[ActorContext] = None
    ) -> TransitionResult:
        """
        Perform a transition, retrying a bounded number of times after a lost race

        On PersistenceConflictError the current status is re-read. If the
        subject already sits at the target, the concurrent writer did the
        work and the result is flagged already_applied (no second
        notification). Otherwise the engine re-validates, so a target that is
        no longer legal surfaces as InvalidTransitionError.
        """
        correlation_id = get_correlation_id()
        attempt = 0
        while True:
            try:
                result = self.engine.transition(
                    subject_id, target, actor=actor, correlation_id=correlation_id
                )
                break
            except PersistenceConflictError:
                if attempt >= self.max_retries:
                    logger.warning(
                        f"Giving up after {attempt + 1} conflicting attempts",
                        extra={"subject_id": subject_id, "attempt": attempt + 1}
                    )
                    raise
                attempt += 1
                state = self.subject_repo.read_status(subject_id)
                resolved_target = parse_status(target)
                if current_status(state.status) == resolved_target:
                    logger.info(
                        f"Transition to {resolved_target.value} already applied concurrently",
                        extra={"subject_id": subject_id, "to_status": resolved_target.value}
                    )
                    return TransitionResult(
                        subject_id=subject_id,
                        from_status=previous_status(resolved_target) or resolved_target,
                        to_status=resolved_target,
                        committed_at=utc_now(),
                        already_applied=True
                    )
                logger.info(
                    f"Retrying transition after conflict (attempt {attempt})",
                    extra={"subject_id": subject_id, "attempt": attempt}
                )

        event_kind = self.notifier.event_for_status(result.to_status)
        if event_kind is not None:
            self.notifier.notify(subject_id, event_kind)
        return result

    def handle_event(
        self,
        subject_id: str,
        event: Union[WorkflowEvent, str],
        actor: Optional[ActorContext] = None
    ) -> TransitionResult:
        """Apply the single transition an external event stands for"""
        try:
            resolved = WorkflowEvent(event)
        except ValueError:
            raise ValidationError(f"Unknown workflow event: {event}", details={"event": event})
        return self.advance(subject_id, EVENT_TARGETS[resolved], actor=actor)

    def book_consultation(self, subject_id: str, actor: Optional[ActorContext] = None) -> TransitionResult:
        return self.handle_event(subject_id, WorkflowEvent.CONSULTATION_BOOKED, actor)

    def complete_consultation(self, subject_id: str, actor: Optional[ActorContext] = None) -> TransitionResult:
        return self.handle_event(subject_id, WorkflowEvent.CONSULTATION_COMPLETED, actor)

    def request_payment(self, subject_id: str, actor: Optional[ActorContext] = None) -> TransitionResult:
        return self.handle_event(subject_id, WorkflowEvent.PAYMENT_REQUESTED, actor)

    def submit_enrollment(self, subject_id: str, actor: Optional[ActorContext] = None) -> TransitionResult:
        return self.handle_event(subject_id, WorkflowEvent.ENROLLMENT_SUBMITTED, actor)

    def approve_enrollment(self, subject_id: str, actor: Optional[ActorContext] = None) -> TransitionResult:
        return self.handle_event(subject_id, WorkflowEvent.ENROLLMENT_APPROVED, actor)

    # =========================================================================
    # Queries
    # =========================================================================

    def status_overview(self, subject_id: str) -> StatusOverview:
        """Status, display text, progress, areas and permitted actions"""
        subject = self.subject_repo.get_subject_or_raise(subject_id)
        overview = StatusOverview(
            subject_id=subject.subject_id,
            role=subject.role,
            active=subject.active,
            reachable_areas=sorted(self.policy.reachable_areas(subject)),
            home_area=self.policy.home_area(subject)
        )
        if subject.role != Role.STUDENT:
            return overview

        status = current_status(subject.status)
        overview.status = status
        overview.display = status_display(status)
        overview.progress = progress(status)
        overview.next_status = next_status(status)
        if subject.active:
            overview.permitted_actions = permitted_actions(status)
        return overview

    def history(self, subject_id: str, skip: int = 0, limit: int = 100) -> List[StatusEvent]:
        """Committed transitions for a subject, newest first"""
        self.subject_repo.get_subject_or_raise(subject_id)
        return self.audit_repo.get_events_for_subject(subject_id, skip=skip, limit=limit)
