"""Transition Engine - Validate and perform single-edge status transitions"""
from typing import Optional, Union

from ..domain.models import ActorContext, TransitionResult
from ..domain.enums import ApplicationStatus, Role, WriteOutcome
from ..domain.errors import (
    InvalidTransitionError, PersistenceConflictError, PersistenceFailureError,
    UnauthorizedError
)
from ..repositories.base import SubjectStore
from ..utils.logger import get_logger
from ..utils.time import utc_now
from .access_policy import AccessPolicy
from .audit_writer import AuditWriter
from .status_model import current_status, is_transition_allowed, parse_status

logger = get_logger(__name__)


class TransitionEngine:
    """
    Move one subject from its current status to a requested target

    Given subject S and target T:
    1. Read S's role, status and active flag
    2. Reject subjects outside the workflow (inactive, non-student)
    3. If an actor is given, check it may request T at all
    4. Check T is a legal successor of the current status
    5. Conditionally write T where status still equals the status read in 1

    The engine never notifies; callers compose side effects on success.
    Every failure raises a typed DomainError and leaves the stored status
    untouched.
    """

    def __init__(
        self,
        store: SubjectStore,
        policy: Optional[AccessPolicy] = None,
        audit_writer: Optional[AuditWriter] = None
    ):
        self.store = store
        self.policy = policy or AccessPolicy()
        self.audit_writer = audit_writer

    def transition(
        self,
        subject_id: str,
        target_status: Union[ApplicationStatus, str],
        actor: Optional[ActorContext] = None,
        correlation_id: Optional[str] = None
    ) -> TransitionResult:
        """
        Perform one transition

        Raises:
            SubjectNotFoundError: Unknown subject
            UnauthorizedError: Actor's role may not request this target
            InvalidTransitionError: Edge not in graph, or subject not in the workflow
            PersistenceConflictError: A concurrent writer moved the subject first
            PersistenceFailureError: Storage error or timeout
        """
        target = parse_status(target_status)
        state = self.store.read_status(subject_id)
        current = current_status(state.status)

        if not state.active:
            raise InvalidTransitionError(
                current.value, target.value,
                message=f"Subject {subject_id} is inactive",
                details={"subject_id": subject_id, "reason": "inactive"}
            )
        if state.role != Role.STUDENT:
            raise InvalidTransitionError(
                None, target.value,
                message=f"Subject {subject_id} with role {state.role.value} is not in the enrollment workflow",
                details={"subject_id": subject_id, "reason": "not_student"}
            )

        if actor is not None and not self.policy.can_request_transition(actor, subject_id, target):
            logger.warning(
                f"Actor {actor.subject_id} may not request {target.value} for {subject_id}",
                extra={
                    "subject_id": subject_id,
                    "actor_id": actor.subject_id,
                    "actor_role": actor.role.value,
                    "to_status": target.value
                }
            )
            raise UnauthorizedError(
                f"Role {actor.role.value} may not move subjects to {target.value}",
                details={"subject_id": subject_id, "role": actor.role.value, "to": target.value}
            )

        if not is_transition_allowed(current, target):
            logger.info(
                f"Rejected transition: {current.value} -> {target.value}",
                extra={"subject_id": subject_id, "from_status": current.value, "to_status": target.value}
            )
            raise InvalidTransitionError(current.value, target.value, details={"subject_id": subject_id})

        outcome = self.store.write_status(subject_id, current, target)
        if outcome != WriteOutcome.COMMITTED:
            raise PersistenceConflictError(
                f"Status of subject {subject_id} changed concurrently",
                details={"subject_id": subject_id, "from": current.value, "to": target.value}
            )

        logger.info(
            f"Transitioned: {current.value} -> {target.value}",
            extra={
                "subject_id": subject_id,
                "from_status": current.value,
                "to_status": target.value,
                "actor_id": actor.subject_id if actor else None
            }
        )

        self._record(subject_id, current, target, actor, correlation_id)

        return TransitionResult(
            subject_id=subject_id,
            from_status=current,
            to_status=target,
            committed_at=utc_now()
        )

    def _record(
        self,
        subject_id: str,
        from_status: ApplicationStatus,
        to_status: ApplicationStatus,
        actor: Optional[ActorContext],
        correlation_id: Optional[str]
    ) -> None:
        # The status write already committed; a lost audit row must not turn it into a failure
        if self.audit_writer is None:
            return
        try:
            self.audit_writer.write_transition(
                subject_id, from_status, to_status, actor=actor, correlation_id=correlation_id
            )
        except PersistenceFailureError as e:
            logger.error(
                f"Failed to record status event: {e.message}",
                extra={"subject_id": subject_id, "from_status": from_status.value, "to_status": to_status.value}
            )
