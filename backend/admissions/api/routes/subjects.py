"""
Subject Routes

Endpoints for the applicant-to-student workflow:
- Register and list subjects
- Status overview and transition history
- Transitions and workflow events
- Action predicates
- Archive / restore
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import (
    get_actor_dep, get_correlation_id_dep, get_current_subject_dep, get_workflow_service
)
from ...domain.models import (
    ActorContext, Subject, StatusEvent, StatusOverview, TransitionResult
)
from ...domain.enums import Action, ApplicationStatus, Role, WorkflowEvent
from ...domain.errors import UnauthorizedError
from ...engine.access_policy import can_perform
from ...services.enrollment_service import EnrollmentWorkflowService
from ...utils.logger import get_logger
from .schemas import ActionCheckResponse, RegisterSubjectRequest, TransitionRequest

logger = get_logger(__name__)
router = APIRouter(dependencies=[Depends(get_correlation_id_dep)])

# Roles anyone may register as; staff accounts are created by a super admin
SELF_SERVICE_ROLES = {Role.STUDENT, Role.PARENT, Role.GUEST}
ARCHIVE_ROLES = {Role.REGISTRAR, Role.SUPER_ADMIN}
STAFF_ROLES = {Role.TEACHER, Role.REGISTRAR, Role.ACCOUNTANT, Role.SUPER_ADMIN}


# =============================================================================
# Registration
# =============================================================================

@router.post("", response_model=Subject, status_code=201)
async def register_subject(
    request: RegisterSubjectRequest,
    caller: Optional[Subject] = Depends(get_current_subject_dep),
    service: EnrollmentWorkflowService = Depends(get_workflow_service)
):
    """
    Register a subject.

    Students start as applicants. Staff roles may only be created by an
    active super admin.
    """
    if request.role not in SELF_SERVICE_ROLES:
        if caller is None or not caller.active or caller.role != Role.SUPER_ADMIN:
            raise UnauthorizedError(
                f"Only a super admin may register {request.role.value} accounts",
                details={"role": request.role.value}
            )

    return service.register_subject(
        role=request.role,
        display_name=request.display_name,
        email=request.email,
        phone=request.phone
    )


# =============================================================================
# Queries
# =============================================================================

@router.get("", response_model=List[Subject])
async def list_subjects(
    role: Optional[Role] = None,
    status: Optional[ApplicationStatus] = None,
    include_inactive: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    actor: ActorContext = Depends(get_actor_dep),
    service: EnrollmentWorkflowService = Depends(get_workflow_service)
):
    """List subjects by role and status (staff only)."""
    if actor.role not in STAFF_ROLES:
        raise UnauthorizedError(
            "Only staff may list subjects",
            details={"role": actor.role.value}
        )
    return service.list_subjects(
        role=role, status=status, include_inactive=include_inactive, skip=skip, limit=limit
    )


@router.get("/{subject_id}", response_model=StatusOverview)
async def get_status_overview(
    subject_id: str,
    actor: ActorContext = Depends(get_actor_dep),
    service: EnrollmentWorkflowService = Depends(get_workflow_service)
):
    """Current status, progress, reachable areas and permitted actions."""
    _require_self_or_staff(actor, subject_id)
    return service.status_overview(subject_id)


@router.get("/{subject_id}/history", response_model=List[StatusEvent])
async def get_history(
    subject_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    actor: ActorContext = Depends(get_actor_dep),
    service: EnrollmentWorkflowService = Depends(get_workflow_service)
):
    """Committed transitions, newest first."""
    _require_self_or_staff(actor, subject_id)
    return service.history(subject_id, skip=skip, limit=limit)


@router.get("/{subject_id}/actions/{action}", response_model=ActionCheckResponse)
async def check_action(
    subject_id: str,
    action: Action,
    actor: ActorContext = Depends(get_actor_dep),
    service: EnrollmentWorkflowService = Depends(get_workflow_service)
):
    """
    Evaluate a named action predicate for a subject.

    Only active students can perform workflow actions.
    """
    _require_self_or_staff(actor, subject_id)
    overview = service.status_overview(subject_id)
    if overview.role != Role.STUDENT or not overview.active:
        return ActionCheckResponse(action=action, status=overview.status, permitted=False)
    return ActionCheckResponse(
        action=action,
        status=overview.status,
        permitted=can_perform(action, overview.status)
    )


# =============================================================================
# Transitions
# =============================================================================

@router.post("/{subject_id}/transitions", response_model=TransitionResult)
async def transition_subject(
    subject_id: str,
    request: TransitionRequest,
    actor: ActorContext = Depends(get_actor_dep),
    service: EnrollmentWorkflowService = Depends(get_workflow_service)
):
    """
    Move a subject to its next status.

    Fails with INVALID_TRANSITION when the target is not the sole legal
    successor, PERSISTENCE_CONFLICT when a concurrent change won repeatedly,
    and UNAUTHORIZED when the caller's role may not request the target.
    """
    return service.advance(subject_id, request.target_status, actor=actor)


@router.post("/{subject_id}/events/{event}", response_model=TransitionResult)
async def apply_event(
    subject_id: str,
    event: WorkflowEvent,
    actor: ActorContext = Depends(get_actor_dep),
    service: EnrollmentWorkflowService = Depends(get_workflow_service)
):
    """Apply a workflow event (consultation booked, enrollment approved, ...)."""
    return service.handle_event(subject_id, event, actor=actor)


# =============================================================================
# Archive
# =============================================================================

@router.post("/{subject_id}/archive", response_model=Subject)
async def archive_subject(
    subject_id: str,
    actor: ActorContext = Depends(get_actor_dep),
    service: EnrollmentWorkflowService = Depends(get_workflow_service)
):
    """Archive a subject; archived subjects only reach public areas."""
    _require_archive_role(actor)
    return service.archive_subject(subject_id)


@router.post("/{subject_id}/restore", response_model=Subject)
async def restore_subject(
    subject_id: str,
    actor: ActorContext = Depends(get_actor_dep),
    service: EnrollmentWorkflowService = Depends(get_workflow_service)
):
    """Restore an archived subject."""
    _require_archive_role(actor)
    return service.restore_subject(subject_id)


def _require_self_or_staff(actor: ActorContext, subject_id: str) -> None:
    if actor.subject_id != subject_id and actor.role not in STAFF_ROLES:
        raise UnauthorizedError(
            "Subjects may only view their own workflow",
            details={"subject_id": subject_id}
        )


def _require_archive_role(actor: ActorContext) -> None:
    if actor.role not in ARCHIVE_ROLES:
        raise UnauthorizedError(
            f"Role {actor.role.value} may not archive subjects",
            details={"role": actor.role.value}
        )
