"""API Dependencies - Common dependencies for routes"""
from typing import Optional
from fastapi import Depends, Header

from ..domain.models import ActorContext, Subject
from ..domain.errors import AuthenticationError
from ..engine.route_guard import RouteGuard
from ..services.enrollment_service import EnrollmentWorkflowService
from ..utils.logger import get_correlation_id, set_correlation_id
from ..utils.idgen import generate_correlation_id


async def get_correlation_id_dep(
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-Id")
) -> str:
    """
    Get or generate correlation ID for request tracing
    
    Prefers the client header, then the ID bound by the middleware.
    """
    correlation_id = x_correlation_id or get_correlation_id() or generate_correlation_id()
    set_correlation_id(correlation_id)
    return correlation_id


def get_workflow_service() -> EnrollmentWorkflowService:
    """Workflow service wired to MongoDB; overridden in tests"""
    return EnrollmentWorkflowService()


def get_route_guard(
    service: EnrollmentWorkflowService = Depends(get_workflow_service)
) -> RouteGuard:
    return RouteGuard(service.policy)


async def get_current_subject_dep(
    x_subject_id: Optional[str] = Header(None, alias="X-Subject-Id"),
    service: EnrollmentWorkflowService = Depends(get_workflow_service)
) -> Optional[Subject]:
    """
    Resolve the calling subject from X-Subject-Id

    Identity is established upstream; this only loads the subject.
    Returns None when no identity is presented.
    """
    if not x_subject_id:
        return None
    subject = service.subject_repo.get_subject(x_subject_id)
    if subject is None:
        raise AuthenticationError(
            "Unknown caller identity",
            details={"subject_id": x_subject_id}
        )
    return subject


async def get_actor_dep(
    subject: Optional[Subject] = Depends(get_current_subject_dep)
) -> ActorContext:
    """Dependency requiring an identified, active caller"""
    if subject is None:
        raise AuthenticationError("X-Subject-Id header is missing")
    if not subject.active:
        raise AuthenticationError(
            "Caller is archived",
            details={"subject_id": subject.subject_id}
        )
    return ActorContext(subject_id=subject.subject_id, role=subject.role)
