"""Access Policy - Reachable areas and named action predicates

Every status comparison made on behalf of a caller goes through this module:
- reachable_areas / home_area answer "which areas may this subject open?"
- can_perform answers "may a subject in this status do X right now?"
- can_request_transition answers "may this actor ask for that target at all?"
"""
from typing import Callable, Dict, FrozenSet, List, Optional, Union

from ..config.areas import AreaRegistry, get_area_registry
from ..domain.models import ActorContext, SubjectState
from ..domain.enums import Action, ApplicationStatus, Role
from ..domain.errors import ValidationError
from .status_model import current_status


# =============================================================================
# Action predicates (pure functions of status)
# =============================================================================

def can_book_consultation(status: ApplicationStatus) -> bool:
    return status == ApplicationStatus.APPLICANT


def needs_payment(status: ApplicationStatus) -> bool:
    return status == ApplicationStatus.PAYMENT_PENDING


def has_completed_payment(status: ApplicationStatus) -> bool:
    return status in (ApplicationStatus.ENROLLMENT_SUBMITTED, ApplicationStatus.STUDENT)


def has_submitted_enrollment(status: ApplicationStatus) -> bool:
    return status in (ApplicationStatus.ENROLLMENT_SUBMITTED, ApplicationStatus.STUDENT)


def can_access_enrollment(status: ApplicationStatus) -> bool:
    return has_completed_payment(status)


def can_access_student_features(status: ApplicationStatus) -> bool:
    return status == ApplicationStatus.STUDENT


ACTION_PREDICATES: Dict[Action, Callable[[ApplicationStatus], bool]] = {
    Action.BOOK_CONSULTATION: can_book_consultation,
    Action.ACCESS_ENROLLMENT: can_access_enrollment,
    Action.MAKE_PAYMENT: needs_payment,
    Action.HAS_COMPLETED_PAYMENT: has_completed_payment,
    Action.HAS_SUBMITTED_ENROLLMENT: has_submitted_enrollment,
    Action.ACCESS_STUDENT_FEATURES: can_access_student_features,
}


# Roles allowed to request each target status. Students may only move themselves.
TRANSITION_AUTHORITY: Dict[ApplicationStatus, FrozenSet[Role]] = {
    ApplicationStatus.APPLICANT: frozenset(),
    ApplicationStatus.CONSULTATION_PENDING: frozenset({Role.STUDENT, Role.REGISTRAR, Role.SUPER_ADMIN}),
    ApplicationStatus.CONSULTATION_COMPLETED: frozenset({Role.REGISTRAR, Role.SUPER_ADMIN}),
    ApplicationStatus.PAYMENT_PENDING: frozenset({Role.REGISTRAR, Role.ACCOUNTANT, Role.SUPER_ADMIN}),
    ApplicationStatus.ENROLLMENT_SUBMITTED: frozenset({Role.STUDENT, Role.REGISTRAR, Role.SUPER_ADMIN}),
    ApplicationStatus.STUDENT: frozenset({Role.REGISTRAR, Role.SUPER_ADMIN}),
}


def parse_action(action: Union[Action, str]) -> Action:
    if isinstance(action, Action):
        return action
    try:
        return Action(action)
    except ValueError:
        raise ValidationError(f"Unknown action: {action}", details={"action": action})


def can_perform(
    action: Union[Action, str],
    status: Union[ApplicationStatus, str, None]
) -> bool:
    """Evaluate a named action predicate against a status"""
    return ACTION_PREDICATES[parse_action(action)](current_status(status))


def permitted_actions(status: Union[ApplicationStatus, str, None]) -> List[Action]:
    """All actions whose predicate holds for status"""
    resolved = current_status(status)
    return [action for action, predicate in ACTION_PREDICATES.items() if predicate(resolved)]


class AccessPolicy:
    """
    Area reachability per subject, backed by an AreaRegistry

    - Inactive subjects: public areas only, regardless of role/status
    - Non-student roles: common areas plus the role's grant
    - Students: common areas plus the grant for their current status
    """

    def __init__(self, registry: Optional[AreaRegistry] = None):
        self.registry = registry or get_area_registry()

    @property
    def sign_in_area(self) -> str:
        return self.registry.sign_in_area

    def reachable_areas(self, subject: SubjectState) -> FrozenSet[str]:
        """Areas this subject may open"""
        if not subject.active:
            return frozenset(self.registry.public_areas)
        grant = self._grant_for(subject)
        return frozenset(self.registry.common_areas) | frozenset(grant.areas)

    def home_area(self, subject: SubjectState) -> str:
        """Canonical landing area; always a member of reachable_areas(subject)"""
        if not subject.active:
            return self.registry.inactive_home
        return self._grant_for(subject).home

    def can_access(self, subject: SubjectState, area: str) -> bool:
        return area in self.reachable_areas(subject)

    def can_request_transition(
        self,
        actor: ActorContext,
        subject_id: str,
        target: ApplicationStatus
    ) -> bool:
        """Check if actor's role may request target for subject_id"""
        allowed_roles = TRANSITION_AUTHORITY.get(target, frozenset())
        if actor.role not in allowed_roles:
            return False
        if actor.role == Role.STUDENT:
            return actor.subject_id == subject_id
        return True

    def _grant_for(self, subject: SubjectState):
        if subject.role == Role.STUDENT:
            return self.registry.status_grants[current_status(subject.status)]
        return self.registry.role_grants[subject.role]
