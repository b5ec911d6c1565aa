"""Route Guard - Allow/redirect decision before a protected area is rendered"""
from typing import Optional

from ..domain.models import GuardDecision, SubjectState
from ..utils.logger import get_logger
from .access_policy import AccessPolicy

logger = get_logger(__name__)


class RouteGuard:
    """
    Gate consulted before rendering any protected area

    - No subject (unauthenticated) -> redirect to sign-in, keeping the
      requested area as resume_to
    - Requested area reachable -> allow
    - Otherwise -> redirect to the subject's home area, which the policy
      guarantees is reachable

    Pure function of its inputs; no side effects beyond debug logging.
    """

    def __init__(self, policy: Optional[AccessPolicy] = None):
        self.policy = policy or AccessPolicy()

    def guard(self, subject: Optional[SubjectState], requested_area: str) -> GuardDecision:
        if subject is None:
            return GuardDecision.redirect(self.policy.sign_in_area, resume_to=requested_area)

        if self.policy.can_access(subject, requested_area):
            return GuardDecision.allow()

        home = self.policy.home_area(subject)
        logger.debug(
            f"Area {requested_area} not reachable, redirecting to {home}",
            extra={"area": requested_area, "actor_role": subject.role.value}
        )
        return GuardDecision.redirect(home)
