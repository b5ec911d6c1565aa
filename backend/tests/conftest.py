"""
Pytest Configuration and Fixtures

Shared fixtures for all tests. Storage is replaced with in-memory fakes so
no MongoDB is needed; the fakes keep the conditional-write contract of the
real repositories.
"""

import threading
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from admissions.config.areas import default_area_registry
from admissions.domain.enums import ApplicationStatus, Role, WriteOutcome
from admissions.domain.errors import AlreadyExistsError, SubjectNotFoundError
from admissions.domain.models import ActorContext, Subject, SubjectState, StatusEvent
from admissions.engine.access_policy import AccessPolicy
from admissions.engine.audit_writer import AuditWriter
from admissions.engine.route_guard import RouteGuard
from admissions.engine.status_model import current_status
from admissions.engine.transition_engine import TransitionEngine
from admissions.services.enrollment_service import EnrollmentWorkflowService
from admissions.services.notification_service import NotificationService
from admissions.utils.time import utc_now


class InMemorySubjectRepository:
    """Thread-safe stand-in for SubjectRepository"""

    def __init__(self):
        self._lock = threading.Lock()
        self._subjects: Dict[str, Subject] = {}
        self.writes: List[tuple] = []

    def add(self, subject_id: str, role: Role = Role.STUDENT,
            status: Optional[ApplicationStatus] = None, active: bool = True) -> Subject:
        subject = Subject(subject_id=subject_id, role=role, status=status, active=active)
        self._subjects[subject_id] = subject
        return subject

    def create_subject(self, subject: Subject) -> Subject:
        with self._lock:
            if subject.subject_id in self._subjects:
                raise AlreadyExistsError(f"Subject {subject.subject_id} already exists")
            self._subjects[subject.subject_id] = subject
        return subject

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        subject = self._subjects.get(subject_id)
        return subject.model_copy() if subject else None

    def get_subject_or_raise(self, subject_id: str) -> Subject:
        subject = self.get_subject(subject_id)
        if subject is None:
            raise SubjectNotFoundError(f"Subject {subject_id} not found")
        return subject

    def list_subjects(self, role=None, status=None, include_inactive=False, skip=0, limit=50) -> List[Subject]:
        matching = [
            s for s in self._subjects.values()
            if (role is None or s.role == role)
            and (status is None or current_status(s.status) == status)
            and (include_inactive or s.active)
        ]
        return matching[skip:skip + limit]

    def set_active(self, subject_id: str, active: bool) -> Subject:
        with self._lock:
            subject = self.get_subject_or_raise(subject_id)
            subject.active = active
            self._subjects[subject_id] = subject
        return subject

    def read_status(self, subject_id: str) -> SubjectState:
        subject = self.get_subject_or_raise(subject_id)
        return SubjectState(role=subject.role, status=subject.status, active=subject.active)

    def read_active(self, subject_id: str) -> bool:
        return self.read_status(subject_id).active

    def write_status(self, subject_id: str, expected_current: ApplicationStatus,
                     new_status: ApplicationStatus) -> WriteOutcome:
        with self._lock:
            self.writes.append((subject_id, expected_current, new_status))
            subject = self._subjects.get(subject_id)
            if subject is None:
                raise SubjectNotFoundError(f"Subject {subject_id} not found")
            if not subject.active or subject.role != Role.STUDENT:
                return WriteOutcome.CONFLICT
            if current_status(subject.status) != expected_current:
                return WriteOutcome.CONFLICT
            subject = subject.model_copy(update={"status": new_status, "updated_at": utc_now()})
            self._subjects[subject_id] = subject
            return WriteOutcome.COMMITTED

    def stored_status(self, subject_id: str) -> Optional[ApplicationStatus]:
        return self._subjects[subject_id].status


class InMemoryAuditRepository:
    """Append-only list standing in for AuditRepository"""

    def __init__(self):
        self.events: List[StatusEvent] = []

    def create_event(self, event: StatusEvent) -> StatusEvent:
        self.events.append(event)
        return event

    def get_events_for_subject(self, subject_id: str, skip: int = 0, limit: int = 100) -> List[StatusEvent]:
        matching = [e for e in reversed(self.events) if e.subject_id == subject_id]
        return matching[skip:skip + limit]


@pytest.fixture
def registry():
    """Built-in area registry."""
    return default_area_registry(sign_in_area="/auth")


@pytest.fixture
def policy(registry):
    """Access policy over the built-in registry."""
    return AccessPolicy(registry)


@pytest.fixture
def route_guard(policy):
    return RouteGuard(policy)


@pytest.fixture
def store():
    """Empty in-memory subject store."""
    return InMemorySubjectRepository()


@pytest.fixture
def audit_repo():
    return InMemoryAuditRepository()


@pytest.fixture
def engine(store, policy, audit_repo):
    """Transition engine over the in-memory store."""
    return TransitionEngine(store, policy=policy, audit_writer=AuditWriter(audit_repo))


@pytest.fixture
def notification_repo():
    """Mock outbox repository."""
    repo = MagicMock()
    repo.create_notification.side_effect = lambda notification: notification
    return repo


@pytest.fixture
def notifier(notification_repo):
    return NotificationService(repo=notification_repo)


@pytest.fixture
def service(store, audit_repo, notifier, policy):
    """Workflow service wired entirely to in-memory fakes."""
    return EnrollmentWorkflowService(
        subject_repo=store,
        audit_repo=audit_repo,
        notifier=notifier,
        policy=policy,
        max_retries=2
    )


@pytest.fixture
def registrar():
    return ActorContext(subject_id="SUB-REGISTRAR", role=Role.REGISTRAR)

