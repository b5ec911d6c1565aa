"""Persistence contracts consumed by the workflow engine"""
from typing import Protocol

from ..domain.enums import ApplicationStatus, WriteOutcome
from ..domain.models import SubjectState


class SubjectStore(Protocol):
    """
    Status persistence collaborator

    write_status is a conditional write: it only commits when the stored
    status still equals expected_current, so of two racing writers from the
    same state exactly one wins. Storage errors and timeouts raise
    PersistenceFailureError; unknown subjects raise SubjectNotFoundError.
    """

    def read_status(self, subject_id: str) -> SubjectState:
        ...

    def write_status(
        self,
        subject_id: str,
        expected_current: ApplicationStatus,
        new_status: ApplicationStatus
    ) -> WriteOutcome:
        ...

    def read_active(self, subject_id: str) -> bool:
        ...
