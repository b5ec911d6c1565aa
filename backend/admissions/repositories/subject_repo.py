"""Subject Repository - Data access for subjects and their application status"""
from typing import Any, Dict, List, Optional
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from .mongo_client import SUBJECTS, get_collection
from ..domain.models import Subject, SubjectState
from ..domain.enums import ApplicationStatus, Role, WriteOutcome
from ..domain.errors import (
    SubjectNotFoundError, AlreadyExistsError, PersistenceFailureError, UnknownStatusError
)
from ..utils.logger import get_logger
from ..utils.time import utc_now, ensure_utc

logger = get_logger(__name__)


class SubjectRepository:
    """Repository for subject operations; implements SubjectStore"""

    def __init__(self, collection: Optional[Collection] = None):
        self._subjects: Collection = collection if collection is not None else get_collection(SUBJECTS)

    # =========================================================================
    # Subject CRUD
    # =========================================================================

    def create_subject(self, subject: Subject) -> Subject:
        """Create a new subject"""
        doc = self._to_document(subject)
        try:
            self._subjects.insert_one(doc)
        except DuplicateKeyError:
            raise AlreadyExistsError(
                f"Subject {subject.subject_id} already exists",
                details={"subject_id": subject.subject_id}
            )
        except PyMongoError as e:
            raise self._failure("create_subject", subject.subject_id, e) from e

        logger.info(f"Created subject: {subject.subject_id}", extra={"subject_id": subject.subject_id})
        return subject

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        """Get subject by ID"""
        doc = self._find(subject_id)
        if doc:
            return self._from_document(doc)
        return None

    def get_subject_or_raise(self, subject_id: str) -> Subject:
        """Get subject by ID or raise error"""
        subject = self.get_subject(subject_id)
        if not subject:
            raise SubjectNotFoundError(
                f"Subject {subject_id} not found",
                details={"subject_id": subject_id}
            )
        return subject

    def list_subjects(
        self,
        role: Optional[Role] = None,
        status: Optional[ApplicationStatus] = None,
        include_inactive: bool = False,
        skip: int = 0,
        limit: int = 50
    ) -> List[Subject]:
        """List subjects, optionally filtered by role and status"""
        query: Dict[str, Any] = {}
        if role:
            query["role"] = role.value
        if status:
            query["status"] = self._status_filter(status)
        if not include_inactive:
            query["active"] = True

        try:
            docs = list(self._subjects.find(query).sort("updated_at", -1).skip(skip).limit(limit))
        except PyMongoError as e:
            raise self._failure("list_subjects", None, e) from e

        subjects = []
        for doc in docs:
            try:
                subjects.append(self._from_document(doc))
            except UnknownStatusError as e:
                # One bad record must not hide the rest of the page
                logger.warning(
                    f"Skipping subject with unknown status: {e.details.get('status')}",
                    extra={"subject_id": doc.get("subject_id"), "error_code": e.error_code}
                )
        return subjects

    def set_active(self, subject_id: str, active: bool) -> Subject:
        """Archive or restore a subject (administrative, outside the status workflow)"""
        try:
            result = self._subjects.find_one_and_update(
                {"subject_id": subject_id},
                {"$set": {"active": active, "updated_at": utc_now()}},
                return_document=ReturnDocument.AFTER
            )
        except PyMongoError as e:
            raise self._failure("set_active", subject_id, e) from e

        if result is None:
            raise SubjectNotFoundError(
                f"Subject {subject_id} not found",
                details={"subject_id": subject_id}
            )
        logger.info(
            f"Subject {'restored' if active else 'archived'}: {subject_id}",
            extra={"subject_id": subject_id}
        )
        return self._from_document(result)

    # =========================================================================
    # SubjectStore
    # =========================================================================

    def read_status(self, subject_id: str) -> SubjectState:
        """Read role, status and active flag"""
        doc = self._find(subject_id, projection={"role": 1, "status": 1, "active": 1})
        if not doc:
            raise SubjectNotFoundError(
                f"Subject {subject_id} not found",
                details={"subject_id": subject_id}
            )
        doc.pop("_id", None)
        return SubjectState.model_validate(doc)

    def read_active(self, subject_id: str) -> bool:
        """Read the active flag"""
        return self.read_status(subject_id).active

    def write_status(
        self,
        subject_id: str,
        expected_current: ApplicationStatus,
        new_status: ApplicationStatus
    ) -> WriteOutcome:
        """
        Conditionally set status: only when the stored status still equals
        expected_current.

        Returns:
            COMMITTED if this write won, CONFLICT if the stored status had moved

        Raises:
            SubjectNotFoundError: If the subject does not exist
            PersistenceFailureError: On storage errors and timeouts
        """
        try:
            result = self._subjects.find_one_and_update(
                {
                    "subject_id": subject_id,
                    "role": Role.STUDENT.value,
                    "active": True,
                    "status": self._status_filter(expected_current)
                },
                {"$set": {"status": new_status.value, "updated_at": utc_now()}},
                projection={"status": 1},
                return_document=ReturnDocument.AFTER
            )
            if result is not None:
                return WriteOutcome.COMMITTED

            exists = self._subjects.find_one({"subject_id": subject_id}, {"_id": 1})
        except PyMongoError as e:
            raise self._failure("write_status", subject_id, e) from e

        if exists is None:
            raise SubjectNotFoundError(
                f"Subject {subject_id} not found",
                details={"subject_id": subject_id}
            )

        logger.warning(
            f"Conditional status write lost for subject {subject_id}",
            extra={
                "subject_id": subject_id,
                "from_status": expected_current.value,
                "to_status": new_status.value
            }
        )
        return WriteOutcome.CONFLICT

    # =========================================================================
    # Helpers
    # =========================================================================

    def _find(self, subject_id: str, projection: Optional[Dict[str, int]] = None) -> Optional[Dict[str, Any]]:
        try:
            return self._subjects.find_one({"subject_id": subject_id}, projection)
        except PyMongoError as e:
            raise self._failure("find_subject", subject_id, e) from e

    @staticmethod
    def _status_filter(status: ApplicationStatus) -> Any:
        """An absent stored status counts as applicant"""
        if status == ApplicationStatus.APPLICANT:
            return {"$in": [status.value, None]}
        return status.value

    @staticmethod
    def _to_document(subject: Subject) -> Dict[str, Any]:
        # Keep datetimes native so MongoDB can sort on them
        doc = subject.model_dump(mode="json", exclude={"created_at", "updated_at"})
        now = utc_now()
        doc["created_at"] = subject.created_at or now
        doc["updated_at"] = subject.updated_at or now
        doc["_id"] = subject.subject_id
        return doc

    @staticmethod
    def _from_document(doc: Dict[str, Any]) -> Subject:
        doc = dict(doc)
        doc.pop("_id", None)
        for key in ("created_at", "updated_at"):
            if doc.get(key) is not None:
                doc[key] = ensure_utc(doc[key])
        return Subject.model_validate(doc)

    @staticmethod
    def _failure(operation: str, subject_id: Optional[str], error: PyMongoError) -> PersistenceFailureError:
        logger.error(
            f"MongoDB error during {operation}: {error}",
            extra={"subject_id": subject_id, "error_code": type(error).__name__}
        )
        return PersistenceFailureError(
            f"Storage error during {operation}",
            details={"subject_id": subject_id, "error_type": type(error).__name__}
        )
