"""Repository modules - Data access layer"""
from .base import SubjectStore
from .mongo_client import get_database, get_collection
from .subject_repo import SubjectRepository
from .audit_repo import AuditRepository
from .notification_repo import NotificationRepository

__all__ = [
    "SubjectStore",
    "get_database",
    "get_collection",
    "SubjectRepository",
    "AuditRepository",
    "NotificationRepository",
]
