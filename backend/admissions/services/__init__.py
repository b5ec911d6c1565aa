"""Service layer - Business logic"""
from .enrollment_service import EnrollmentWorkflowService
from .notification_service import NotificationService

__all__ = [
    "EnrollmentWorkflowService",
    "NotificationService",
]
