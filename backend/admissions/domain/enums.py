"""Domain Enumerations - Status, role and action definitions"""
from enum import Enum


class ApplicationStatus(str, Enum):
    """Lifecycle stage of a subject moving from applicant to student"""
    APPLICANT = "applicant"
    CONSULTATION_PENDING = "consultation_pending"
    CONSULTATION_COMPLETED = "consultation_completed"
    PAYMENT_PENDING = "payment_pending"
    ENROLLMENT_SUBMITTED = "enrollment_submitted"
    STUDENT = "student"  # Terminal


class Role(str, Enum):
    """Closed set of roles; only STUDENT goes through the status workflow"""
    GUEST = "guest"
    STUDENT = "student"
    PARENT = "parent"
    TEACHER = "teacher"
    REGISTRAR = "registrar"
    ACCOUNTANT = "accountant"
    SUPER_ADMIN = "super_admin"


class Action(str, Enum):
    """Named action predicates evaluated against a status"""
    BOOK_CONSULTATION = "book_consultation"
    ACCESS_ENROLLMENT = "access_enrollment"
    MAKE_PAYMENT = "make_payment"
    HAS_COMPLETED_PAYMENT = "has_completed_payment"
    HAS_SUBMITTED_ENROLLMENT = "has_submitted_enrollment"
    ACCESS_STUDENT_FEATURES = "access_student_features"


class WorkflowEvent(str, Enum):
    """External events; each one drives exactly one forward transition"""
    CONSULTATION_BOOKED = "consultation_booked"
    CONSULTATION_COMPLETED = "consultation_completed"
    PAYMENT_REQUESTED = "payment_requested"
    ENROLLMENT_SUBMITTED = "enrollment_submitted"
    ENROLLMENT_APPROVED = "enrollment_approved"


class WriteOutcome(str, Enum):
    """Result of a conditional status write"""
    COMMITTED = "committed"
    CONFLICT = "conflict"


class NotificationStatus(str, Enum):
    """Notification outbox status"""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
