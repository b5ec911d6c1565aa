"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error - all errors extend this"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Authentication & Authorization Errors
class AuthenticationError(DomainError):
    """Caller identity missing or unknown"""
    error_code = "AUTHENTICATION_ERROR"
    http_status = 401


class UnauthorizedError(DomainError):
    """Caller's role may not request this transition at all"""
    error_code = "UNAUTHORIZED"
    http_status = 403


# Validation Errors
class ValidationError(DomainError):
    """Input validation failed"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class UnknownStatusError(ValidationError):
    """Stored or requested status is not one of the lifecycle states"""
    error_code = "UNKNOWN_STATUS"


class AreaRegistryError(ValidationError):
    """Area registry configuration is inconsistent"""
    error_code = "AREA_REGISTRY_ERROR"
    http_status = 500


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class SubjectNotFoundError(NotFoundError):
    """Subject not found"""
    error_code = "SUBJECT_NOT_FOUND"


# Conflict Errors
class ConflictError(DomainError):
    """Resource conflict"""
    error_code = "CONFLICT"
    http_status = 409


class InvalidTransitionError(ConflictError):
    """Requested edge is not in the status graph"""
    error_code = "INVALID_TRANSITION"

    def __init__(
        self,
        from_status: Optional[str],
        to_status: Optional[str],
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.from_status = from_status
        self.to_status = to_status
        merged = {"from": from_status, "to": to_status}
        merged.update(details or {})
        super().__init__(
            message or f"Invalid status transition from {from_status} to {to_status}",
            details=merged
        )


class PersistenceConflictError(ConflictError):
    """Lost a race on the conditional status write; safe to retry after re-read"""
    error_code = "PERSISTENCE_CONFLICT"


class AlreadyExistsError(ConflictError):
    """Resource already exists"""
    error_code = "ALREADY_EXISTS"


# Storage Errors
class PersistenceFailureError(DomainError):
    """Underlying storage error or timeout; not safe to blindly retry"""
    error_code = "PERSISTENCE_FAILURE"
    http_status = 503
