"""Status workflow engine"""
from .status_model import legal_successors, next_status, current_status
from .transition_engine import TransitionEngine
from .access_policy import AccessPolicy, can_perform
from .route_guard import RouteGuard
from .audit_writer import AuditWriter

__all__ = [
    "legal_successors",
    "next_status",
    "current_status",
    "TransitionEngine",
    "AccessPolicy",
    "can_perform",
    "RouteGuard",
    "AuditWriter",
]
