"""Request/response schemas for the HTTP API"""
from typing import Optional
from pydantic import BaseModel, Field

from ...domain.enums import Action, ApplicationStatus, Role


class RegisterSubjectRequest(BaseModel):
    """Register a new subject"""
    role: Role = Role.STUDENT
    display_name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=320)
    phone: Optional[str] = Field(None, max_length=32)


class TransitionRequest(BaseModel):
    """Request a single transition"""
    target_status: ApplicationStatus


class ActionCheckResponse(BaseModel):
    """Result of a named action predicate"""
    action: Action
    status: Optional[ApplicationStatus] = None
    permitted: bool
