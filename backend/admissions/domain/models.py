"""Domain Models - Pydantic schemas for subjects, transitions and access decisions"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .enums import ApplicationStatus, Role, Action, WorkflowEvent, NotificationStatus
from .errors import UnknownStatusError


# ============================================================================
# Subject
# ============================================================================

class SubjectState(BaseModel):
    """The workflow-relevant slice of a subject"""
    model_config = ConfigDict(extra="ignore")

    role: Role = Field(..., description="Subject role")
    status: Optional[ApplicationStatus] = Field(
        None, description="Stored lifecycle status; absent reads as applicant"
    )
    active: bool = Field(default=True, description="False once archived")

    @field_validator("status", mode="before")
    @classmethod
    def _known_status(cls, value):
        # Empty string is stored absence; anything outside the lifecycle is a typed error
        if value is None or value == "":
            return None
        try:
            return ApplicationStatus(value)
        except ValueError:
            raise UnknownStatusError(
                f"Unknown application status: {value}",
                details={"status": value}
            )


class Subject(SubjectState):
    """A person tracked through the enrollment lifecycle"""

    subject_id: str = Field(..., description="Opaque unique identifier")
    display_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ActorContext(BaseModel):
    """Whoever is asking for a transition"""
    model_config = ConfigDict(extra="forbid")

    subject_id: str = Field(..., description="Caller's own subject ID")
    role: Role = Field(..., description="Caller's role")


# ============================================================================
# Transitions
# ============================================================================

class TransitionResult(BaseModel):
    """Outcome of a committed (or already applied) transition"""

    subject_id: str
    from_status: ApplicationStatus
    to_status: ApplicationStatus
    committed_at: datetime
    already_applied: bool = Field(
        default=False,
        description="True when a concurrent writer had already moved the subject to the target"
    )


class StatusDisplay(BaseModel):
    """Human-readable description of a status"""

    status: ApplicationStatus
    label: str
    description: str
    next_action: Optional[str] = None


class ProgressStep(BaseModel):
    """One step of the lifecycle progress tracker"""

    status: ApplicationStatus
    label: str
    completed: bool


# ============================================================================
# Access
# ============================================================================

class GuardDecision(BaseModel):
    """Allow, or redirect to another area"""
    model_config = ConfigDict(frozen=True)

    allowed: bool
    redirect_to: Optional[str] = None
    resume_to: Optional[str] = Field(
        None, description="Originally requested area, kept for post sign-in resumption"
    )

    @classmethod
    def allow(cls) -> "GuardDecision":
        return cls(allowed=True)

    @classmethod
    def redirect(cls, area: str, resume_to: Optional[str] = None) -> "GuardDecision":
        return cls(allowed=False, redirect_to=area, resume_to=resume_to)


class StatusOverview(BaseModel):
    """Everything a front end needs to render a subject's position in the workflow"""

    subject_id: str
    role: Role
    active: bool
    status: Optional[ApplicationStatus] = None
    display: Optional[StatusDisplay] = None
    progress: List[ProgressStep] = Field(default_factory=list)
    next_status: Optional[ApplicationStatus] = None
    reachable_areas: List[str] = Field(default_factory=list)
    home_area: str
    permitted_actions: List[Action] = Field(default_factory=list)


# ============================================================================
# Audit & Notifications
# ============================================================================

class StatusEvent(BaseModel):
    """Append-only record of one committed transition"""

    event_id: str
    subject_id: str
    from_status: ApplicationStatus
    to_status: ApplicationStatus
    actor_id: Optional[str] = None
    actor_role: Optional[Role] = None
    timestamp: datetime
    correlation_id: Optional[str] = None


class NotificationOutbox(BaseModel):
    """Pending notification; delivery happens elsewhere"""

    notification_id: str
    subject_id: str
    event_kind: WorkflowEvent
    status: NotificationStatus = NotificationStatus.PENDING
    created_at: datetime
    correlation_id: Optional[str] = None
