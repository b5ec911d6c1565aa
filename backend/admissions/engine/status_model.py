"""Status Model - Lifecycle states and the legal transition graph

The graph is a strict linear chain:

    applicant -> consultation_pending -> consultation_completed
              -> payment_pending -> enrollment_submitted -> student

This table is the only place adjacency is defined; the transition engine
consults it and nothing else hard-codes successors.
"""
from typing import Dict, FrozenSet, List, Optional, Union

from ..domain.enums import ApplicationStatus
from ..domain.errors import UnknownStatusError
from ..domain.models import StatusDisplay, ProgressStep

# Lifecycle order
STATUS_CHAIN: List[ApplicationStatus] = [
    ApplicationStatus.APPLICANT,
    ApplicationStatus.CONSULTATION_PENDING,
    ApplicationStatus.CONSULTATION_COMPLETED,
    ApplicationStatus.PAYMENT_PENDING,
    ApplicationStatus.ENROLLMENT_SUBMITTED,
    ApplicationStatus.STUDENT,
]

DEFAULT_STATUS = ApplicationStatus.APPLICANT

STATUS_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    current: frozenset([STATUS_CHAIN[i + 1]]) if i + 1 < len(STATUS_CHAIN) else frozenset()
    for i, current in enumerate(STATUS_CHAIN)
}

_DISPLAY: Dict[ApplicationStatus, StatusDisplay] = {
    ApplicationStatus.APPLICANT: StatusDisplay(
        status=ApplicationStatus.APPLICANT,
        label="New Applicant",
        description="Ready to book consultation",
        next_action="Book consultation to get started",
    ),
    ApplicationStatus.CONSULTATION_PENDING: StatusDisplay(
        status=ApplicationStatus.CONSULTATION_PENDING,
        label="Consultation Scheduled",
        description="Awaiting consultation completion",
        next_action="Complete your consultation with our team",
    ),
    ApplicationStatus.CONSULTATION_COMPLETED: StatusDisplay(
        status=ApplicationStatus.CONSULTATION_COMPLETED,
        label="Consultation Complete",
        description="Ready to proceed with payment",
        next_action="Complete payment to proceed with enrollment",
    ),
    ApplicationStatus.PAYMENT_PENDING: StatusDisplay(
        status=ApplicationStatus.PAYMENT_PENDING,
        label="Payment Required",
        description="Complete payment to proceed with enrollment",
        next_action="Complete payment to enable enrollment",
    ),
    ApplicationStatus.ENROLLMENT_SUBMITTED: StatusDisplay(
        status=ApplicationStatus.ENROLLMENT_SUBMITTED,
        label="Enrollment Submitted",
        description="Your enrollment application is under review",
        next_action="Wait for enrollment approval from registrar",
    ),
    ApplicationStatus.STUDENT: StatusDisplay(
        status=ApplicationStatus.STUDENT,
        label="Active Student",
        description="Fully enrolled and active",
    ),
}

_PROGRESS_LABELS: Dict[ApplicationStatus, str] = {
    ApplicationStatus.APPLICANT: "New Applicant",
    ApplicationStatus.CONSULTATION_PENDING: "Book Consultation",
    ApplicationStatus.CONSULTATION_COMPLETED: "Complete Consultation",
    ApplicationStatus.PAYMENT_PENDING: "Complete Payment",
    ApplicationStatus.ENROLLMENT_SUBMITTED: "Submit Enrollment",
    ApplicationStatus.STUDENT: "Active Student",
}


def current_status(raw: Union[ApplicationStatus, str, None]) -> ApplicationStatus:
    """
    Normalize a stored status value

    An absent or empty value means the subject never left the starting
    state and reads as applicant.

    Raises:
        UnknownStatusError: If the value is not a lifecycle state
    """
    if raw is None or raw == "":
        return DEFAULT_STATUS
    if isinstance(raw, ApplicationStatus):
        return raw
    try:
        return ApplicationStatus(raw)
    except ValueError:
        raise UnknownStatusError(
            f"Unknown application status: {raw}",
            details={"status": raw}
        )


def parse_status(value: Union[ApplicationStatus, str]) -> ApplicationStatus:
    """Strictly parse a requested status; unlike current_status, absence is an error"""
    if isinstance(value, ApplicationStatus):
        return value
    try:
        return ApplicationStatus(value)
    except ValueError:
        raise UnknownStatusError(
            f"Unknown application status: {value}",
            details={"status": value}
        )


def legal_successors(status: ApplicationStatus) -> FrozenSet[ApplicationStatus]:
    """Statuses reachable from status in one transition"""
    return STATUS_TRANSITIONS[status]


def next_status(status: ApplicationStatus) -> Optional[ApplicationStatus]:
    """The sole successor, or None at the terminal state"""
    successors = legal_successors(status)
    return next(iter(successors)) if successors else None


def previous_status(status: ApplicationStatus) -> Optional[ApplicationStatus]:
    """The sole predecessor, or None at the starting state"""
    for candidate, successors in STATUS_TRANSITIONS.items():
        if status in successors:
            return candidate
    return None


def is_terminal(status: ApplicationStatus) -> bool:
    """True for the final status, which has no successors"""
    return not legal_successors(status)


def is_transition_allowed(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    """Check if target is a legal successor of current"""
    return target in legal_successors(current)


def status_display(status: ApplicationStatus) -> StatusDisplay:
    """Label, description and next-action hint for a status"""
    return _DISPLAY[status]


def progress(status: ApplicationStatus) -> List[ProgressStep]:
    """Ordered progress steps; every step up to and including status is completed"""
    position = STATUS_CHAIN.index(status)
    return [
        ProgressStep(status=s, label=_PROGRESS_LABELS[s], completed=i <= position)
        for i, s in enumerate(STATUS_CHAIN)
    ]
