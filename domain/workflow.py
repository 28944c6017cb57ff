"""
Application status workflow.

    pending -> in_review -> {approved, rejected}, approved -> completed

Review statuses (in_review, approved, rejected) may be set from any other
state, so staff can skip ahead from pending. ``completed`` is reachable only
from ``approved``. Re-applying the current status is refused.
"""

from __future__ import annotations

from core.errors import TransitionError
from domain.models import ApplicationStatus

S = ApplicationStatus

REVIEW_STATUSES = (S.IN_REVIEW, S.APPROVED, S.REJECTED)

TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    current: frozenset(
        [t for t in REVIEW_STATUSES if t != current] + ([S.COMPLETED] if current == S.APPROVED else [])
    )
    for current in ApplicationStatus
}

# button order on the review board
ACTIONS: list[tuple[ApplicationStatus, str]] = [
    (S.IN_REVIEW, "Mark as In Review"),
    (S.APPROVED, "Approve"),
    (S.REJECTED, "Reject"),
    (S.COMPLETED, "Mark as Completed"),
]


def allowed_targets(current: ApplicationStatus | str) -> frozenset[ApplicationStatus]:
    return TRANSITIONS[ApplicationStatus(current)]


def can_transition(current: ApplicationStatus | str, target: ApplicationStatus | str) -> bool:
    return ApplicationStatus(target) in allowed_targets(current)


def check_transition(current: ApplicationStatus | str, target: ApplicationStatus | str) -> None:
    """Raise ``TransitionError`` unless ``current -> target`` is in the table."""
    if not can_transition(current, target):
        raise TransitionError(ApplicationStatus(current).value, ApplicationStatus(target).value)


def action_states(current: ApplicationStatus | str) -> list[dict]:
    """Review-board buttons with their enabled flag for an application in ``current``."""
    allowed = allowed_targets(current)
    return [
        {"status": status.value, "label": label, "enabled": status in allowed}
        for status, label in ACTIONS
    ]


def status_notification(status: ApplicationStatus | str, service_name: str | None) -> tuple[str, str]:
    """Title and message sent to the citizen after a status change."""
    status = ApplicationStatus(status)
    label = status.label
    title = f"Application {label[:1].upper()}{label[1:]}"
    message = f"Your application for {service_name or 'your service'} has been {label}."
    return title, message


def submission_notification(service_name: str) -> tuple[str, str]:
    return (
        "Application Submitted",
        f"Your application for {service_name} has been submitted successfully and is pending review.",
    )
