"""
Project moderation state machine.

States:

    pending ──► approved
       │  ──► rejected
       │  ──► changes_requested ──(owner edit)──► pending

Admins may move a project from any state to any state, including the state it
is already in (that re-stamps the reviewer and review time).  Owners can only
resubmit a ``changes_requested`` project, which sends it back to ``pending``.

The legacy ``approved`` boolean is never stored; it is derived from
``status`` wherever it is needed.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from app.errors import InvalidStatus, MissingRequiredField


class ProjectStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CHANGES_REQUESTED = "changes_requested"


PUBLISHABLE_STATUS = ProjectStatus.APPROVED

NOTES_REQUIRED = frozenset({ProjectStatus.CHANGES_REQUESTED})

ADMIN_TRANSITIONS: dict[ProjectStatus, frozenset] = {
    status: frozenset(ProjectStatus) for status in ProjectStatus
}

OWNER_TRANSITIONS: dict[ProjectStatus, frozenset] = {
    ProjectStatus.CHANGES_REQUESTED: frozenset({ProjectStatus.PENDING}),
}

RESUBMISSION_PREFIX = "[Updated] Previous feedback: "


@dataclass(frozen=True)
class Transition:
    """The full set of columns a moderation decision writes, applied together."""

    status: ProjectStatus
    review_notes: Optional[str]
    reviewer_id: str
    reviewed_at: datetime


def parse_status(value) -> ProjectStatus:
    """Coerce a raw value into a ProjectStatus or raise InvalidStatus."""
    if isinstance(value, ProjectStatus):
        return value
    try:
        return ProjectStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ProjectStatus)
        raise InvalidStatus(f"Invalid status '{value}'; expected one of {allowed}")


def normalize_notes(target: ProjectStatus, notes: Optional[str]) -> Optional[str]:
    """Trim review notes, enforcing them where the target status needs them."""
    cleaned = notes.strip() if notes else ""
    if target in NOTES_REQUIRED and not cleaned:
        raise MissingRequiredField("Review notes are required when requesting changes")
    return cleaned or None


def can_transition(current: ProjectStatus, target: ProjectStatus, as_admin: bool = True) -> bool:
    table = ADMIN_TRANSITIONS if as_admin else OWNER_TRANSITIONS
    return target in table.get(current, frozenset())


def plan_transition(
    target,
    actor_id: str,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Transition:
    """Validate an admin decision without touching storage.

    Raises:
        InvalidStatus: target is not one of the four statuses.
        MissingRequiredField: changes were requested without notes.
    """
    status = parse_status(target)
    review_notes = normalize_notes(status, notes)
    return Transition(
        status=status,
        review_notes=review_notes,
        reviewer_id=actor_id,
        reviewed_at=now or datetime.now(timezone.utc),
    )


def apply_transition(project, transition: Transition):
    """Write a planned transition onto a project record (all fields at once)."""
    project.status = transition.status.value
    project.review_notes = transition.review_notes
    project.reviewer_id = transition.reviewer_id
    project.reviewed_at = transition.reviewed_at
    return project


def is_editable(status) -> bool:
    """Owners may edit catalog attributes until the project is approved."""
    return parse_status(status) != ProjectStatus.APPROVED


def resubmission_notes(previous_notes: Optional[str]) -> Optional[str]:
    if not previous_notes:
        return None
    if previous_notes.startswith(RESUBMISSION_PREFIX):
        return previous_notes
    return f"{RESUBMISSION_PREFIX}{previous_notes}"
