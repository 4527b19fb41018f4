"""Project service — submission, owner edits and the moderation transitions."""

import json
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app import lifecycle
from app.database import atomic
from app.errors import Conflict, Forbidden, MissingRequiredField, ProjectNotFound
from app.lifecycle import ProjectStatus
from app.middleware.auth import AdminContext
from app.models.audit_log import AuditLog
from app.models.project import Project

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "type", "blockchain", "description", "website", "tvl")

# NOT NULL columns an edit payload may still carry as an explicit null
NON_NULLABLE_FIELDS = REQUIRED_FIELDS + ("roi",)

# Submitter-owned attributes.  Status, featured, reviewer stamps and
# timestamps are never accepted from a submitter payload.
EDITABLE_FIELDS = (
    "name",
    "type",
    "blockchain",
    "roi",
    "tvl",
    "description",
    "website",
    "audit_url",
    "audit_document_path",
    "whitepaper_document_path",
    "contact_email",
)


def _audit(entity_id: str, action: str, actor_id: Optional[str], old_data=None, new_data=None) -> AuditLog:
    return AuditLog(
        entity_type="project",
        entity_id=entity_id,
        action=action,
        actor_id=actor_id,
        old_data=json.dumps(old_data) if old_data is not None else None,
        new_data=json.dumps(new_data) if new_data is not None else None,
    )


def _name_taken(db: Session, name: str, exclude_id: Optional[str] = None) -> bool:
    query = db.query(Project.id).filter(func.lower(Project.name) == name.strip().lower())
    if exclude_id:
        query = query.filter(Project.id != exclude_id)
    return query.first() is not None


def get_project(db: Session, project_id: str) -> Optional[Project]:
    return db.query(Project).filter(Project.id == project_id).first()


def require_project(db: Session, project_id: str) -> Project:
    project = get_project(db, project_id)
    if not project:
        raise ProjectNotFound(f"Project '{project_id}' not found")
    return project


def submit_project(db: Session, data: dict) -> Project:
    """Create a new project in pending status."""
    missing = [f for f in REQUIRED_FIELDS if not str(data.get(f) or "").strip()]
    if missing:
        raise MissingRequiredField(f"Missing required fields: {', '.join(missing)}")

    if _name_taken(db, data["name"]):
        raise Conflict(f'A project with the name "{data["name"]}" already exists')

    project = Project(
        **{f: data[f] for f in EDITABLE_FIELDS if f in data},
        status=ProjectStatus.PENDING.value,
        featured=False,
    )
    with atomic(db, "project submission"):
        db.add(project)
        db.flush()
        db.add(_audit(project.id, "submitted", None, new_data={
            "name": project.name,
            "type": project.type,
            "blockchain": project.blockchain,
            "roi": project.roi,
        }))
    db.refresh(project)
    logger.info("Project %s submitted (%s)", project.id, project.name)
    return project


def update_by_owner(db: Session, project_id: str, contact_email: str, updates: dict) -> Project:
    """Apply a submitter's edits; resubmits projects that had changes requested."""
    changes = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS}
    if not changes:
        raise MissingRequiredField("No update data provided")

    project = require_project(db, project_id)

    owner_email = (project.contact_email or "").strip().lower()
    supplied_email = (contact_email or "").strip().lower()
    if not owner_email:
        raise Forbidden("This project has no contact email and cannot be edited by its submitter")
    if not supplied_email or supplied_email != owner_email:
        raise Forbidden("Contact email does not match this project")
    if not lifecycle.is_editable(project.status):
        raise Forbidden("Cannot update a project that has already been approved")
    if "contact_email" in changes and (changes["contact_email"] or "").strip().lower() != owner_email:
        raise Forbidden("Contact email cannot be changed")

    for field in NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            raise MissingRequiredField(f"Field '{field}' cannot be null")
    for field in REQUIRED_FIELDS:
        if field in changes and not str(changes[field]).strip():
            raise MissingRequiredField(f"Field '{field}' cannot be empty")

    new_name = changes.get("name")
    if new_name is not None and new_name != project.name and _name_taken(db, new_name, exclude_id=project.id):
        raise Conflict(f'A project with the name "{new_name}" already exists. Please use a different name.')

    old_status = project.status
    with atomic(db, "owner update"):
        for field, value in changes.items():
            setattr(project, field, value)

        action = "updated"
        current = lifecycle.parse_status(project.status)
        if lifecycle.can_transition(current, ProjectStatus.PENDING, as_admin=False):
            project.status = ProjectStatus.PENDING.value
            project.review_notes = lifecycle.resubmission_notes(project.review_notes)
            action = "resubmitted"

        db.add(_audit(
            project.id,
            action,
            None,
            old_data={"status": old_status},
            new_data={"status": project.status, "fields": sorted(changes)},
        ))
    db.refresh(project)
    logger.info("Project %s %s by owner", project.id, action)
    return project


def transition_project(
    ctx: AdminContext,
    project_id: str,
    target,
    notes: Optional[str] = None,
) -> Project:
    """Move a project to ``target`` on behalf of an authorized admin.

    Input is validated before storage is touched; the status, notes, reviewer
    stamp and audit row are committed together.
    """
    planned = lifecycle.plan_transition(target, ctx.actor_id, notes)

    db = ctx.db
    project = require_project(db, project_id)
    old = {"status": project.status, "review_notes": project.review_notes}

    with atomic(db, "status transition"):
        lifecycle.apply_transition(project, planned)
        db.add(_audit(
            project.id,
            "status_changed",
            ctx.actor_id,
            old_data=old,
            new_data={"status": planned.status.value, "review_notes": planned.review_notes},
        ))
    db.refresh(project)
    logger.info(
        "Project %s moved %s -> %s by %s",
        project.id, old["status"], planned.status.value, ctx.actor_id,
    )
    return project


def approve_project(ctx: AdminContext, project_id: str, notes: Optional[str] = None) -> Project:
    return transition_project(ctx, project_id, ProjectStatus.APPROVED, notes)


def reject_project(ctx: AdminContext, project_id: str, notes: Optional[str] = None) -> Project:
    return transition_project(ctx, project_id, ProjectStatus.REJECTED, notes)


def request_changes(ctx: AdminContext, project_id: str, notes: Optional[str]) -> Project:
    return transition_project(ctx, project_id, ProjectStatus.CHANGES_REQUESTED, notes)


def set_featured(ctx: AdminContext, project_id: str, featured: bool) -> Project:
    db = ctx.db
    project = require_project(db, project_id)
    old = project.featured
    with atomic(db, "featured toggle"):
        project.featured = featured
        db.add(_audit(
            project.id,
            "featured_changed",
            ctx.actor_id,
            old_data={"featured": old},
            new_data={"featured": featured},
        ))
    db.refresh(project)
    return project


# ── Admin reads ──────────────────────────────────────────────────────────────

def list_projects(db: Session, status: Optional[str] = None) -> list[Project]:
    """Moderation queue: every project, optionally narrowed to one status."""
    query = db.query(Project)
    if status:
        query = query.filter(Project.status == lifecycle.parse_status(status).value)
    return query.order_by(Project.created_at.asc(), Project.id.asc()).all()


def get_stats(db: Session) -> dict:
    total = db.query(func.count(Project.id)).scalar() or 0
    approved = db.query(func.count(Project.id)).filter(Project.approved).scalar() or 0
    pending = (
        db.query(func.count(Project.id))
        .filter(Project.status == ProjectStatus.PENDING.value)
        .scalar()
        or 0
    )
    average_roi = db.query(func.avg(Project.roi)).filter(Project.approved).scalar()
    return {
        "total": total,
        "approved": approved,
        "pending": pending,
        "average_roi": round(float(average_roi), 4) if average_roi is not None else 0.0,
    }


def counts_by(db: Session, column) -> dict[str, int]:
    rows = db.query(column, func.count(Project.id)).group_by(column).all()
    return {key: count for key, count in rows if key}


def counts_by_type(db: Session) -> dict[str, int]:
    return counts_by(db, Project.type)


def counts_by_network(db: Session) -> dict[str, int]:
    return counts_by(db, Project.blockchain)
