"""Catalog service — asset types and networks.

Both catalogs behave the same way: names are unique regardless of case,
creation probes for an existing name before inserting, and an entry still
referenced by projects cannot be deleted.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import atomic
from app.errors import CatalogEntryNotFound, Conflict, MissingRequiredField, StorageConflict
from app.middleware.auth import AdminContext
from app.models.audit_log import AuditLog
from app.models.catalog import AssetType, Network
from app.models.project import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Catalog:
    model: type
    entity_type: str
    label: str
    project_column: object  # Project column holding the entry's name

    def default_description(self, name: str) -> Optional[str]:
        if self.model is Network:
            return f"{name} blockchain network"
        return None


ASSET_TYPES = Catalog(model=AssetType, entity_type="asset_type", label="Asset type", project_column=Project.type)
NETWORKS = Catalog(model=Network, entity_type="network", label="Network", project_column=Project.blockchain)


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise MissingRequiredField("Name is required")
    return cleaned


def _audit(catalog: Catalog, entry, action: str, actor_id: str, old_data=None, new_data=None) -> AuditLog:
    return AuditLog(
        entity_type=catalog.entity_type,
        entity_id=str(entry.id),
        action=action,
        actor_id=actor_id,
        old_data=json.dumps(old_data) if old_data is not None else None,
        new_data=json.dumps(new_data) if new_data is not None else None,
    )


def list_entries(db: Session, catalog: Catalog) -> list:
    return db.query(catalog.model).order_by(catalog.model.name.asc()).all()


def get_entry(db: Session, catalog: Catalog, entry_id: int):
    entry = db.query(catalog.model).filter(catalog.model.id == entry_id).first()
    if not entry:
        raise CatalogEntryNotFound(f"{catalog.label} not found")
    return entry


def exists(db: Session, catalog: Catalog, name: str, exclude_id: Optional[int] = None) -> bool:
    """Case-insensitive existence probe by name."""
    query = db.query(catalog.model.id).filter(func.lower(catalog.model.name) == name.strip().lower())
    if exclude_id is not None:
        query = query.filter(catalog.model.id != exclude_id)
    return query.first() is not None


def create_entry(
    ctx: AdminContext,
    catalog: Catalog,
    name: str,
    description: Optional[str] = None,
    icon: Optional[str] = None,
):
    db = ctx.db
    name = _clean_name(name)
    if exists(db, catalog, name):
        raise Conflict(f"{catalog.label} with this name already exists")

    entry = catalog.model(
        name=name,
        description=description or catalog.default_description(name),
        icon=icon,
    )
    try:
        with atomic(db, f"{catalog.entity_type} creation"):
            db.add(entry)
            db.flush()
            db.add(_audit(catalog, entry, "created", ctx.actor_id, new_data={"name": name}))
    except StorageConflict:
        # Lost a race against a concurrent insert of the same name
        raise Conflict(f"{catalog.label} with this name already exists")
    db.refresh(entry)
    logger.info("%s '%s' created by %s", catalog.label, name, ctx.actor_id)
    return entry


def update_entry(
    ctx: AdminContext,
    catalog: Catalog,
    entry_id: int,
    name: str,
    description: Optional[str] = None,
    icon: Optional[str] = None,
):
    db = ctx.db
    name = _clean_name(name)
    entry = get_entry(db, catalog, entry_id)
    if name.lower() != entry.name.lower() and exists(db, catalog, name, exclude_id=entry.id):
        raise Conflict(f"{catalog.label} with this name already exists")

    old = {"name": entry.name, "description": entry.description, "icon": entry.icon}
    try:
        with atomic(db, f"{catalog.entity_type} update"):
            renamed = 0
            if name != entry.name:
                # Projects reference catalog entries by name
                renamed = (
                    db.query(Project)
                    .filter(catalog.project_column == entry.name)
                    .update({catalog.project_column: name}, synchronize_session="fetch")
                )
            entry.name = name
            if description is not None:
                entry.description = description
            if icon is not None:
                entry.icon = icon
            db.add(_audit(catalog, entry, "updated", ctx.actor_id, old_data=old, new_data={
                "name": entry.name,
                "description": entry.description,
                "icon": entry.icon,
                "projects_renamed": renamed,
            }))
    except StorageConflict:
        raise Conflict(f"{catalog.label} with this name already exists")
    db.refresh(entry)
    return entry


def delete_entry(ctx: AdminContext, catalog: Catalog, entry_id: int) -> None:
    db = ctx.db
    entry = get_entry(db, catalog, entry_id)
    in_use = db.query(func.count(Project.id)).filter(catalog.project_column == entry.name).scalar() or 0
    if in_use:
        raise Conflict(
            f"Cannot delete this {catalog.label.lower()} because it is being used by {in_use} existing project(s)"
        )

    name = entry.name
    with atomic(db, f"{catalog.entity_type} deletion"):
        db.add(_audit(catalog, entry, "deleted", ctx.actor_id, old_data={"name": name}))
        db.delete(entry)
    logger.info("%s '%s' deleted by %s", catalog.label, name, ctx.actor_id)

