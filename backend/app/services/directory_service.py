"""Directory query engine — the public, publishable-only view of projects.

Whatever filters are passed, the base query is always restricted to approved
projects.  Results are ordered newest first with the id as tie-breaker so
repeated calls page through the same sequence.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Query, Session

from app.config import settings
from app.errors import InvalidInput, NotFound
from app.models.project import Project
from app.models.validation_result import ValidationResult

ALL_SENTINELS = frozenset({"", "all", "all-types", "all-blockchains"})

DEFAULT_MIN_ROI = 0.0
DEFAULT_MAX_ROI = 100.0


@dataclass(frozen=True)
class DirectoryFilters:
    asset_type: Optional[str] = None
    blockchain: Optional[str] = None
    min_roi: float = DEFAULT_MIN_ROI
    max_roi: float = DEFAULT_MAX_ROI
    cleared_only: bool = False

    def validate(self) -> None:
        if math.isnan(self.min_roi) or math.isnan(self.max_roi):
            raise InvalidInput("ROI bounds must be numbers")
        if self.min_roi > self.max_roi:
            raise InvalidInput(f"minRoi ({self.min_roi}) cannot exceed maxRoi ({self.max_roi})")


@dataclass
class DirectoryPage:
    items: list = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10
    total_pages: int = 0


def _is_all(value: Optional[str]) -> bool:
    return value is None or value.strip().lower() in ALL_SENTINELS


def publishable_query(db: Session) -> Query:
    """Base query for everything the public may see."""
    return db.query(Project).filter(Project.approved)


def apply_filters(query: Query, filters: DirectoryFilters) -> Query:
    if not _is_all(filters.asset_type):
        query = query.filter(Project.type == filters.asset_type)
    if not _is_all(filters.blockchain):
        query = query.filter(Project.blockchain == filters.blockchain)
    query = query.filter(Project.roi >= filters.min_roi, Project.roi <= filters.max_roi)
    if filters.cleared_only:
        query = query.join(ValidationResult, ValidationResult.project_id == Project.id).filter(
            ValidationResult.overall_passed.is_(True)
        )
    return query


def list_publishable(
    db: Session,
    filters: Optional[DirectoryFilters] = None,
    page: int = 1,
    limit: Optional[int] = None,
) -> DirectoryPage:
    """Return one page of publishable projects matching ``filters``.

    Raises:
        InvalidInput: page < 1, limit outside 1..MAX_PAGE_SIZE, or min > max ROI.
    """
    filters = filters or DirectoryFilters()
    limit = settings.DEFAULT_PAGE_SIZE if limit is None else limit

    if page < 1:
        raise InvalidInput("page must be 1 or greater")
    if limit < 1 or limit > settings.MAX_PAGE_SIZE:
        raise InvalidInput(f"limit must be between 1 and {settings.MAX_PAGE_SIZE}")
    filters.validate()

    query = apply_filters(publishable_query(db), filters)
    total = query.count()
    total_pages = math.ceil(total / limit) if total else 0

    items = (
        query.order_by(Project.created_at.desc(), Project.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return DirectoryPage(items=items, total=total, page=page, limit=limit, total_pages=total_pages)


def get_publishable(db: Session, project_id: str) -> Project:
    project = publishable_query(db).filter(Project.id == project_id).first()
    if not project:
        raise NotFound("Project not found")
    return project


def list_featured(db: Session, limit: int = 3) -> list[Project]:
    if limit < 1 or limit > settings.MAX_PAGE_SIZE:
        raise InvalidInput(f"limit must be between 1 and {settings.MAX_PAGE_SIZE}")
    return (
        publishable_query(db)
        .filter(Project.featured.is_(True))
        .order_by(Project.created_at.desc(), Project.id.asc())
        .limit(limit)
        .all()
    )
