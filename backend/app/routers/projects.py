"""Projects router — the public directory, submission and owner edits."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.middleware.rate_limit import limiter
from app.models.project import Project
from app.schemas.project import (
    DirectoryPageResponse,
    ProjectOwnerUpdate,
    ProjectResponse,
    ProjectSubmit,
)
from app.services import directory_service, project_service
from app.services.directory_service import DEFAULT_MAX_ROI, DEFAULT_MIN_ROI, DirectoryFilters

router = APIRouter(prefix="/api/projects", tags=["projects"])


def project_to_response(project: Project) -> ProjectResponse:
    """Convert a Project ORM model to a response schema."""
    return ProjectResponse(
        id=project.id,
        name=project.name,
        type=project.type,
        blockchain=project.blockchain,
        roi=project.roi,
        tvl=project.tvl,
        description=project.description,
        website=project.website,
        audit_url=project.audit_url,
        audit_document_path=project.audit_document_path,
        whitepaper_document_path=project.whitepaper_document_path,
        status=project.status,
        approved=bool(project.approved),
        featured=bool(project.featured),
        review_notes=project.review_notes,
        reviewer_id=project.reviewer_id,
        reviewed_at=project.reviewed_at.isoformat() if project.reviewed_at else None,
        risk_level=project.validation.risk_level if project.validation else None,
        created_at=project.created_at.isoformat() if project.created_at else "",
        updated_at=project.updated_at.isoformat() if project.updated_at else None,
    )


@router.get("", response_model=DirectoryPageResponse)
def list_projects(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    asset_type: Optional[str] = Query(None, alias="assetType"),
    blockchain: Optional[str] = Query(None),
    min_roi: float = Query(DEFAULT_MIN_ROI, alias="minRoi"),
    max_roi: float = Query(DEFAULT_MAX_ROI, alias="maxRoi"),
    cleared_only: bool = Query(False, alias="clearedOnly"),
    db: Session = Depends(get_db),
):
    """Paginated list of approved projects."""
    filters = DirectoryFilters(
        asset_type=asset_type,
        blockchain=blockchain,
        min_roi=min_roi,
        max_roi=max_roi,
        cleared_only=cleared_only,
    )
    result = directory_service.list_publishable(db, filters, page=page, limit=limit)
    return DirectoryPageResponse(
        items=[project_to_response(p) for p in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/featured", response_model=list[ProjectResponse])
def featured_projects(limit: int = Query(3), db: Session = Depends(get_db)):
    return [project_to_response(p) for p in directory_service.list_featured(db, limit)]


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(project_id: str, db: Session = Depends(get_db)):
    """Public detail view; unpublished projects are reported as missing."""
    return project_to_response(directory_service.get_publishable(db, project_id))


@router.post("/submit", response_model=ProjectResponse, status_code=201)
@limiter.limit(settings.SUBMIT_RATE_LIMIT)
def submit_project(request: Request, req: ProjectSubmit, db: Session = Depends(get_db)):
    """Submit a project for review. It starts out pending."""
    project = project_service.submit_project(db, req.model_dump())
    return project_to_response(project)


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(project_id: str, req: ProjectOwnerUpdate, db: Session = Depends(get_db)):
    """Owner edit; resubmits the project when changes had been requested."""
    project = project_service.update_by_owner(
        db,
        project_id,
        req.contact_email,
        req.updated_data.model_dump(exclude_unset=True),
    )
    return project_to_response(project)
