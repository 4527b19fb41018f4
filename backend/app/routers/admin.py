"""Admin router — moderation actions, the review queue and statistics.

Every route here depends on ``require_admin_context``; the handlers are thin
adapters over the single transition entry point in project_service.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.middleware.auth import AdminContext, require_admin_context
from app.schemas.auth import AdminCheckResponse
from app.schemas.project import (
    FeaturedUpdate,
    ModerationResponse,
    ProjectListResponse,
    ProjectStatsResponse,
    ReviewRequest,
    StatusUpdateRequest,
)
from app.routers.projects import project_to_response
from app.services import project_service

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/auth/check", response_model=AdminCheckResponse)
def auth_check(ctx: AdminContext = Depends(require_admin_context)):
    """Confirm the caller holds an admin session."""
    identity = ctx.identity
    return AdminCheckResponse(id=identity.id, email=identity.email, role=identity.role)


@router.get("/projects", response_model=ProjectListResponse)
def list_projects(
    status: Optional[str] = Query(None),
    ctx: AdminContext = Depends(require_admin_context),
):
    """Every project regardless of status, oldest submission first."""
    projects = project_service.list_projects(ctx.db, status=status)
    return ProjectListResponse(
        projects=[project_to_response(p) for p in projects],
        total=len(projects),
    )


@router.get("/projects/stats", response_model=ProjectStatsResponse)
def project_stats(ctx: AdminContext = Depends(require_admin_context)):
    return ProjectStatsResponse(**project_service.get_stats(ctx.db))


@router.get("/projects/counts-by-type")
def counts_by_type(ctx: AdminContext = Depends(require_admin_context)):
    return {"success": True, "data": project_service.counts_by_type(ctx.db)}


@router.get("/projects/counts-by-network")
def counts_by_network(ctx: AdminContext = Depends(require_admin_context)):
    return {"success": True, "data": project_service.counts_by_network(ctx.db)}


@router.post("/projects/{project_id}/approve", response_model=ModerationResponse)
def approve_project(
    project_id: str,
    req: Optional[ReviewRequest] = None,
    ctx: AdminContext = Depends(require_admin_context),
):
    project = project_service.approve_project(ctx, project_id, req.notes if req else None)
    return ModerationResponse(message="Project approved successfully", data=project_to_response(project))


@router.post("/projects/{project_id}/reject", response_model=ModerationResponse)
def reject_project(
    project_id: str,
    req: Optional[ReviewRequest] = None,
    ctx: AdminContext = Depends(require_admin_context),
):
    project = project_service.reject_project(ctx, project_id, req.notes if req else None)
    return ModerationResponse(message="Project rejected", data=project_to_response(project))


@router.post("/projects/{project_id}/request-changes", response_model=ModerationResponse)
def request_changes(
    project_id: str,
    req: ReviewRequest,
    ctx: AdminContext = Depends(require_admin_context),
):
    project = project_service.request_changes(ctx, project_id, req.notes)
    return ModerationResponse(message="Changes requested successfully", data=project_to_response(project))


@router.post("/projects/{project_id}/status", response_model=ModerationResponse)
def update_status(
    project_id: str,
    req: StatusUpdateRequest,
    ctx: AdminContext = Depends(require_admin_context),
):
    project = project_service.transition_project(ctx, project_id, req.status, req.notes)
    return ModerationResponse(message=f"Project status set to {project.status}", data=project_to_response(project))


@router.patch("/projects/{project_id}/featured", response_model=ModerationResponse)
def set_featured(
    project_id: str,
    req: FeaturedUpdate,
    ctx: AdminContext = Depends(require_admin_context),
):
    project = project_service.set_featured(ctx, project_id, req.featured)
    return ModerationResponse(message="Featured flag updated", data=project_to_response(project))
