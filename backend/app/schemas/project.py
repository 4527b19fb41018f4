"""Project request/response schemas."""

from typing import Optional
from pydantic import BaseModel


class ProjectSubmit(BaseModel):
    name: str
    type: str
    blockchain: str
    roi: float = 0.0
    tvl: str
    description: str
    website: str
    audit_url: Optional[str] = None
    audit_document_path: Optional[str] = None
    whitepaper_document_path: Optional[str] = None
    contact_email: Optional[str] = None


class ProjectFields(BaseModel):
    """Submitter-editable attributes; everything optional for partial edits."""

    name: Optional[str] = None
    type: Optional[str] = None
    blockchain: Optional[str] = None
    roi: Optional[float] = None
    tvl: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    audit_url: Optional[str] = None
    audit_document_path: Optional[str] = None
    whitepaper_document_path: Optional[str] = None
    contact_email: Optional[str] = None


class ProjectOwnerUpdate(BaseModel):
    contact_email: str
    updated_data: ProjectFields


class ReviewRequest(BaseModel):
    notes: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: str
    notes: Optional[str] = None


class FeaturedUpdate(BaseModel):
    featured: bool


class ProjectResponse(BaseModel):
    id: str
    name: str
    type: str
    blockchain: str
    roi: float
    tvl: str
    description: str
    website: str
    audit_url: Optional[str]
    audit_document_path: Optional[str]
    whitepaper_document_path: Optional[str]
    status: str
    approved: bool  # legacy flag, derived from status
    featured: bool
    review_notes: Optional[str]
    reviewer_id: Optional[str]
    reviewed_at: Optional[str]
    risk_level: Optional[str] = None  # null when the project was never screened
    created_at: str
    updated_at: Optional[str]

    class Config:
        from_attributes = True


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]
    total: int


class DirectoryPageResponse(BaseModel):
    items: list[ProjectResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class ProjectStatsResponse(BaseModel):
    total: int
    approved: int
    pending: int
    average_roi: float


class ModerationResponse(BaseModel):
    success: bool = True
    message: str
    data: ProjectResponse
