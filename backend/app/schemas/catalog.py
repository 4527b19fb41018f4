"""Asset type / network request/response schemas."""

from typing import Optional
from pydantic import BaseModel


class CatalogEntryCreate(BaseModel):
    name: str = ""
    description: Optional[str] = None
    icon: Optional[str] = None


class CatalogEntryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    icon: Optional[str]
    created_at: str
    updated_at: Optional[str]

    class Config:
        from_attributes = True


class CatalogEntryEnvelope(BaseModel):
    success: bool = True
    data: CatalogEntryResponse


class CatalogListResponse(BaseModel):
    success: bool = True
    data: list[CatalogEntryResponse]
