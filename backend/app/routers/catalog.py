"""Catalog routers — asset types and networks share one set of handlers."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth import AdminContext, require_admin_context
from app.schemas.catalog import (
    CatalogEntryCreate,
    CatalogEntryEnvelope,
    CatalogEntryResponse,
    CatalogListResponse,
)
from app.services import catalog_service
from app.services.catalog_service import ASSET_TYPES, NETWORKS, Catalog


def _entry_to_response(entry) -> CatalogEntryResponse:
    return CatalogEntryResponse(
        id=entry.id,
        name=entry.name,
        description=entry.description,
        icon=entry.icon,
        created_at=entry.created_at.isoformat() if entry.created_at else "",
        updated_at=entry.updated_at.isoformat() if entry.updated_at else None,
    )


def build_router(catalog: Catalog, prefix: str, tag: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get("", response_model=CatalogListResponse)
    def list_entries(db: Session = Depends(get_db)):
        return CatalogListResponse(
            data=[_entry_to_response(e) for e in catalog_service.list_entries(db, catalog)]
        )

    @router.get("/{entry_id}", response_model=CatalogEntryEnvelope)
    def get_entry(entry_id: int, db: Session = Depends(get_db)):
        return CatalogEntryEnvelope(data=_entry_to_response(catalog_service.get_entry(db, catalog, entry_id)))

    @router.post("", response_model=CatalogEntryEnvelope, status_code=201)
    def create_entry(req: CatalogEntryCreate, ctx: AdminContext = Depends(require_admin_context)):
        entry = catalog_service.create_entry(ctx, catalog, req.name, req.description, req.icon)
        return CatalogEntryEnvelope(data=_entry_to_response(entry))

    @router.put("/{entry_id}", response_model=CatalogEntryEnvelope)
    def update_entry(
        entry_id: int,
        req: CatalogEntryCreate,
        ctx: AdminContext = Depends(require_admin_context),
    ):
        entry = catalog_service.update_entry(ctx, catalog, entry_id, req.name, req.description, req.icon)
        return CatalogEntryEnvelope(data=_entry_to_response(entry))

    @router.delete("/{entry_id}")
    def delete_entry(entry_id: int, ctx: AdminContext = Depends(require_admin_context)):
        catalog_service.delete_entry(ctx, catalog, entry_id)
        return {"success": True, "message": f"{catalog.label} deleted successfully"}

    return router


asset_types_router = build_router(ASSET_TYPES, "/api/asset-types", "asset-types")
networks_router = build_router(NETWORKS, "/api/networks", "networks")
