"""SQLAlchemy ORM models."""

from app.models.user import User
from app.models.project import Project
from app.models.validation_result import ValidationResult
from app.models.catalog import AssetType, Network
from app.models.audit_log import AuditLog

__all__ = [
    "User",
    "Project",
    "ValidationResult",
    "AssetType",
    "Network",
    "AuditLog",
]
