"""Error taxonomy shared by services and the HTTP layer.

Every error carries a stable ``kind`` (one of the taxonomy kinds below), a more
specific ``code`` and the HTTP status it maps to.  Services raise these; the
handlers registered in ``app.main`` render them as
``{"error": kind, "code": code, "message": message}``.
"""

from typing import Optional


class DirectoryError(Exception):
    kind = "storage_error"
    code = "internal_error"
    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.kind, "code": self.code, "message": self.message}


# ── Authorization ────────────────────────────────────────────────────────────

class Unauthorized(DirectoryError):
    kind = "unauthorized"
    code = "unauthorized"
    status_code = 401
    default_message = "Authentication required"


class Forbidden(DirectoryError):
    kind = "forbidden"
    code = "forbidden"
    status_code = 403
    default_message = "Admin role required"


# ── Lookup ───────────────────────────────────────────────────────────────────

class NotFound(DirectoryError):
    kind = "not_found"
    code = "not_found"
    status_code = 404
    default_message = "Resource not found"


class ProjectNotFound(NotFound):
    code = "project_not_found"
    default_message = "Project not found"


class CatalogEntryNotFound(NotFound):
    code = "catalog_entry_not_found"
    default_message = "Catalog entry not found"


# ── Input ────────────────────────────────────────────────────────────────────

class InvalidInput(DirectoryError):
    kind = "invalid_input"
    code = "invalid_input"
    status_code = 400
    default_message = "Invalid input"


class InvalidStatus(InvalidInput):
    code = "invalid_status"
    default_message = "Unknown project status"


class MissingRequiredField(InvalidInput):
    code = "missing_required_field"
    default_message = "A required field is missing"


# ── Conflicts ────────────────────────────────────────────────────────────────

class Conflict(DirectoryError):
    kind = "conflict"
    code = "conflict"
    status_code = 409
    default_message = "Resource already exists"


# ── Storage ──────────────────────────────────────────────────────────────────

class StorageError(DirectoryError):
    kind = "storage_error"
    code = "storage_error"
    status_code = 500
    default_message = "A storage error occurred"


class StorageConflict(StorageError):
    code = "storage_conflict"
    status_code = 409
    default_message = "The record was modified concurrently; nothing was changed"


# ── Throttling ───────────────────────────────────────────────────────────────

class RateLimited(DirectoryError):
    kind = "rate_limited"
    code = "rate_limited"
    status_code = 429
    default_message = "Too many requests; try again later"
