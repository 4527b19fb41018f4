"""Validation router — verdict lookup, screening runs and manual overrides."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth import AdminContext, require_admin_context
from app.models.validation_result import ValidationResult
from app.schemas.validation import (
    CheckResponse,
    OverrideRequest,
    ValidationEnvelope,
    ValidationResponse,
)
from app.services import validation_service
from app.validation import CheckResult

router = APIRouter(prefix="/api/validation", tags=["validation"])


def _check_to_response(check: CheckResult) -> CheckResponse:
    return CheckResponse(
        passed=check.passed,
        effective_passed=check.effective_passed,
        details=check.details,
        manual_override=check.manual_override,
        manual_passed=check.manual_passed,
        manual_notes=check.manual_notes,
    )


def _result_to_response(row: ValidationResult) -> ValidationResponse:
    state = validation_service.state_from_row(row)
    return ValidationResponse(
        scam_check=_check_to_response(state.scam),
        sanctions_check=_check_to_response(state.sanctions),
        audit_check=_check_to_response(state.audit),
        risk_level=row.risk_level,
        overall_passed=row.overall_passed,
        manually_reviewed=row.manually_reviewed,
        reviewer_id=row.reviewer_id,
        reviewed_at=row.reviewed_at.isoformat() if row.reviewed_at else None,
        validated_at=row.validated_at.isoformat() if row.validated_at else None,
    )


@router.get("/{project_id}", response_model=ValidationEnvelope)
def get_validation(project_id: str, db: Session = Depends(get_db)):
    """Stored verdict for a project, or null when it was never checked."""
    row = validation_service.get_result(db, project_id)
    return ValidationEnvelope(data=_result_to_response(row) if row else None)


@router.post("/{project_id}/run", response_model=ValidationEnvelope)
def run_validation(project_id: str, ctx: AdminContext = Depends(require_admin_context)):
    row = validation_service.run_screening(ctx, project_id)
    return ValidationEnvelope(data=_result_to_response(row))


@router.post("/{project_id}/override", response_model=ValidationEnvelope)
def override_validation(
    project_id: str,
    req: OverrideRequest,
    ctx: AdminContext = Depends(require_admin_context),
):
    row = validation_service.override_check(ctx, project_id, req.check, req.passed, req.notes)
    return ValidationEnvelope(data=_result_to_response(row))
