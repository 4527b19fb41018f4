"""Validation service — persists screening results, overrides and verdicts."""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app import validation
from app.database import atomic
from app.errors import InvalidInput
from app.middleware.auth import AdminContext
from app.models.audit_log import AuditLog
from app.models.validation_result import ValidationResult
from app.services import screening
from app.services.project_service import require_project
from app.validation import CHECK_NAMES, CheckResult, ValidationState

logger = logging.getLogger(__name__)


def _check_from_row(row: ValidationResult, name: str) -> CheckResult:
    return CheckResult(
        passed=bool(getattr(row, f"{name}_check_passed")),
        details=getattr(row, f"{name}_check_details") or "",
        manual_override=bool(getattr(row, f"{name}_check_override")),
        manual_passed=getattr(row, f"{name}_check_manual_passed"),
        manual_notes=getattr(row, f"{name}_check_notes"),
    )


def state_from_row(row: ValidationResult) -> ValidationState:
    return ValidationState(
        scam=_check_from_row(row, "scam"),
        sanctions=_check_from_row(row, "sanctions"),
        audit=_check_from_row(row, "audit"),
        manually_reviewed=bool(row.manually_reviewed),
        reviewer_id=row.reviewer_id,
        reviewed_at=row.reviewed_at,
    )


def _write_state(row: ValidationResult, state: ValidationState) -> None:
    """Copy a state onto the row, storing the freshly derived verdict with it."""
    for name in CHECK_NAMES:
        check = state.check(name)
        setattr(row, f"{name}_check_passed", check.passed)
        setattr(row, f"{name}_check_details", check.details)
        setattr(row, f"{name}_check_override", check.manual_override)
        setattr(row, f"{name}_check_manual_passed", check.manual_passed)
        setattr(row, f"{name}_check_notes", check.manual_notes)

    verdict = state.verdict
    row.risk_level = verdict.risk_level.value
    row.overall_passed = verdict.overall_passed
    row.manually_reviewed = state.manually_reviewed
    row.reviewer_id = state.reviewer_id
    row.reviewed_at = state.reviewed_at


def get_result(db: Session, project_id: str) -> Optional[ValidationResult]:
    return db.query(ValidationResult).filter(ValidationResult.project_id == project_id).first()


def _screened_state(project, previous: Optional[ValidationResult]) -> ValidationState:
    scam, sanctions, audit = screening.screen_project(project)
    if previous is None:
        return ValidationState(scam=scam, sanctions=sanctions, audit=audit)
    return validation.refresh_automated(state_from_row(previous), scam, sanctions, audit)


def run_screening(ctx: AdminContext, project_id: str) -> ValidationResult:
    """Run the automated checks, keeping any manual overrides already recorded."""
    db = ctx.db
    project = require_project(db, project_id)
    row = get_result(db, project_id)
    state = _screened_state(project, row)

    with atomic(db, "validation run"):
        if row is None:
            row = ValidationResult(project_id=project_id)
            db.add(row)
        _write_state(row, state)
        row.validated_at = datetime.now(timezone.utc)
        db.add(AuditLog(
            entity_type="validation",
            entity_id=project_id,
            action="screened",
            actor_id=ctx.actor_id,
            new_data=json.dumps({
                "risk_level": row.risk_level,
                "overall_passed": row.overall_passed,
            }),
        ))
    db.refresh(row)
    logger.info("Screened project %s: risk=%s passed=%s", project_id, row.risk_level, row.overall_passed)
    return row


def override_check(
    ctx: AdminContext,
    project_id: str,
    check: str,
    passed: bool,
    notes: Optional[str] = None,
) -> ValidationResult:
    """Record a human decision on one check and recompute the verdict.

    A project that was never screened is screened first so the other two
    checks have automated values to fall back on.
    """
    if check not in CHECK_NAMES:
        raise InvalidInput(f"Unknown check '{check}'; expected one of {', '.join(CHECK_NAMES)}")

    db = ctx.db
    project = require_project(db, project_id)
    row = get_result(db, project_id)

    base = _screened_state(project, None) if row is None else state_from_row(row)
    state = validation.apply_override(base, check, passed, notes, ctx.actor_id)
    old = None if row is None else {"risk_level": row.risk_level, "overall_passed": row.overall_passed}

    with atomic(db, "validation override"):
        if row is None:
            row = ValidationResult(project_id=project_id, validated_at=datetime.now(timezone.utc))
            db.add(row)
        _write_state(row, state)
        db.add(AuditLog(
            entity_type="validation",
            entity_id=project_id,
            action="manual_override",
            actor_id=ctx.actor_id,
            old_data=json.dumps(old) if old else None,
            new_data=json.dumps({
                "check": check,
                "passed": passed,
                "risk_level": row.risk_level,
                "overall_passed": row.overall_passed,
            }),
        ))
    db.refresh(row)
    logger.info("Manual %s override on project %s by %s", check, project_id, ctx.actor_id)
    return row
