"""Validation request/response schemas."""

from typing import Optional
from pydantic import BaseModel


class CheckResponse(BaseModel):
    passed: bool
    effective_passed: bool
    details: str
    manual_override: bool
    manual_passed: Optional[bool]
    manual_notes: Optional[str]


class ValidationResponse(BaseModel):
    scam_check: CheckResponse
    sanctions_check: CheckResponse
    audit_check: CheckResponse
    risk_level: str  # low | medium | high
    overall_passed: bool
    manually_reviewed: bool
    reviewer_id: Optional[str]
    reviewed_at: Optional[str]
    validated_at: Optional[str]


class ValidationEnvelope(BaseModel):
    success: bool = True
    data: Optional[ValidationResponse]


class OverrideRequest(BaseModel):
    check: str  # scam | sanctions | audit
    passed: bool
    notes: Optional[str] = None
