"""Validation result model — one row per project, created on the first check."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class ValidationResult(Base):
    __tablename__ = "validation_results"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, unique=True)

    scam_check_passed = Column(Boolean, nullable=False, default=False)
    scam_check_details = Column(Text, nullable=True)
    scam_check_override = Column(Boolean, nullable=False, default=False)
    scam_check_manual_passed = Column(Boolean, nullable=True)
    scam_check_notes = Column(Text, nullable=True)

    sanctions_check_passed = Column(Boolean, nullable=False, default=False)
    sanctions_check_details = Column(Text, nullable=True)
    sanctions_check_override = Column(Boolean, nullable=False, default=False)
    sanctions_check_manual_passed = Column(Boolean, nullable=True)
    sanctions_check_notes = Column(Text, nullable=True)

    audit_check_passed = Column(Boolean, nullable=False, default=False)
    audit_check_details = Column(Text, nullable=True)
    audit_check_override = Column(Boolean, nullable=False, default=False)
    audit_check_manual_passed = Column(Boolean, nullable=True)
    audit_check_notes = Column(Text, nullable=True)

    risk_level = Column(String(10), nullable=False, default="medium")  # low | medium | high
    overall_passed = Column(Boolean, nullable=False, default=False)

    manually_reviewed = Column(Boolean, nullable=False, default=False)
    reviewer_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    validated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    project = relationship("Project", back_populates="validation")
