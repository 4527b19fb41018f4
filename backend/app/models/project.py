"""Project model — a submitted tokenized-asset listing."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship

from app.database import Base
from app.lifecycle import ProjectStatus


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False, index=True)  # asset type name
    blockchain = Column(String(100), nullable=False, index=True)  # network name
    roi = Column(Float, nullable=False, default=0.0)
    tvl = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    website = Column(String(500), nullable=False)
    audit_url = Column(String(500), nullable=True)
    audit_document_path = Column(String(500), nullable=True)
    whitepaper_document_path = Column(String(500), nullable=True)
    contact_email = Column(String(255), nullable=True)

    # pending | approved | rejected | changes_requested
    status = Column(String(20), nullable=False, default=ProjectStatus.PENDING.value, index=True)
    review_notes = Column(Text, nullable=True)
    reviewer_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    featured = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    validation = relationship("ValidationResult", back_populates="project", uselist=False)
    reviewer = relationship("User")

    __table_args__ = (
        Index("ix_projects_listing", "status", "created_at"),
    )

    @hybrid_property
    def approved(self):
        """Legacy flag, derived from status so the two can never disagree."""
        return self.status == ProjectStatus.APPROVED.value
