"""
JobPosting model: one job listing plus the embedding of its description.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Index
from sqlalchemy.sql import func
from app.db.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class JobPosting(Base):
    """
    JobPosting model for storing job listings.

    ``embedding`` is either empty or the vector of the current ``description``
    produced by ``embedding_model``. It is written only through the
    synchronization functions in ``app.services.embedding_sync``.
    """
    __tablename__ = "job_postings"

    id = Column(Integer, primary_key=True, index=True)

    # Job posting details
    title = Column(String, nullable=False, index=True)
    company = Column(String, nullable=False, index=True)
    url = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=True)
    company_logo = Column(String, nullable=True)
    compensation = Column(String, nullable=True)
    experience = Column(Integer, nullable=False, default=0)  # years required
    applications = Column(Integer, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    posted_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    # Derived from description
    embedding = Column(JSON, nullable=False, default=list)
    embedding_model = Column(String, nullable=True, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index('idx_company_title', 'company', 'title'),
    )

    @property
    def embedding_dimensions(self) -> int:
        return len(self.embedding or [])

    def __repr__(self):
        return f"<JobPosting(id={self.id}, company='{self.company}', title='{self.title}')>"
