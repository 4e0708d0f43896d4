"""
Database models module.

All models must be imported here so they are registered with Base.metadata
before table creation.
"""
from app.db.models.job_posting import JobPosting

__all__ = [
    "JobPosting",
]
