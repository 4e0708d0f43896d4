"""
Job record store.

All writes to ``job_postings`` go through here so that the embedding
synchronization step always runs before the commit.
"""
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import config
from app.core.logging_config import sanitize_log_data
from app.core.exceptions import NotFoundError, ValidationError, VectorIndexError
from app.db.models.job_posting import JobPosting
from app.embeddings.provider import TextEmbedder
from app.schemas.job import JobFilter
from app.services.embedding_sync import prepare_new_job, prepare_job_update
from app.vector.index import BruteForceVectorIndex, VectorIndex

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "company", "url", "description")
# Columns that have a value on every row; an update may change them but not clear them
NON_NULLABLE_FIELDS = ("experience", "posted_at")
LINKEDIN_PATTERN = "%linkedin.com%"


def _title_matcher(title: str):
    """Whole-word, case-insensitive title match ('python' does not match 'Pythonista')."""
    return re.compile(rf"(?<!\w){re.escape(title.strip())}(?!\w)", re.IGNORECASE)


def _like_pattern(value: str) -> str:
    """Substring LIKE pattern with wildcard characters escaped."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _validate_required(fields: Dict[str, Any], partial: bool = False) -> None:
    for name in REQUIRED_FIELDS:
        if partial and name not in fields:
            continue
        value = fields.get(name)
        if value is None or not str(value).strip():
            raise ValidationError(f"job {name} must be provided")
    if partial:
        for name in NON_NULLABLE_FIELDS:
            if name in fields and fields[name] is None:
                raise ValidationError(f"job {name} cannot be null")


class JobStore:
    """Create/read/update/delete/query over job postings, plus vector search."""

    def __init__(self, db: Session, index: Optional[VectorIndex] = None):
        self.db = db
        self.index = index or BruteForceVectorIndex(db, min_score=config.VECTOR_SEARCH_MIN_SCORE)

    def get(self, job_id: int) -> JobPosting:
        job = self.db.query(JobPosting).filter(JobPosting.id == job_id).first()
        if not job:
            raise NotFoundError(job_id)
        return job

    def create(self, fields: Dict[str, Any], embedder: TextEmbedder) -> JobPosting:
        """
        Persist a new job with the embedding of its description.

        Raises:
            ValidationError: a required field is missing or blank
            ProviderError: the description could not be embedded; nothing is written
        """
        _validate_required(fields)
        fields = dict(fields)
        if fields.get("posted_at") is None:
            fields.pop("posted_at", None)
        if fields.get("skills") is None:
            fields["skills"] = []
        prepared = prepare_new_job(fields, embedder)

        job = JobPosting(**prepared)
        try:
            self.db.add(job)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(job)
        logger.info(f"Job created: job_id={job.id}, company={job.company}, dimensions={job.embedding_dimensions}")
        return job

    def update(self, job_id: int, patch: Dict[str, Any], embedder: TextEmbedder) -> JobPosting:
        """
        Apply ``patch`` to a job, re-embedding when the description changes.

        Raises:
            NotFoundError: no job with ``job_id``
            ValidationError: the patch blanks a required or non-nullable field
            ProviderError: the new description could not be embedded; the job is unchanged
        """
        logger.debug(f"Job update requested: job_id={job_id}, patch={sanitize_log_data(patch)}")
        job = self.get(job_id)
        _validate_required(patch, partial=True)
        if "skills" in patch and patch["skills"] is None:
            patch = {**patch, "skills": []}

        try:
            prepared = prepare_job_update(job, patch, embedder)
        except Exception:
            self.db.rollback()
            raise

        for field, value in prepared.items():
            setattr(job, field, value)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(job)
        logger.info(f"Job updated: job_id={job.id}, fields={sorted(prepared)}")
        return job

    def delete(self, job_id: int) -> JobPosting:
        """Delete a job together with its embedding and return it."""
        job = self.get(job_id)
        try:
            self.db.delete(job)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info(f"Job deleted: job_id={job_id}")
        return job

    def query_by_filters(self, filters: JobFilter, limit: Optional[int] = None) -> List[JobPosting]:
        """
        List jobs matching ``filters``.

        Non-LinkedIn postings come first, then LinkedIn postings; each group is
        newest first and capped at ``limit``.
        """
        limit = limit or config.JOB_LIST_LIMIT
        query = self.db.query(JobPosting)

        if filters.title:
            query = query.filter(JobPosting.title.ilike(_like_pattern(filters.title.strip()), escape="\\"))
        if filters.experience is not None:
            query = query.filter(JobPosting.experience <= filters.experience)
        if filters.location:
            query = query.filter(JobPosting.location.ilike(_like_pattern(filters.location), escape="\\"))
        if filters.company:
            query = query.filter(JobPosting.company.ilike(_like_pattern(filters.company), escape="\\"))
        if filters.days_old is not None:
            cutoff = datetime.now(timezone.utc) - timedelta(days=filters.days_old)
            query = query.filter(JobPosting.posted_at >= cutoff)

        query = query.order_by(JobPosting.posted_at.desc(), JobPosting.id.desc())
        required_skills = {skill.lower() for skill in filters.skill_list()}
        title_matcher = _title_matcher(filters.title) if filters.title else None

        def matches(job: JobPosting) -> bool:
            if title_matcher and not title_matcher.search(job.title or ""):
                return False
            if required_skills and not required_skills.issubset({skill.lower() for skill in (job.skills or [])}):
                return False
            return True

        results: List[JobPosting] = []
        for group in (
            query.filter(~JobPosting.url.ilike(LINKEDIN_PATTERN)),
            query.filter(JobPosting.url.ilike(LINKEDIN_PATTERN)),
        ):
            if title_matcher or required_skills:
                # Word boundaries and JSON containment are not portable across backends; match in Python
                jobs = [job for job in group.all() if matches(job)][:limit]
            else:
                jobs = group.limit(limit).all()
            results.extend(jobs)

        logger.debug(f"Jobs listed: filters={filters.model_dump(exclude_none=True)}, total={len(results)}")
        return results

    def vector_search(self, vector: List[float], num_candidates: int, limit: int) -> List[Tuple[JobPosting, float]]:
        """
        Rank stored jobs by similarity to ``vector``.

        Returns:
            (job, score) pairs, highest score first, at most ``limit``

        Raises:
            VectorIndexError: the index or the job lookup failed
        """
        matches = self.index.search(vector, num_candidates=num_candidates, limit=limit)
        if not matches:
            return []

        try:
            jobs = self.db.query(JobPosting).filter(
                JobPosting.id.in_([match.job_id for match in matches])
            ).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load matched jobs: {e}", exc_info=True)
            raise VectorIndexError("Failed to load matched jobs") from e

        by_id = {job.id: job for job in jobs}
        # A job deleted between the index read and this lookup is dropped
        return [(by_id[match.job_id], match.score) for match in matches if match.job_id in by_id][:limit]
