"""
Job endpoints.

Provides CRUD and filtered listing for job postings. Every create/update
embeds the description before the database write.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query

from app.api.deps import get_embedder, get_job_store
from app.core.exceptions import JobBoardError, to_http_exception
from app.embeddings.provider import TextEmbedder
from app.repositories.job_store import JobStore
from app.schemas.job import (
    JobCreate,
    JobUpdate,
    JobResponse,
    JobListResponse,
    JobFilter,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobResponse)
def create_job(
    job_data: JobCreate,
    store: JobStore = Depends(get_job_store),
    embedder: TextEmbedder = Depends(get_embedder)
):
    """
    Create a new job posting.

    The description is embedded first; if that fails nothing is stored (502).
    """
    try:
        job = store.create(job_data.model_dump(), embedder)
        return JobResponse.model_validate(job)

    except JobBoardError as e:
        logger.warning(f"Job creation rejected: {type(e).__name__}: {e}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Failed to create job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create job"
        )


@router.get("", status_code=status.HTTP_200_OK, response_model=JobListResponse)
def list_jobs(
    title: Optional[str] = Query(None, description="Title contains (case-insensitive)"),
    experience: Optional[int] = Query(None, ge=0, description="Maximum years of experience required"),
    skills: Optional[str] = Query(None, description="Comma-separated skills, all must match"),
    location: Optional[str] = Query(None, description="Location contains (case-insensitive)"),
    company: Optional[str] = Query(None, description="Company contains (case-insensitive)"),
    days_old: Optional[int] = Query(None, ge=0, description="Posted within the last N days"),
    store: JobStore = Depends(get_job_store)
):
    """
    List job postings matching the given filters.

    Non-LinkedIn postings are listed before LinkedIn ones.
    """
    try:
        filters = JobFilter(
            title=title,
            experience=experience,
            skills=skills,
            location=location,
            company=company,
            days_old=days_old,
        )
        jobs = store.query_by_filters(filters)

        return JobListResponse(
            jobs=[JobResponse.model_validate(job) for job in jobs],
            total=len(jobs)
        )

    except Exception as e:
        logger.error(f"Failed to list jobs: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list jobs"
        )


@router.get("/{job_id}", status_code=status.HTTP_200_OK, response_model=JobResponse)
def get_job(
    job_id: int,
    store: JobStore = Depends(get_job_store)
):
    """Get a specific job by ID. Returns 404 if not found."""
    try:
        return JobResponse.model_validate(store.get(job_id))

    except JobBoardError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Failed to get job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get job"
        )


@router.put("/{job_id}", status_code=status.HTTP_200_OK, response_model=JobResponse)
def update_job(
    job_id: int,
    job_data: JobUpdate,
    store: JobStore = Depends(get_job_store),
    embedder: TextEmbedder = Depends(get_embedder)
):
    """
    Update an existing job.

    Only updates provided fields. The embedding is recomputed only when the
    description changes.
    """
    try:
        job = store.update(job_id, job_data.model_dump(exclude_unset=True), embedder)
        return JobResponse.model_validate(job)

    except JobBoardError as e:
        logger.warning(f"Job update rejected: job_id={job_id}, {type(e).__name__}: {e}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Failed to update job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update job"
        )


@router.delete("/{job_id}", status_code=status.HTTP_200_OK, response_model=JobResponse)
def delete_job(
    job_id: int,
    store: JobStore = Depends(get_job_store)
):
    """Delete a job and its embedding. Returns the deleted job."""
    try:
        return JobResponse.model_validate(store.delete(job_id))

    except JobBoardError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Failed to delete job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete job"
        )
