"""
Keeps each job's stored embedding in step with its description.

These functions run before any write: they compute the vector first and only
then hand back the fields to persist. If the embedding provider fails, the
exception propagates and the caller never touches the row.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.db.models.job_posting import JobPosting
from app.embeddings.provider import TextEmbedder
from app.core.exceptions import ProviderError

logger = logging.getLogger(__name__)

# Derived fields clients may never set directly
DERIVED_FIELDS = ("embedding", "embedding_model")


def _embed_description(description: str, embedder: TextEmbedder) -> List[float]:
    vector = embedder.embed(description)
    if len(vector) != embedder.dimensions:
        raise ProviderError(
            f"Embedding has {len(vector)} dimensions, expected {embedder.dimensions}"
        )
    return vector


def prepare_new_job(fields: Dict[str, Any], embedder: TextEmbedder) -> Dict[str, Any]:
    """
    Return the fields of a new job with its embedding attached.

    Always embeds: a new job has no previous vector to keep.
    """
    prepared = {key: value for key, value in fields.items() if key not in DERIVED_FIELDS}
    prepared["embedding"] = _embed_description(prepared["description"], embedder)
    prepared["embedding_model"] = embedder.model
    return prepared


def prepare_job_update(job: JobPosting, patch: Dict[str, Any], embedder: TextEmbedder) -> Dict[str, Any]:
    """
    Return the fields to assign to ``job`` for ``patch``.

    Re-embeds only when the patch changes the description. Otherwise the stored
    vector is left untouched.
    """
    prepared = {key: value for key, value in patch.items() if key not in DERIVED_FIELDS}
    new_description = prepared.get("description")
    if new_description is not None and new_description != job.description:
        prepared["embedding"] = _embed_description(new_description, embedder)
        prepared["embedding_model"] = embedder.model
        logger.debug(f"Description changed, re-embedded job_id={job.id}")
    return prepared


def _is_foreign(job: JobPosting, model: str, dimensions: int) -> bool:
    """True when the stored vector was produced by another model/dimension pair."""
    return job.embedding_model != model or len(job.embedding or []) != dimensions


def find_model_mismatches(db: Session, model: str, dimensions: int) -> int:
    """Count embedded jobs whose vector does not come from ``model`` at ``dimensions``."""
    # Vector length is not queryable portably across backends; compare in Python
    return sum(
        1 for job in db.query(JobPosting).filter(JobPosting.embedding_model.isnot(None)).all()
        if _is_foreign(job, model, dimensions)
    )


def reembed_jobs(db: Session, embedder: TextEmbedder, only_stale: bool = True) -> Dict[str, int]:
    """
    Recompute embeddings with ``embedder``, committing one job at a time.

    Args:
        db: Database session
        embedder: Embedder whose model becomes the index's model
        only_stale: Skip jobs already embedded with ``embedder.model`` at
            ``embedder.dimensions``

    Returns:
        Counts of ``total``, ``reembedded`` and ``skipped`` jobs
    """
    jobs = db.query(JobPosting).order_by(JobPosting.id).all()
    if only_stale:
        jobs = [job for job in jobs if _is_foreign(job, embedder.model, embedder.dimensions)]
    stats = {"total": 0, "reembedded": 0, "skipped": 0}
    for job in jobs:
        stats["total"] += 1
        if not job.description:
            stats["skipped"] += 1
            continue
        job.embedding = _embed_description(job.description, embedder)
        job.embedding_model = embedder.model
        db.commit()
        stats["reembedded"] += 1
        logger.info(f"Re-embedded job_id={job.id} with model={embedder.model}")
    return stats
