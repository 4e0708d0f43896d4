"""
Semantic job search: rank stored jobs against free text such as a resume.
"""
import logging
from typing import List, Optional, Tuple

from app.core import config
from app.db.models.job_posting import JobPosting
from app.embeddings.provider import TextEmbedder
from app.repositories.job_store import JobStore

logger = logging.getLogger(__name__)


def candidate_count(limit: int, num_candidates: Optional[int] = None) -> int:
    """
    Number of candidates the approximate index should examine for ``limit`` results.

    Never less than ``VECTOR_SEARCH_OVERFETCH`` times the limit.
    """
    requested = num_candidates or config.VECTOR_SEARCH_NUM_CANDIDATES
    return max(requested, limit * config.VECTOR_SEARCH_OVERFETCH, limit)


def find_similar(
    text: str,
    limit: int,
    *,
    embedder: TextEmbedder,
    store: JobStore,
    num_candidates: Optional[int] = None,
) -> List[Tuple[JobPosting, float]]:
    """
    Find the jobs whose descriptions are most similar to ``text``.

    Args:
        text: Query text, passed to the embedder as is
        limit: Maximum number of results (k)
        embedder: Must be the embedder that produced the stored vectors
        store: Job store providing the vector search
        num_candidates: Override for the index over-fetch size

    Returns:
        (job, score) pairs, highest score first, at most ``limit``. Empty when
        nothing matches.

    Raises:
        ValueError: ``limit`` < 1
        ProviderError: the query text could not be embedded
        VectorIndexError: the vector search failed
    """
    if limit < 1:
        raise ValueError("limit must be >= 1")

    # No fallback: without a query vector there is no meaningful ranking
    query_vector = embedder.embed(text)

    candidates = candidate_count(limit, num_candidates)
    results = store.vector_search(query_vector, num_candidates=candidates, limit=limit)
    results = sorted(results, key=lambda pair: pair[1], reverse=True)[:limit]

    logger.info(f"Similarity search: chars={len(text)}, candidates={candidates}, limit={limit}, returned={len(results)}")
    return results
