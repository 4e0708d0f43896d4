"""
Resume-to-job similarity endpoint.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_embedder, get_job_store
from app.core import config
from app.core.exceptions import JobBoardError, to_http_exception
from app.core.rate_limit import check_similarity_rate_limit
from app.embeddings.provider import TextEmbedder
from app.repositories.job_store import JobStore
from app.schemas.job import JobResponse, SimilarJob, SimilarityRequest, SimilarityResponse
from app.services.similarity_service import find_similar

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Similarity"])


@router.post(
    "/similarity",
    status_code=status.HTTP_200_OK,
    response_model=SimilarityResponse,
    dependencies=[Depends(check_similarity_rate_limit)],
)
def resume_similarity(
    request: SimilarityRequest,
    store: JobStore = Depends(get_job_store),
    embedder: TextEmbedder = Depends(get_embedder)
):
    """
    Rank job postings by semantic similarity to the given text.

    Returns an empty list when nothing matches. Provider failures return 502
    and index failures 503; neither is reported as an empty result.
    """
    limit = request.limit or config.VECTOR_SEARCH_LIMIT
    try:
        results = find_similar(request.text, limit, embedder=embedder, store=store)
        similar_jobs = [
            SimilarJob(job=JobResponse.model_validate(job), score=score)
            for job, score in results
        ]
        return SimilarityResponse(similar_jobs=similar_jobs, count=len(similar_jobs))

    except JobBoardError as e:
        logger.warning(f"Similarity search failed: {type(e).__name__}: {e}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected similarity search error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Similarity search failed"
        )
