"""
Vector index capability and an exact cosine-similarity implementation.

Any index used by the similarity service must return matches with
non-increasing scores and never more than ``limit`` of them.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import VectorIndexError
from app.db.models.job_posting import JobPosting

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VectorMatch:
    """A stored job vector close to the query vector."""
    job_id: int
    score: float


class VectorIndex(ABC):
    """Nearest-neighbor search over stored job description vectors."""

    @abstractmethod
    def search(self, vector: Sequence[float], num_candidates: int, limit: int) -> List[VectorMatch]:
        """
        Find the stored vectors most similar to ``vector``.

        Args:
            vector: Query vector
            num_candidates: How many candidates the index examines before truncating
            limit: Maximum number of matches returned

        Returns:
            Matches sorted by score, highest first

        Raises:
            VectorIndexError: the search could not be performed
        """
        pass


def _check_query(vector: Sequence[float], num_candidates: int, limit: int) -> np.ndarray:
    if limit < 1:
        raise VectorIndexError(f"limit must be >= 1, got {limit}")
    if num_candidates < limit:
        raise VectorIndexError(f"num_candidates ({num_candidates}) must be >= limit ({limit})")
    try:
        query = np.asarray(vector, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise VectorIndexError("Query vector is not numeric") from e
    if query.ndim != 1 or query.size == 0:
        raise VectorIndexError("Query vector must be a non-empty flat sequence")
    if not np.all(np.isfinite(query)):
        raise VectorIndexError("Query vector contains non-finite values")
    return query


def _normalize_rows(vectors: np.ndarray) -> np.ndarray:
    """L2-normalize rows so that dot product equals cosine similarity."""
    norms = np.linalg.norm(vectors, axis=-1, keepdims=True)
    norms = np.where(norms > 0, norms, 1.0)
    return vectors / norms


class BruteForceVectorIndex(VectorIndex):
    """
    Exact cosine scan over every stored embedding.

    Jobs with an empty embedding are not indexed. Fine for tests and small
    catalogs; an approximate engine can replace it behind ``VectorIndex``.
    """

    def __init__(self, db: Session, min_score: Optional[float] = None):
        self.db = db
        self.min_score = min_score

    def _load(self):
        try:
            rows = self.db.query(JobPosting.id, JobPosting.embedding).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load job embeddings: {e}", exc_info=True)
            raise VectorIndexError("Vector index unavailable") from e
        ids = [row.id for row in rows if row.embedding]
        vectors = [row.embedding for row in rows if row.embedding]
        return ids, vectors

    def search(self, vector: Sequence[float], num_candidates: int, limit: int) -> List[VectorMatch]:
        query = _check_query(vector, num_candidates, limit)
        ids, vectors = self._load()
        if not ids:
            return []

        dimensions = {len(v) for v in vectors}
        if dimensions != {query.size}:
            # Mixed models in one index is a deployment error, not something to rank around
            logger.error(f"Stored embedding dimensions {sorted(dimensions)} do not match query dimension {query.size}")
            raise VectorIndexError(
                f"Stored embeddings do not match query dimension {query.size}"
            )

        matrix = _normalize_rows(np.asarray(vectors, dtype=np.float32))
        scores = matrix @ _normalize_rows(query)

        # Stable sort keeps insertion order among equal scores
        order = np.argsort(-scores, kind="stable")[:num_candidates]
        matches = []
        for position in order:
            score = float(scores[position])
            if self.min_score is not None and score < self.min_score:
                continue
            matches.append(VectorMatch(job_id=ids[position], score=score))
            if len(matches) >= limit:
                break

        logger.debug(f"Vector search: indexed={len(ids)}, candidates={min(num_candidates, len(ids))}, returned={len(matches)}")
        return matches
