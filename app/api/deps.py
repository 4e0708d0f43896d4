"""
Shared FastAPI dependencies.
"""
import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.embeddings.openai_embedder import OpenAIEmbedder
from app.embeddings.provider import TextEmbedder
from app.repositories.job_store import JobStore

logger = logging.getLogger(__name__)


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache(maxsize=1)
def _build_embedder() -> TextEmbedder:
    return OpenAIEmbedder()


def get_embedder() -> TextEmbedder:
    """Process-wide embedder pinned to the configured model and dimensions."""
    try:
        return _build_embedder()
    except ValueError as e:
        logger.error(f"Embedding provider not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Embedding provider not configured"
        )


def get_job_store(db: Session = Depends(get_db)) -> JobStore:
    return JobStore(db)
