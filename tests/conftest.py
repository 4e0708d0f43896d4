"""
Shared fixtures: in-memory database, deterministic embedder, API client.
"""
import hashlib
import math
import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.api.deps import get_db, get_embedder
from app.core.exceptions import ProviderError
from app.core.rate_limit import similarity_limiter
from app.db.base import Base
from app.embeddings.provider import TextEmbedder
from app.repositories.job_store import JobStore


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


class FakeEmbedder(TextEmbedder):
    """
    Deterministic hashed bag-of-words embedder.

    Texts sharing words get a positive cosine similarity, texts sharing none
    get (almost always) zero.
    """

    def __init__(self, dimensions: int = 256, model: str = "fake-embedding-v1"):
        self._dimensions = dimensions
        self._model = model
        self.calls = []
        self.fail = False

    @property
    def model(self) -> str:
        return self._model

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail:
            raise ProviderError("Embedding provider request failed: APIConnectionError")
        vector = [0.0] * self._dimensions
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            bucket = int(hashlib.md5(word.encode("utf-8")).hexdigest(), 16) % self._dimensions
            vector[bucket] += 1.0
        norm = math.sqrt(sum(value * value for value in vector))
        if norm:
            vector = [value / norm for value in vector]
        return vector


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def make_embedder():
    return FakeEmbedder


@pytest.fixture
def store(db):
    return JobStore(db)


@pytest.fixture
def job_fields():
    return {
        "title": "Engineer",
        "company": "Acme",
        "url": "http://x",
        "description": "build distributed systems",
    }


@pytest.fixture
def client(db, embedder):
    """Test client with the database and embedder dependencies overridden."""
    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_embedder] = lambda: embedder
    similarity_limiter.reset()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        similarity_limiter.reset()
