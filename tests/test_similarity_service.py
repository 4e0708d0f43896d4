"""
Tests for the similarity search service.
"""
from unittest.mock import MagicMock

import pytest

from app.core import config
from app.core.exceptions import ProviderError, VectorIndexError
from app.services.similarity_service import candidate_count, find_similar
from app.vector.index import VectorMatch


@pytest.fixture
def seeded(store, embedder, job_fields):
    engineer = store.create(job_fields, embedder)
    baker = store.create(
        {**job_fields, "title": "Pastry Chef", "company": "Bakery", "description": "pastry baking and cake decoration"},
        embedder,
    )
    return engineer, baker


def test_related_job_ranks_above_unrelated(seeded, store, embedder):
    engineer, baker = seeded

    results = find_similar("distributed systems engineer", 5, embedder=embedder, store=store)

    ids = [job.id for job, _ in results]
    assert engineer.id in ids
    scores = dict((job.id, score) for job, score in results)
    assert scores[engineer.id] > scores.get(baker.id, 0.0)
    assert ids[0] == engineer.id


def test_results_sorted_and_capped(store, embedder, job_fields):
    for i in range(8):
        store.create({**job_fields, "description": f"distributed systems role {i} " + "python " * i}, embedder)

    results = find_similar("distributed systems python", 3, embedder=embedder, store=store)

    assert len(results) == 3
    scores = [score for _, score in results]
    assert scores == sorted(scores, reverse=True)


def test_empty_store_returns_empty_list(store, embedder):
    assert find_similar("anything", 5, embedder=embedder, store=store) == []


def test_provider_failure_propagates(seeded, store, embedder):
    embedder.fail = True

    with pytest.raises(ProviderError):
        find_similar("distributed systems engineer", 5, embedder=embedder, store=store)


def test_index_failure_is_not_an_empty_result(store, embedder):
    store.index = MagicMock()
    store.index.search.side_effect = VectorIndexError("Vector index unavailable")

    with pytest.raises(VectorIndexError):
        find_similar("distributed systems", 5, embedder=embedder, store=store)


def test_results_exclude_deleted_jobs(seeded, store, embedder):
    engineer, baker = seeded
    store.index = MagicMock()
    store.index.search.return_value = [VectorMatch(job_id=engineer.id, score=0.9), VectorMatch(job_id=9999, score=0.5)]

    results = find_similar("distributed systems", 5, embedder=embedder, store=store)

    assert [(job.id, score) for job, score in results] == [(engineer.id, 0.9)]


def test_overfetches_candidates(store, embedder):
    store.index = MagicMock()
    store.index.search.return_value = []

    find_similar("distributed systems", 50, embedder=embedder, store=store)

    _, kwargs = store.index.search.call_args
    assert kwargs["limit"] == 50
    assert kwargs["num_candidates"] >= 50 * 3


def test_candidate_count_uses_configured_minimum(monkeypatch):
    monkeypatch.setattr(config, "VECTOR_SEARCH_NUM_CANDIDATES", 100)
    monkeypatch.setattr(config, "VECTOR_SEARCH_OVERFETCH", 3)

    assert candidate_count(5) == 100
    assert candidate_count(40) == 120
    assert candidate_count(5, num_candidates=20) == 20


def test_limit_must_be_positive(store, embedder):
    with pytest.raises(ValueError):
        find_similar("text", 0, embedder=embedder, store=store)
    assert embedder.calls == []
