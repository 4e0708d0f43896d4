"""
Integration tests for the /jobs endpoints.
"""
from datetime import datetime, timedelta, timezone

from app.db.models.job_posting import JobPosting


JOB = {
    "title": "Engineer",
    "description": "build distributed systems",
    "url": "http://x",
    "company": "Acme",
}


def _create(client, **overrides):
    response = client.post("/jobs", json={**JOB, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def test_create_job_stores_embedding_but_does_not_return_it(client, db, embedder):
    data = _create(client)

    assert "embedding" not in data
    assert data["embedding_dimensions"] == embedder.dimensions
    stored = db.query(JobPosting).filter(JobPosting.id == data["id"]).one()
    assert len(stored.embedding) == embedder.dimensions
    assert stored.embedding == embedder.embed(JOB["description"])


def test_create_job_missing_required_field(client, embedder):
    response = client.post("/jobs", json={"title": "Engineer", "company": "Acme", "url": "http://x"})

    assert response.status_code == 422
    assert embedder.calls == []


def test_create_job_blank_description_rejected(client, embedder):
    response = client.post("/jobs", json={**JOB, "description": "   "})

    assert response.status_code == 400
    assert "description" in response.json()["detail"]
    assert embedder.calls == []


def test_create_job_provider_failure_returns_502_and_stores_nothing(client, db, embedder):
    embedder.fail = True

    response = client.post("/jobs", json=JOB)

    assert response.status_code == 502
    assert db.query(JobPosting).count() == 0


def test_get_job(client):
    created = _create(client)

    response = client.get(f"/jobs/{created['id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Engineer"
    assert "embedding" not in data


def test_get_missing_job_returns_404(client):
    response = client.get("/jobs/999")

    assert response.status_code == 404
    assert "999" in response.json()["detail"]


def test_update_company_keeps_embedding(client, db):
    created = _create(client)
    before = list(db.query(JobPosting).filter(JobPosting.id == created["id"]).one().embedding)

    response = client.put(f"/jobs/{created['id']}", json={"company": "Globex"})

    assert response.status_code == 200
    assert response.json()["company"] == "Globex"
    assert "embedding" not in response.json()
    db.expire_all()
    assert db.query(JobPosting).filter(JobPosting.id == created["id"]).one().embedding == before


def test_update_description_changes_embedding(client, db):
    created = _create(client)
    before = list(db.query(JobPosting).filter(JobPosting.id == created["id"]).one().embedding)

    response = client.put(f"/jobs/{created['id']}", json={"description": "pastry baking"})

    assert response.status_code == 200
    db.expire_all()
    assert db.query(JobPosting).filter(JobPosting.id == created["id"]).one().embedding != before


def test_update_provider_failure_leaves_job_unchanged(client, db, embedder):
    created = _create(client)
    embedder.fail = True

    response = client.put(f"/jobs/{created['id']}", json={"description": "pastry baking"})

    assert response.status_code == 502
    db.expire_all()
    assert db.query(JobPosting).filter(JobPosting.id == created["id"]).one().description == JOB["description"]


def test_update_null_experience_rejected(client, db):
    created = _create(client, experience=3)

    response = client.put(f"/jobs/{created['id']}", json={"experience": None})

    assert response.status_code == 400
    assert "experience cannot be null" in response.json()["detail"]
    db.expire_all()
    assert db.query(JobPosting).filter(JobPosting.id == created["id"]).one().experience == 3


def test_update_null_posted_at_rejected(client, db):
    created = _create(client)

    response = client.put(f"/jobs/{created['id']}", json={"posted_at": None, "company": "Globex"})

    assert response.status_code == 400
    assert "posted_at cannot be null" in response.json()["detail"]
    db.expire_all()
    stored = db.query(JobPosting).filter(JobPosting.id == created["id"]).one()
    assert stored.posted_at is not None
    assert stored.company == "Acme"


def test_update_missing_job_returns_404(client):
    response = client.put("/jobs/999", json={"company": "Globex"})

    assert response.status_code == 404


def test_delete_job_returns_deleted_job(client, db):
    created = _create(client)

    response = client.delete(f"/jobs/{created['id']}")

    assert response.status_code == 200
    assert response.json()["id"] == created["id"]
    assert "embedding" not in response.json()
    assert db.query(JobPosting).count() == 0
    assert client.get(f"/jobs/{created['id']}").status_code == 404


def test_delete_missing_job_returns_404(client):
    assert client.delete("/jobs/999").status_code == 404


def test_list_jobs_filters(client):
    _create(client, title="Senior Python Engineer", skills=["Python", "Postgres"], experience=5, location="Berlin")
    _create(client, title="Junior Python Engineer", skills=["python"], experience=1, location="Remote")
    _create(client, title="Pastry Chef", company="Bakery & Co", description="pastry baking", experience=0)

    titles = lambda response: sorted(job["title"] for job in response.json()["jobs"])

    assert titles(client.get("/jobs", params={"title": "python"})) == ["Junior Python Engineer", "Senior Python Engineer"]
    assert titles(client.get("/jobs", params={"experience": 2})) == ["Junior Python Engineer", "Pastry Chef"]
    assert titles(client.get("/jobs", params={"skills": "python,postgres"})) == ["Senior Python Engineer"]
    assert titles(client.get("/jobs", params={"location": "berl"})) == ["Senior Python Engineer"]
    assert titles(client.get("/jobs", params={"company": "bakery &"})) == ["Pastry Chef"]

    response = client.get("/jobs")
    assert response.json()["total"] == 3
    assert all("embedding" not in job for job in response.json()["jobs"])


def test_list_jobs_company_wildcards_are_literal(client):
    _create(client, company="Acme")

    response = client.get("/jobs", params={"company": "%"})

    assert response.json()["total"] == 0


def test_list_jobs_days_old(client):
    old = (datetime.now(timezone.utc) - timedelta(days=30)).isoformat()
    _create(client, title="Old Posting", posted_at=old)
    _create(client, title="New Posting")

    response = client.get("/jobs", params={"days_old": 7})

    assert [job["title"] for job in response.json()["jobs"]] == ["New Posting"]


def test_list_jobs_linkedin_last(client):
    _create(client, title="LinkedIn Posting", url="https://www.linkedin.com/jobs/view/1")
    _create(client, title="Company Site Posting", url="https://acme.example/careers/1")

    response = client.get("/jobs")

    assert [job["title"] for job in response.json()["jobs"]] == ["Company Site Posting", "LinkedIn Posting"]


def test_list_jobs_title_matches_whole_words(client):
    _create(client, title="Senior Python Engineer")
    _create(client, title="Pythonista Wanted")
    _create(client, title="Backend Engineer (python)")

    response = client.get("/jobs", params={"title": " python "})

    assert sorted(job["title"] for job in response.json()["jobs"]) == [
        "Backend Engineer (python)",
        "Senior Python Engineer",
    ]
