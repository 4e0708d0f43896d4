"""
Pydantic schemas for job endpoints.

No schema here carries the raw embedding vector. Responses expose only its length.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class JobBase(BaseModel):
    """Base job schema with common fields."""
    title: str = Field(..., description="Job title", min_length=1, max_length=255)
    company: str = Field(..., description="Company name", min_length=1, max_length=255)
    url: str = Field(..., description="Job posting URL", min_length=1)
    description: str = Field(..., description="Full job description text", min_length=1)
    location: Optional[str] = Field(None, description="Job location")
    company_logo: Optional[str] = Field(None, description="Company logo URL")
    compensation: Optional[str] = Field(None, description="Compensation, free text")
    experience: int = Field(0, ge=0, description="Years of experience required")
    applications: Optional[int] = Field(None, ge=0, description="Number of applications received")
    skills: list[str] = Field(default_factory=list, description="Required skills")


class JobCreate(JobBase):
    """Schema for creating a new job."""
    posted_at: Optional[datetime] = Field(None, description="When the job was posted (defaults to now)")


class JobUpdate(BaseModel):
    """Schema for updating an existing job. Only provided fields are applied."""
    title: Optional[str] = Field(None, description="Job title", min_length=1, max_length=255)
    company: Optional[str] = Field(None, description="Company name", min_length=1, max_length=255)
    url: Optional[str] = Field(None, description="Job posting URL", min_length=1)
    description: Optional[str] = Field(None, description="Full job description text", min_length=1)
    location: Optional[str] = Field(None, description="Job location")
    company_logo: Optional[str] = Field(None, description="Company logo URL")
    compensation: Optional[str] = Field(None, description="Compensation, free text")
    experience: Optional[int] = Field(None, ge=0, description="Years of experience required")
    applications: Optional[int] = Field(None, ge=0, description="Number of applications received")
    skills: Optional[list[str]] = Field(None, description="Required skills")
    posted_at: Optional[datetime] = Field(None, description="When the job was posted")


class JobResponse(JobBase):
    """Schema for job response."""
    id: int = Field(..., description="Job ID")
    posted_at: datetime = Field(..., description="When the job was posted")
    embedding_dimensions: int = Field(0, description="Length of the stored description embedding (0 if none)")
    created_at: Optional[datetime] = Field(None, description="Job creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Job last update timestamp")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "title": "Backend Engineer",
                "company": "Acme",
                "url": "https://example.com/jobs/123",
                "description": "Build distributed systems in Python.",
                "location": "Remote",
                "company_logo": None,
                "compensation": "$150k",
                "experience": 3,
                "applications": 12,
                "skills": ["python", "postgres"],
                "posted_at": "2026-01-15T09:00:00Z",
                "embedding_dimensions": 1024,
                "created_at": "2026-01-15T09:00:00Z",
                "updated_at": "2026-01-15T09:00:00Z"
            }
        }


class JobListResponse(BaseModel):
    """Schema for list of jobs response."""
    jobs: list[JobResponse] = Field(..., description="List of jobs")
    total: int = Field(..., description="Number of jobs returned")


class JobFilter(BaseModel):
    """Schema for filtering jobs."""
    title: Optional[str] = Field(None, description="Title contains (case-insensitive)")
    experience: Optional[int] = Field(None, ge=0, description="Maximum years of experience required")
    skills: Optional[str] = Field(None, description="Comma-separated skills, all must be present")
    location: Optional[str] = Field(None, description="Location contains (case-insensitive)")
    company: Optional[str] = Field(None, description="Company contains (case-insensitive)")
    days_old: Optional[int] = Field(None, ge=0, description="Posted within the last N days")

    def skill_list(self) -> list[str]:
        if not self.skills:
            return []
        return [skill.strip() for skill in self.skills.split(",") if skill.strip()]


class SimilarityRequest(BaseModel):
    """Resume (or any free text) to match against job descriptions."""
    text: str = Field(..., description="Free text to embed and match")
    limit: Optional[int] = Field(None, ge=1, le=100, description="Maximum number of results")


class SimilarJob(BaseModel):
    """One ranked similarity result."""
    job: JobResponse
    score: float = Field(..., description="Similarity score from the vector index")


class SimilarityResponse(BaseModel):
    """Ranked similarity results, highest score first."""
    similar_jobs: list[SimilarJob] = Field(default_factory=list)
    count: int = Field(0, description="Number of results")
