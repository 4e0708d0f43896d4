"""
Error taxonomy for the job board core and its mapping onto HTTP errors.
"""
from fastapi import HTTPException, status


class JobBoardError(Exception):
    """Base class for errors raised by the job board core."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(JobBoardError):
    """A job attribute is missing or malformed. Raised before any embedding or write."""
    status_code = status.HTTP_400_BAD_REQUEST


class ProviderError(JobBoardError):
    """The embedding provider was unreachable, failed, or returned an unexpected payload."""
    status_code = status.HTTP_502_BAD_GATEWAY


class NotFoundError(JobBoardError):
    """The referenced job does not exist."""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, job_id: int):
        super().__init__(f"Job with id {job_id} not found")
        self.job_id = job_id


class VectorIndexError(JobBoardError):
    """The vector search itself failed. Never reported as an empty result."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def to_http_exception(error: JobBoardError) -> HTTPException:
    """Convert a core error into the HTTPException the routes raise."""
    return HTTPException(status_code=error.status_code, detail=error.message)
