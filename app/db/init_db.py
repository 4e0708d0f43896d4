import logging

from app.db.base import Base
from app.db.session import engine
from app.db.models.job_posting import JobPosting  # noqa: F401  (registers the table)

logger = logging.getLogger(__name__)


def init_db(bind=None):
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")


if __name__ == "__main__":
    init_db()
