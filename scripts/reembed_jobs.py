"""
Re-embed job descriptions with the configured embedding model.

Use after changing EMBEDDING_MODEL or EMBEDDING_DIMENSIONS so that the index
never mixes vectors from two models.
Run: python -m scripts.reembed_jobs [--all]
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import logging

from app.core import config
from app.core.exceptions import ProviderError
from app.core.logging_config import setup_logging
from app.db.init_db import init_db
from app.db.session import SessionLocal
from app.embeddings.openai_embedder import OpenAIEmbedder
from app.services.embedding_sync import reembed_jobs

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--all", action="store_true", help="re-embed every job, not only stale ones")
    args = parser.parse_args(argv)

    setup_logging(config.LOG_LEVEL, config.LOG_DIR)
    init_db()
    embedder = OpenAIEmbedder()

    db = SessionLocal()
    try:
        stats = reembed_jobs(db, embedder, only_stale=not args.all)
    except ProviderError as e:
        db.rollback()
        logger.error(f"Re-embedding stopped: {e}")
        return 1
    finally:
        db.close()

    logger.info(
        f"Re-embedding complete: model={embedder.model}, total={stats['total']}, "
        f"reembedded={stats['reembedded']}, skipped={stats['skipped']}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
