import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# ✅ Import All API Routes
from app.api.routes import jobs, similarity, health

from app.core import config
from app.core.logging_config import setup_logging
from app.db.init_db import init_db
from app.db.session import SessionLocal
from app.services.embedding_sync import find_model_mismatches

setup_logging(config.LOG_LEVEL, config.LOG_DIR)
logger = logging.getLogger(__name__)


def check_embedding_model() -> None:
    """Refuse to serve an index that holds vectors from another embedding model or dimension."""
    db = SessionLocal()
    try:
        mismatched = find_model_mismatches(db, config.EMBEDDING_MODEL, config.EMBEDDING_DIMENSIONS)
    finally:
        db.close()
    if mismatched:
        raise RuntimeError(
            f"{mismatched} job(s) were not embedded with {config.EMBEDDING_MODEL} "
            f"at {config.EMBEDDING_DIMENSIONS} dimensions; "
            "run scripts/reembed_jobs.py before starting the API"
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if config.CHECK_EMBEDDING_MODEL_ON_STARTUP:
        check_embedding_model()
    logger.info(f"Job Board API started: embedding_model={config.EMBEDDING_MODEL}, dimensions={config.EMBEDDING_DIMENSIONS}")
    yield


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Job Board API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(jobs.router)
app.include_router(similarity.router)
app.include_router(health.router)


@app.get("/")
def root():
    return {"status": "Job Board API running"}
