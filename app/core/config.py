import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./jobs.db")

# ✅ OpenAI embeddings
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "text-embedding-3-large")
EMBEDDING_DIMENSIONS = int(os.getenv("EMBEDDING_DIMENSIONS", "1024"))
EMBEDDING_TIMEOUT_SECONDS = float(os.getenv("EMBEDDING_TIMEOUT_SECONDS", "30"))
EMBEDDING_MAX_RETRIES = int(os.getenv("EMBEDDING_MAX_RETRIES", "2"))
CHECK_EMBEDDING_MODEL_ON_STARTUP = os.getenv("CHECK_EMBEDDING_MODEL_ON_STARTUP", "1") == "1"

# ✅ Vector search
VECTOR_SEARCH_NUM_CANDIDATES = int(os.getenv("VECTOR_SEARCH_NUM_CANDIDATES", "100"))
VECTOR_SEARCH_LIMIT = int(os.getenv("VECTOR_SEARCH_LIMIT", "30"))
VECTOR_SEARCH_OVERFETCH = int(os.getenv("VECTOR_SEARCH_OVERFETCH", "3"))
_min_score = os.getenv("VECTOR_SEARCH_MIN_SCORE")
VECTOR_SEARCH_MIN_SCORE = float(_min_score) if _min_score else None

# ✅ Job listing
JOB_LIST_LIMIT = int(os.getenv("JOB_LIST_LIMIT", "100"))

# ✅ Rate limiting (similarity endpoint calls the paid embedding API)
SIMILARITY_RATE_LIMIT = int(os.getenv("SIMILARITY_RATE_LIMIT", "10"))
SIMILARITY_RATE_WINDOW_SECONDS = int(os.getenv("SIMILARITY_RATE_WINDOW_SECONDS", "60"))

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR")

# ✅ CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]
