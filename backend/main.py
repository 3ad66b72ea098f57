"""
Lemma Matcher API - Application Entry Point

FastAPI server around the matching engine:
- Matching sessions holding reference data and a word list
- Batched matching with running statistics
- Result paging and TSV/CSV/JSON export

Run with: uvicorn backend.main:app --reload --port 8000
"""

from contextlib import asynccontextmanager
from pathlib import Path
import logging
import time

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# .env must be read before settings are first built
_dotenv = Path(__file__).resolve().parent.parent / '.env'
if _dotenv.exists():
    load_dotenv(_dotenv)

from shared.config import get_settings
from backend import __version__
from backend.api import matching, results, sessions
from backend.api.deps import get_session_manager

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# ===== Request Timing =====

class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Log each request with its status and duration"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"❌ {request.method} {request.url.path} failed: {e}", exc_info=True)
            raise

        elapsed = time.perf_counter() - started
        response.headers['X-Process-Time'] = f"{elapsed:.3f}"
        logger.info(f"📨 {request.method} {request.url.path} -> {response.status_code} ({elapsed:.3f}s)")
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start and stop the idle-session cleanup thread"""
    logger.info(f"🚀 Lemma Matcher API {__version__} starting")

    cleanup = None
    if settings.cleanup_enabled:
        from backend.tasks.cleanup_task import SessionCleanupTask
        cleanup = SessionCleanupTask(
            session_ttl_hours=settings.session_ttl_hours,
            check_interval_minutes=settings.cleanup_interval_minutes,
        )
        cleanup.start()

    yield

    if cleanup is not None:
        cleanup.stop()
    logger.info(f"🛑 Lemma Matcher API stopped ({len(get_session_manager())} sessions dropped)")


app = FastAPI(
    title="Lemma Matcher API",
    description="Match Georgian word lists against reference lemma dictionaries",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestTimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ROUTERS = [
    (sessions.router, "/api/sessions", "Sessions"),
    (matching.router, "/api", "Matching"),
    (results.router, "/api", "Results"),
]
for router, prefix, tag in ROUTERS:
    app.include_router(router, prefix=prefix, tags=[tag])


@app.get("/")
async def root():
    """Service name and version"""
    return {
        "status": "healthy",
        "service": "Lemma Matcher",
        "version": __version__,
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "active_sessions": len(get_session_manager())}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
