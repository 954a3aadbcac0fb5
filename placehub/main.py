"""
PlaceHub Anonymous Q&A - Main Application

FastAPI backend with:
- MongoDB for sessions, questions and answers
- WebSocket hub for live answers and reactions
- Background archive sweep for aged questions
- DeepSeek AI for optional thread summaries

Run: uvicorn placehub.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from placehub import __version__
from placehub.api.routes import api_router, realtime_router
from placehub.core.config import get_settings
from placehub.core.logging import setup_logging, log_requests_middleware
from placehub.db.mongodb import init_mongo_indexes, close_mongo_client
from placehub.schemas.schemas import ErrorResponse
from placehub.services.archive_scheduler import get_archive_scheduler
from placehub.services.realtime_hub import get_hub

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger("placehub")

# Create FastAPI app
app = FastAPI(
    title="PlaceHub Anonymous Q&A",
    description="""
    Anonymous, real-time Q&A for campus placement preparation.

    ## Features
    - **Sessions**: Pseudonymous identity (animal icon) without login
    - **Questions**: Ask anonymously; questions auto-archive after a short window
    - **Answers**: Text or image answers with free-form reaction counters
    - **Realtime**: `WS /ws` pushes new answers and reaction updates to every client
    - **AI Summaries**: Optional DeepSeek digest of a thread
    - **Moderation**: Report content; admins review the reported queue

    ## Database
    - MongoDB: anon_sessions, anon_questions, anon_answers
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests_middleware)

# Include API routes
app.include_router(api_router, prefix="/api")
app.include_router(realtime_router)


@app.exception_handler(PyMongoError)
async def mongo_error_handler(request: Request, exc: PyMongoError):
    """Database failures surface as 500 with the underlying message."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content=ErrorResponse(detail=str(exc)).model_dump())


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes and start the archive sweep."""
    try:
        await init_mongo_indexes()
        logger.info("MongoDB indexes initialized")
    except Exception as e:
        logger.warning(f"MongoDB index initialization failed: {e}")

    if settings.archive_scheduler_enabled:
        get_archive_scheduler().start()


@app.on_event("shutdown")
async def shutdown_event():
    await get_archive_scheduler().stop()
    await close_mongo_client()


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "PlaceHub Anonymous Q&A", "version": __version__}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from placehub.db.mongodb import test_mongo_connection

    return {
        "status": "healthy",
        "mongodb": "connected" if await test_mongo_connection() else "disconnected",
        "realtime_connections": get_hub().connection_count,
        "archive_scheduler": "running" if get_archive_scheduler().running else "stopped"
    }
