"""Find Jobs Backend API - FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pymongo.errors import PyMongoError

from .config import get_settings
from .database import Database, create_client, ensure_indexes, ping
from .errors import (
    FindJobsError,
    database_error_handler,
    find_jobs_error_handler,
    validation_error_handler,
)
from .logging_config import get_logger, setup_logging
from .routes import auth_router, bids_router, jobs_router

logger = get_logger("findjobs.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the MongoDB client on startup and close it on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info(f"Starting Find Jobs API (environment={settings.environment}, port={settings.port})")

    client = create_client(settings)
    app.state.mongo_client = client
    app.state.db = client[settings.db_name]
    if await ping(client):
        await ensure_indexes(app.state.db)
    yield
    logger.info("Shutting down Find Jobs API")
    client.close()


app = FastAPI(
    title="Find Jobs API",
    description="Job board backend: jobs, bids and cookie-based JWT auth",
    version="1.0.0",
    lifespan=lifespan,
)

# Error responses carry a single "message" field
app.add_exception_handler(FindJobsError, find_jobs_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(PyMongoError, database_error_handler)

# CORS middleware
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(jobs_router)
app.include_router(bids_router)


@app.get("/", response_class=PlainTextResponse)
async def root():
    """Liveness message."""
    return "Hello from Find Jobs Server!"


@app.get("/health")
async def health(db: Database):
    """Health check with an actual database round trip."""
    db_status = "connected" if await ping(db.client) else "disconnected"
    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
    }
