"""Database utilities for the MongoDB job board store."""

from datetime import datetime
from typing import Annotated, Any

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from .config import Settings
from .errors import InvalidIdentifier
from .logging_config import get_logger
from .models import as_utc

logger = get_logger("findjobs.database")


# =============================================================================
# Collection Names
# =============================================================================

JOBS_COLLECTION = "jobs"
BIDS_COLLECTION = "bids"


# =============================================================================
# Client Lifecycle
# =============================================================================

def create_client(settings: Settings) -> AsyncIOMotorClient:
    """Create the process-wide Motor client (Stable API v1, strict)."""
    return AsyncIOMotorClient(
        settings.database_uri,
        tz_aware=True,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
    )


async def ping(client: AsyncIOMotorClient) -> bool:
    """Ping the deployment; logs and returns False instead of raising."""
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        logger.error(f"MongoDB ping failed: {e}")
        return False
    logger.info("Pinged your deployment. You successfully connected to MongoDB!")
    return True


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """One bid per (email, jobId) pair."""
    await db[BIDS_COLLECTION].create_index(
        [("email", ASCENDING), ("jobId", ASCENDING)],
        unique=True,
        name="uq_bids_email_job",
    )


def get_db(request: Request) -> AsyncIOMotorDatabase:
    """FastAPI dependency for the job board database."""
    return request.app.state.db


# Type alias for dependency injection
Database = Annotated[AsyncIOMotorDatabase, Depends(get_db)]


# =============================================================================
# Document Helpers
# =============================================================================

def parse_object_id(value: str) -> ObjectId:
    """Parse a path identifier into an ObjectId."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdentifier(f"Invalid identifier: {value}")


def serialize_document(document: dict | None) -> dict | None:
    """Make a stored document JSON friendly (ObjectId -> str, dates -> UTC ISO)."""
    if document is None:
        return None
    return {key: _serialize_value(value) for key, value in document.items()}


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return as_utc(value).isoformat()
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value


def serialize_documents(documents: list[dict]) -> list[dict]:
    return [serialize_document(d) for d in documents]
