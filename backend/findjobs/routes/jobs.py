"""Job routes.

Listing, posting, owner management and paginated search over the ``jobs``
collection.
"""

import re

from fastapi import APIRouter, Query
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from ..auth import CurrentUser, require_owner, require_same_email
from ..database import (
    JOBS_COLLECTION,
    Database,
    parse_object_id,
    serialize_document,
    serialize_documents,
)
from ..errors import Forbidden, InvalidIdentifier
from ..logging_config import get_logger
from ..models import (
    CountResponse,
    DeleteResult,
    InsertResult,
    JobCreate,
    UpdateResult,
    delete_result,
    insert_result,
    update_result,
)

logger = get_logger("findjobs.jobs")
router = APIRouter(tags=["jobs"])


# =============================================================================
# Database Operations
# =============================================================================

async def list_jobs(db: AsyncIOMotorDatabase) -> list[dict]:
    """All jobs in storage order."""
    return await db[JOBS_COLLECTION].find({}).to_list(length=None)


async def get_job(db: AsyncIOMotorDatabase, job_id: str) -> dict | None:
    """Get a job by ID. Malformed IDs match nothing."""
    try:
        oid = parse_object_id(job_id)
    except InvalidIdentifier:
        return None
    return await db[JOBS_COLLECTION].find_one({"_id": oid})


async def create_job(db: AsyncIOMotorDatabase, job: JobCreate) -> InsertResult:
    result = await db[JOBS_COLLECTION].insert_one(job.to_document())
    return insert_result(result)


async def list_jobs_by_owner(db: AsyncIOMotorDatabase, email: str) -> list[dict]:
    return await db[JOBS_COLLECTION].find({"buyer.email": email}).to_list(length=None)


async def delete_job(db: AsyncIOMotorDatabase, job_id: str) -> DeleteResult:
    result = await db[JOBS_COLLECTION].delete_one({"_id": parse_object_id(job_id)})
    return delete_result(result)


async def update_job(db: AsyncIOMotorDatabase, job_id: str, job: JobCreate) -> UpdateResult:
    """Replace a job's fields, inserting the job if the ID matches nothing.

    WARNING: an upsert is not an existence check. Concurrent updates of a
    missing ID race to create it.
    """
    result = await db[JOBS_COLLECTION].update_one(
        {"_id": parse_object_id(job_id)},
        {"$set": job.to_document()},
        upsert=True,
    )
    return update_result(result)


def build_search_query(filter: str | None = None, search: str | None = None) -> dict:
    """Filter document for job search.

    ``search`` is a case-insensitive substring of ``job_title``; ``filter`` is
    an exact category.
    """
    query: dict = {}
    if search:
        query["job_title"] = {"$regex": re.escape(search), "$options": "i"}
    if filter:
        query["category"] = filter
    return query


async def search_jobs(
    db: AsyncIOMotorDatabase,
    page: int,
    size: int,
    filter: str | None = None,
    sort: str | None = None,
    search: str | None = None,
) -> list[dict]:
    """One page of matching jobs ordered by deadline (``asc`` or else descending)."""
    direction = ASCENDING if sort == "asc" else DESCENDING
    cursor = (
        db[JOBS_COLLECTION]
        .find(build_search_query(filter, search))
        .sort("deadline", direction)
        .skip((page - 1) * size)
        .limit(size)
    )
    return await cursor.to_list(length=None)


async def count_jobs(
    db: AsyncIOMotorDatabase,
    filter: str | None = None,
    search: str | None = None,
) -> int:
    return await db[JOBS_COLLECTION].count_documents(build_search_query(filter, search))


# =============================================================================
# Routes
# =============================================================================


@router.get("/jobs")
async def list_jobs_endpoint(db: Database) -> list[dict]:
    """List all jobs."""
    logger.info("GET /jobs")
    return serialize_documents(await list_jobs(db))


@router.get("/job/{job_id}")
async def get_job_details(job_id: str, db: Database) -> dict | None:
    """Get a single job; ``null`` when it does not exist."""
    logger.info(f"GET /job/{job_id}")
    return serialize_document(await get_job(db, job_id))


@router.post("/job", response_model=InsertResult)
async def create_job_listing(job: JobCreate, db: Database):
    """Post a new job."""
    logger.info(f"POST /job | buyer={job.buyer.email} | title={job.job_title[:50]}")
    result = await create_job(db, job)
    logger.info(f"Job created | id={result.insertedId} | buyer={job.buyer.email}")
    return result


@router.get("/jobs/{email}")
async def list_my_jobs(email: str, auth: CurrentUser, db: Database) -> list[dict]:
    """List jobs posted by the authenticated user."""
    require_same_email(auth, email)
    logger.info(f"GET /jobs/{email}")
    return serialize_documents(await list_jobs_by_owner(db, email))


@router.delete("/job/{job_id}", response_model=DeleteResult)
async def delete_job_listing(job_id: str, auth: CurrentUser, db: Database):
    """Delete a job owned by the authenticated user."""
    logger.info(f"DELETE /job/{job_id} | user={auth.email}")
    require_owner(auth, await get_job(db, job_id))
    return await delete_job(db, job_id)


@router.put("/job/{job_id}", response_model=UpdateResult)
async def update_job_listing(job_id: str, job: JobCreate, auth: CurrentUser, db: Database):
    """Replace a job's fields, creating it when the ID matches nothing."""
    logger.info(f"PUT /job/{job_id} | user={auth.email}")
    if job.buyer.email != auth.email:
        raise Forbidden()
    require_owner(auth, await get_job(db, job_id))
    result = await update_job(db, job_id, job)
    if result.upsertedId:
        logger.info(f"Job upserted | id={result.upsertedId} | buyer={auth.email}")
    return result


@router.get("/all-jobs")
async def search_jobs_endpoint(
    db: Database,
    page: int = Query(..., ge=1, description="1-based page index"),
    size: int = Query(..., ge=1, description="Jobs per page"),
    filter: str | None = Query(None, description="Exact category"),
    sort: str | None = Query(None, description="'asc' for earliest deadline first, otherwise latest first"),
    search: str | None = Query(None, description="Case-insensitive title substring"),
) -> list[dict]:
    """Paginated, filtered and sorted job search."""
    logger.info(f"GET /all-jobs | page={page} | size={size} | filter={filter} | sort={sort}")
    return serialize_documents(await search_jobs(db, page, size, filter, sort, search))


@router.get("/jobs-count", response_model=CountResponse)
async def count_jobs_endpoint(
    db: Database,
    filter: str | None = Query(None, description="Exact category"),
    search: str | None = Query(None, description="Case-insensitive title substring"),
):
    """Number of jobs matching a search, ignoring pagination."""
    logger.info(f"GET /jobs-count | filter={filter} | search={search}")
    return CountResponse(count=await count_jobs(db, filter, search))
