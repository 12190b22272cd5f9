"""Bid routes.

Bidders apply to jobs once per job; job owners review incoming bids and move
them through statuses.
"""

from fastapi import APIRouter
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from ..auth import CurrentUser, require_owner, require_same_email
from ..database import BIDS_COLLECTION, Database, parse_object_id, serialize_documents
from ..errors import DuplicateBid
from ..logging_config import get_logger
from ..models import (
    BidCreate,
    BidStatusUpdate,
    InsertResult,
    UpdateResult,
    update_result,
)

logger = get_logger("findjobs.bids")
router = APIRouter(tags=["bids"])


# =============================================================================
# Database Operations
# =============================================================================

async def create_bid(db: AsyncIOMotorDatabase, bid: BidCreate) -> InsertResult:
    """Insert a bid unless one already exists for the same (email, jobId).

    Insert-if-absent is a single upsert with ``$setOnInsert``, so two
    concurrent bids cannot both insert. The unique index catches the loser
    of a simultaneous upsert.

    Raises:
        DuplicateBid: the bidder already applied to this job.
    """
    try:
        result = await db[BIDS_COLLECTION].update_one(
            {"email": bid.email, "jobId": bid.jobId},
            {"$setOnInsert": bid.to_document()},
            upsert=True,
        )
    except DuplicateKeyError:
        raise DuplicateBid()

    if result.upserted_id is None:
        raise DuplicateBid()

    return InsertResult(acknowledged=result.acknowledged, insertedId=str(result.upserted_id))


async def get_bid(db: AsyncIOMotorDatabase, bid_id: str) -> dict | None:
    return await db[BIDS_COLLECTION].find_one({"_id": parse_object_id(bid_id)})


async def list_bids_by_bidder(db: AsyncIOMotorDatabase, email: str) -> list[dict]:
    return await db[BIDS_COLLECTION].find({"email": email}).to_list(length=None)


async def list_bids_by_job_owner(db: AsyncIOMotorDatabase, email: str) -> list[dict]:
    return await db[BIDS_COLLECTION].find({"buyer.email": email}).to_list(length=None)


async def update_bid_status(
    db: AsyncIOMotorDatabase, bid_id: str, fields: BidStatusUpdate
) -> UpdateResult:
    """Merge status fields into a bid. Unknown IDs are a no-op."""
    result = await db[BIDS_COLLECTION].update_one(
        {"_id": parse_object_id(bid_id)},
        {"$set": fields.to_document()},
    )
    return update_result(result)


# =============================================================================
# Routes
# =============================================================================


@router.post("/bid", response_model=InsertResult)
async def place_bid(bid: BidCreate, db: Database):
    """Place a bid on a job."""
    logger.info(f"POST /bid | bidder={bid.email} | job={bid.jobId}")
    try:
        result = await create_bid(db, bid)
    except DuplicateBid:
        logger.info(f"Duplicate bid rejected | bidder={bid.email} | job={bid.jobId}")
        raise
    logger.info(f"Bid created | id={result.insertedId} | job={bid.jobId}")
    return result


@router.get("/my-bids/{email}")
async def list_my_bids(email: str, auth: CurrentUser, db: Database) -> list[dict]:
    """Bids placed by the authenticated user."""
    require_same_email(auth, email)
    logger.info(f"GET /my-bids/{email}")
    return serialize_documents(await list_bids_by_bidder(db, email))


@router.get("/bid-request/{email}")
async def list_bid_requests(email: str, auth: CurrentUser, db: Database) -> list[dict]:
    """Bids received on jobs the authenticated user posted."""
    require_same_email(auth, email)
    logger.info(f"GET /bid-request/{email}")
    return serialize_documents(await list_bids_by_job_owner(db, email))


@router.patch("/bid/{bid_id}", response_model=UpdateResult)
async def update_bid(bid_id: str, fields: BidStatusUpdate, auth: CurrentUser, db: Database):
    """Change a bid's status. Only the owner of the job may do this."""
    logger.info(f"PATCH /bid/{bid_id} | user={auth.email} | status={fields.status}")
    require_owner(auth, await get_bid(db, bid_id))
    return await update_bid_status(db, bid_id, fields)
