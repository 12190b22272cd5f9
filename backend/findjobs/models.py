"""Pydantic models for API requests and responses."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =============================================================================
# Auth Models
# =============================================================================

class TokenRequest(BaseModel):
    """Identity to sign into the auth cookie."""
    model_config = ConfigDict(extra="allow")

    email: str = Field(..., min_length=3)


class SuccessResponse(BaseModel):
    success: bool = True


# =============================================================================
# Job Models
# =============================================================================

class Buyer(BaseModel):
    """Job owner, embedded in jobs and copied into bids."""
    model_config = ConfigDict(extra="allow")

    email: str = Field(..., min_length=3)
    name: str | None = None
    photo: str | None = None


class JobCreate(BaseModel):
    """Job posting. Unknown posting fields are kept as-is."""
    model_config = ConfigDict(extra="allow")

    job_title: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    deadline: datetime
    buyer: Buyer
    description: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    bid_count: int | None = None

    @field_validator("deadline")
    @classmethod
    def deadline_in_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    def to_document(self) -> dict[str, Any]:
        return _to_document(self)


# =============================================================================
# Bid Models
# =============================================================================

class BidCreate(BaseModel):
    """A bidder's application to a job."""
    model_config = ConfigDict(extra="allow")

    email: str = Field(..., min_length=3)
    jobId: str = Field(..., min_length=1)
    status: str = "Pending"
    buyer: Buyer
    price: float | None = None
    comment: str | None = None
    deadline: datetime | None = None
    job_title: str | None = None
    category: str | None = None

    @field_validator("deadline")
    @classmethod
    def deadline_in_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None

    def to_document(self) -> dict[str, Any]:
        return _to_document(self)


class BidStatusUpdate(BaseModel):
    """Fields merged into a bid; ``status`` is required."""
    model_config = ConfigDict(extra="allow")

    status: str = Field(..., min_length=1)

    def to_document(self) -> dict[str, Any]:
        return _to_document(self)


# =============================================================================
# Write Results (MongoDB driver wire shape)
# =============================================================================

class InsertResult(BaseModel):
    acknowledged: bool
    insertedId: str | None


class UpdateResult(BaseModel):
    acknowledged: bool
    matchedCount: int
    modifiedCount: int
    upsertedCount: int
    upsertedId: str | None = None


class DeleteResult(BaseModel):
    acknowledged: bool
    deletedCount: int


class CountResponse(BaseModel):
    count: int


def insert_result(result) -> InsertResult:
    """Convert a pymongo InsertOneResult."""
    return InsertResult(
        acknowledged=result.acknowledged,
        insertedId=str(result.inserted_id) if result.inserted_id is not None else None,
    )


def update_result(result) -> UpdateResult:
    """Convert a pymongo UpdateResult."""
    upserted_id = result.upserted_id
    return UpdateResult(
        acknowledged=result.acknowledged,
        matchedCount=result.matched_count,
        modifiedCount=result.modified_count,
        upsertedCount=1 if upserted_id is not None else 0,
        upsertedId=str(upserted_id) if upserted_id is not None else None,
    )


def delete_result(result) -> DeleteResult:
    """Convert a pymongo DeleteResult."""
    return DeleteResult(acknowledged=result.acknowledged, deletedCount=result.deleted_count)


def _to_document(model: BaseModel) -> dict[str, Any]:
    """Dump a request model for storage. The store owns ``_id``."""
    document = model.model_dump(exclude_none=True)
    document.pop("_id", None)
    return document
