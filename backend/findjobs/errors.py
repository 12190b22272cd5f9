"""Error types and exception handlers for the Find Jobs API."""

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from .logging_config import get_logger

logger = get_logger("findjobs.errors")


class FindJobsError(Exception):
    """Base for errors that map onto an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthorized(FindJobsError):
    """No credential was presented."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized access"


class Forbidden(FindJobsError):
    """Credential is invalid or does not grant access to the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden access"


class DuplicateBid(FindJobsError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "You have already placed a bid on this job"


class InvalidIdentifier(FindJobsError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid identifier"


class InvalidCredential(Exception):
    """Raised when a token has a bad signature or has expired."""


async def find_jobs_error_handler(request: Request, exc: FindJobsError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


async def database_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} | database error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Database error"},
    )
