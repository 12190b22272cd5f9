"""API routes."""

from .auth import router as auth_router
from .bids import router as bids_router
from .jobs import router as jobs_router

__all__ = [
    "auth_router",
    "jobs_router",
    "bids_router",
]
