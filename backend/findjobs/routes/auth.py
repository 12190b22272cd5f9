"""Authentication routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from ..auth import clear_auth_cookie, create_access_token, set_auth_cookie
from ..config import Settings, get_settings
from ..logging_config import get_logger, log_auth_event
from ..models import SuccessResponse, TokenRequest

logger = get_logger("findjobs.auth")
router = APIRouter(tags=["auth"])


@router.post("/jwt", response_model=SuccessResponse)
async def issue_token(
    identity: TokenRequest,
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Sign the posted identity and set it as the httpOnly auth cookie."""
    token = create_access_token(identity.model_dump(), settings)
    set_auth_cookie(response, token, settings)
    log_auth_event(logger, "issue", identity.email)
    return SuccessResponse()


@router.get("/logout", response_model=SuccessResponse)
async def logout(
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Clear the auth cookie."""
    clear_auth_cookie(response, settings)
    logger.info("GET /logout")
    return SuccessResponse()
