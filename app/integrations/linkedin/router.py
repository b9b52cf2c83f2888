"""
LinkedIn API router.

API endpoints for LinkedIn operations.
Requires a connected LinkedIn account (see /oauth/linkedin/connect).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.integrations.linkedin.client import LinkedinClient
from app.integrations.linkedin.config import get_linkedin_config
from app.integrations.linkedin.exceptions import (
    InsufficientScopeError,
    LinkedinError,
    LinkedinNotConnectedError,
    LinkedinProtocolError,
    LinkedinProviderError,
    LinkedinTransportError,
)
from app.oauth.config import get_request_executor


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/integrations/linkedin", tags=["linkedin"])


def get_linkedin_client() -> LinkedinClient:
    """Get LinkedinClient bound to the shared request executor."""
    return LinkedinClient(get_request_executor(), get_linkedin_config())


def handle_linkedin_error(e: LinkedinError) -> HTTPException:
    """Convert LinkedIn exceptions to HTTP exceptions."""
    if isinstance(e, (LinkedinNotConnectedError, InsufficientScopeError)):
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )
    if isinstance(e, LinkedinProviderError):
        if e.status_code in (401, 403):
            return HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(e),
            )
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"LinkedIn API error: {str(e)}",
        )
    if isinstance(e, (LinkedinTransportError, LinkedinProtocolError)):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"LinkedIn API error: {str(e)}",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e),
    )


@router.get("/me")
async def get_current_linkedin_user(
    client: LinkedinClient = Depends(get_linkedin_client),
):
    """
    Get current LinkedIn member profile.

    Returns the profile of the member whose token is currently connected.
    """
    try:
        profile = await client.me()
    except LinkedinError as e:
        logger.error(f"LinkedIn profile request failed: {e}")
        raise handle_linkedin_error(e)

    return {
        "id": profile.get_id(),
        "lastName": profile.get_last_name(),
        "profile": profile.get_json(),
    }
