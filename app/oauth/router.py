"""
OAuth2 API endpoints.

Provides the API surface for connecting the LinkedIn account:
- GET /oauth/{provider}/connect - Start OAuth flow
- GET /oauth/{provider}/callback - Handle callback, install token
- DELETE /oauth/{provider} - Drop the current token
"""

import logging

from authlib.integrations.base_client import MismatchingStateError
from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from app.core.domain import HandshakeState
from app.core.exceptions import AuthorizationDeniedError
from app.integrations.linkedin.exceptions import (
    LinkedinConfigurationError,
    LinkedinProtocolError,
    LinkedinProviderError,
    LinkedinTransportError,
)
from app.oauth.dependencies import Registry, Service, ValidProvider


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oauth", tags=["oauth"])


def _session_key(provider: str) -> str:
    return f"oauth_handshake_{provider}"


@router.get("/{provider}/connect")
async def connect(
    provider: ValidProvider,
    request: Request,
    service: Service,
    scopes: str | None = None,
):
    """
    Start OAuth2 authorization flow.

    Redirects the user to the provider's authorization page. The pending
    handshake is kept in the signed session; starting a new flow replaces
    any handshake that was still pending.

    Args:
        provider: OAuth provider name (linkedin)
        request: Starlette request (for the session)
        service: OAuth service for the provider
        scopes: Optional comma-separated scopes (configured scopes otherwise)

    Returns:
        Redirect to provider's authorization page
    """
    try:
        url, handshake = service.login(scopes)
    except LinkedinConfigurationError as e:
        logger.error(f"OAuth configuration error: {e}", extra={"provider": provider})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )

    request.session[_session_key(provider)] = handshake.to_session()

    logger.info(
        f"Starting OAuth flow for provider: {provider}",
        extra={"provider": provider},
    )

    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


@router.get("/{provider}/callback")
async def callback(
    provider: ValidProvider,
    request: Request,
    service: Service,
):
    """
    Handle OAuth2 callback from provider.

    Checks the echoed state against the pending handshake, exchanges the
    authorization code for a token and labels it with the account's
    identity. The handshake is consumed whatever the outcome.

    Args:
        provider: OAuth provider name
        request: Starlette request (contains code and state)
        service: OAuth service for the provider

    Returns:
        Connection status with the account label

    Raises:
        HTTPException: On OAuth errors
    """
    handshake = HandshakeState.from_session(
        request.session.pop(_session_key(provider), None)
    )

    logger.info(
        f"OAuth callback received for provider: {provider}",
        extra={"provider": provider},
    )

    try:
        account = await service.auth(str(request.url), handshake)
    except MismatchingStateError as e:
        logger.warning(
            f"OAuth state mismatch: {e}",
            extra={"provider": provider},
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"OAuth authorization failed: {e.description}",
        )
    except AuthorizationDeniedError as e:
        logger.warning(
            f"OAuth authorization denied: {e}",
            extra={"provider": provider, "error": e.error},
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except LinkedinProviderError as e:
        logger.error(
            f"OAuth error during authorization: {e}",
            extra={"provider": provider, "error": e.error},
        )
        if e.status_code >= 500:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"{provider} is temporarily unavailable, please retry",
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"OAuth authorization failed: {e.description or e.error or str(e)}",
        )
    except LinkedinTransportError as e:
        logger.error(
            f"Could not reach {provider} during authorization: {e}",
            extra={"provider": provider},
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not reach {provider}, please retry",
        )
    except LinkedinProtocolError as e:
        logger.error(
            f"Invalid response from {provider}: {e}",
            extra={"provider": provider},
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Invalid response from {provider}",
        )
    except LinkedinConfigurationError as e:
        logger.error(f"OAuth configuration error: {e}", extra={"provider": provider})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )

    logger.info(
        f"Successfully connected {provider}",
        extra={"provider": provider},
    )

    return {
        "status": "success",
        "provider": provider,
        "label": account.label,
    }


@router.delete("/{provider}")
async def disconnect(
    provider: ValidProvider,
    registry: Registry,
):
    """
    Disconnect an OAuth service.

    Drops the current token; API calls fail until the flow is run again.

    Args:
        provider: OAuth provider to disconnect
        registry: Provider registry

    Returns:
        Success message
    """
    registry[provider].activate_token(None)

    logger.info(f"Disconnected {provider}", extra={"provider": provider})

    return {
        "status": "success",
        "message": f"Disconnected from {provider}",
    }
