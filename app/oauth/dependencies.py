"""
FastAPI dependencies for OAuth endpoints.

Provides dependency injection for the provider registry and OAuth service.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status

from app.core.oauth_service import OAuthProvider, OAuthService
from app.oauth.config import get_oauth_registry, SUPPORTED_PROVIDERS


logger = logging.getLogger(__name__)


def get_registry() -> dict[str, OAuthProvider]:
    """Provide the OAuth provider registry dependency."""
    return get_oauth_registry()


async def validate_provider(
    provider: str,
    registry: Annotated[dict[str, OAuthProvider], Depends(get_registry)],
) -> str:
    """
    Validate that the provider is supported and configured.

    Args:
        provider: OAuth provider name from path
        registry: Provider registry

    Returns:
        Validated provider name

    Raises:
        HTTPException: If provider is invalid or not configured
    """
    if provider not in SUPPORTED_PROVIDERS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown provider: {provider}. Supported: {SUPPORTED_PROVIDERS}",
        )

    if provider not in registry:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Provider '{provider}' is not configured",
        )

    return provider


def get_oauth_service(
    provider: Annotated[str, Depends(validate_provider)],
    registry: Annotated[dict[str, OAuthProvider], Depends(get_registry)],
) -> OAuthService:
    """Provide an OAuthService bound to the requested provider."""
    return OAuthService(registry[provider])


# Type aliases for cleaner dependency injection
ValidProvider = Annotated[str, Depends(validate_provider)]
Registry = Annotated[dict[str, OAuthProvider], Depends(get_registry)]
Service = Annotated[OAuthService, Depends(get_oauth_service)]
