"""
OAuth2 provider registry.

Wires each supported provider (currently LinkedIn) to its configuration
and to the shared request executor that holds its current credential.
"""

import logging
from functools import lru_cache

from app.core.oauth_service import OAuthProvider
from app.infrastructure.http_executor import HttpxRequestExecutor
from app.infrastructure.oauth_providers import LinkedinOAuthProvider
from app.integrations.linkedin.config import LinkedinConfig, get_linkedin_config


logger = logging.getLogger(__name__)


@lru_cache()
def get_request_executor() -> HttpxRequestExecutor:
    """
    Get the LinkedIn request executor singleton.

    The executor carries the current access token, so the same instance
    must be shared by the OAuth callback and the API endpoints.
    """
    return HttpxRequestExecutor(get_linkedin_config())


def create_oauth_registry(
    config: LinkedinConfig | None = None,
    executor: HttpxRequestExecutor | None = None,
) -> dict[str, OAuthProvider]:
    """
    Create the provider registry.

    Providers without credentials are skipped (allows partial configuration).

    Args:
        config: LinkedIn configuration (uses default if not provided)
        executor: Request executor (uses the shared one if not provided)

    Returns:
        Mapping of provider name to provider
    """
    if config is None:
        config = get_linkedin_config()
    if executor is None:
        executor = get_request_executor()

    registry: dict[str, OAuthProvider] = {}

    if config.is_configured():
        registry["linkedin"] = LinkedinOAuthProvider(config, executor)
        logger.info(
            "Registered LinkedIn OAuth provider", extra={"profile": config.name}
        )
    else:
        logger.warning("LinkedIn OAuth not configured (missing credentials)")

    return registry


# Global OAuth registry singleton
_oauth_registry: dict[str, OAuthProvider] | None = None


def get_oauth_registry() -> dict[str, OAuthProvider]:
    """
    Get the OAuth registry singleton.

    Creates and configures the registry on first access.
    """
    global _oauth_registry
    if _oauth_registry is None:
        _oauth_registry = create_oauth_registry()
    return _oauth_registry


def reset_oauth_registry() -> None:
    """
    Reset the OAuth registry.

    Useful for testing with different configurations.
    """
    global _oauth_registry
    _oauth_registry = None


# List of supported providers (for validation)
SUPPORTED_PROVIDERS = ["linkedin"]
