"""
LinkedIn API configuration.

Contains the endpoints, request defaults and the per-application client
configuration (app id, secret, redirect URI, scopes).
"""

import os
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from app.integrations.linkedin.exceptions import LinkedinConfigurationError


logger = logging.getLogger(__name__)


# LinkedIn REST API (v1)
LINKEDIN_API_HOSTNAME = "api.linkedin.com"
LINKEDIN_API_PATH_PREFIX = "v1"
LINKEDIN_API_PORT = 443
LINKEDIN_HTTP_SCHEME = "https"

# OAuth2 endpoints live on the www host, not the API host
LINKEDIN_AUTH_HOSTNAME = "www.linkedin.com"
LINKEDIN_AUTHORIZE_PATH = "oauth/v2/authorization"
LINKEDIN_TOKEN_PATH = "oauth/v2/accessToken"

DEFAULT_SCOPES = "r_basicprofile,r_emailaddress,rw_company_admin,w_share"

# LinkedIn does not report rate limits, so these are estimates
DEFAULT_REMAINING_REQUESTS = 100
DEFAULT_REMAINING_TIME = 60 * 60 * 24

DEFAULT_HTTP_TIMEOUT = 15.0


@dataclass(frozen=True)
class LinkedinConfig:
    """
    Client configuration for one registered LinkedIn application.

    Immutable for the duration of an authentication attempt; components
    receive it by reference and never modify it.
    """

    app_id: str | None
    app_secret: str | None
    redirect_uri: str | None
    scopes: str = DEFAULT_SCOPES
    name: str = "default"

    hostname: str = LINKEDIN_API_HOSTNAME
    path_prefix: str = LINKEDIN_API_PATH_PREFIX
    port: int = LINKEDIN_API_PORT
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    default_remaining_requests: int = DEFAULT_REMAINING_REQUESTS
    default_remaining_time: int = DEFAULT_REMAINING_TIME

    @classmethod
    def from_env(cls) -> "LinkedinConfig":
        """Load configuration from environment variables."""
        redirect_uri = os.getenv("LINKEDIN_REDIRECT_URI")
        if not redirect_uri and os.getenv("BASE_URL"):
            redirect_uri = f"{os.getenv('BASE_URL')}/oauth/linkedin/callback"

        return cls(
            app_id=os.getenv("LINKEDIN_APP_ID"),
            app_secret=os.getenv("LINKEDIN_APP_SECRET"),
            redirect_uri=redirect_uri,
            scopes=os.getenv("LINKEDIN_SCOPES") or DEFAULT_SCOPES,
            name=os.getenv("LINKEDIN_PROFILE_NAME", "default"),
            http_timeout=float(
                os.getenv("LINKEDIN_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT))
            ),
        )

    @classmethod
    def from_mapping(cls, profile: dict[str, Any]) -> "LinkedinConfig":
        """
        Build configuration from a registered application profile.

        Args:
            profile: Dict with ``app_id``, ``app_secret``, ``redirect_uri``
                and optionally ``scopes`` and ``name``

        Returns:
            LinkedinConfig instance
        """
        return cls(
            app_id=profile.get("app_id"),
            app_secret=profile.get("app_secret"),
            redirect_uri=profile.get("redirect_uri"),
            scopes=profile.get("scopes") or DEFAULT_SCOPES,
            name=profile.get("name", "default"),
        )

    def is_configured(self) -> bool:
        """Check if all credentials needed for the handshake are present."""
        return bool(self.app_id and self.app_secret and self.redirect_uri)

    def validate(self, require_secret: bool = False) -> None:
        """
        Ensure the fields needed for the handshake are set.

        Args:
            require_secret: Also require the app secret (token exchange)

        Raises:
            LinkedinConfigurationError: If a required field is missing
        """
        missing = []
        if not self.app_id:
            missing.append("app_id")
        if not self.redirect_uri:
            missing.append("redirect_uri")
        if require_secret and not self.app_secret:
            missing.append("app_secret")

        if missing:
            raise LinkedinConfigurationError(
                f"LinkedIn configuration '{self.name}' is missing: {', '.join(missing)}"
            )

    def scope_list(self) -> list[str]:
        """Configured scopes as a list."""
        return [s.strip() for s in self.scopes.split(",") if s.strip()]


@lru_cache()
def get_linkedin_config() -> LinkedinConfig:
    """Get LinkedIn configuration singleton."""
    config = LinkedinConfig.from_env()
    if not config.is_configured():
        logger.warning("LinkedIn OAuth not configured (missing credentials)")
    return config
