"""
LinkedIn API client.

Decorates requests with the access token and format header, sends them
through the injected request executor and maps responses to models.
"""

import logging

from app.core.domain import AccessToken, ApiRequest, ApiResponse
from app.core.ports import RequestExecutor
from app.integrations.linkedin.auth import FORMAT_HEADER, FORMAT_JSON, decode_json
from app.integrations.linkedin.config import LinkedinConfig
from app.integrations.linkedin.exceptions import (
    LinkedinNotConnectedError,
    LinkedinProviderError,
)
from app.integrations.linkedin.models import Profile


logger = logging.getLogger(__name__)

ACCESS_TOKEN_PARAM = "oauth2_access_token"

PROFILE_PATH = "people/~"
PROFILE_SCOPES = ["r_basicprofile"]


def decorate_request(request: ApiRequest, token: AccessToken | str) -> ApiRequest:
    """
    Add the access token query parameter and the JSON format header.

    Only these two keys are written; they always win over values the caller
    set. Other query parameters and headers are left alone. Decorating twice
    gives the same result as decorating once.
    """
    value = token.access_token if isinstance(token, AccessToken) else token
    request.query[ACCESS_TOKEN_PARAM] = value
    request.headers[FORMAT_HEADER] = FORMAT_JSON
    return request


class LinkedinClient:
    """Client for the LinkedIn REST API on behalf of one application/user pair."""

    def __init__(self, executor: RequestExecutor, config: LinkedinConfig):
        self._executor = executor
        self._config = config

    async def prepare_request(self, request: ApiRequest) -> ApiResponse:
        """
        Decorate a request with the current token and send it.

        Raises:
            LinkedinNotConnectedError: If there is no current token
        """
        token = self._executor.get_current_token()
        if token is None:
            raise LinkedinNotConnectedError(
                "LinkedIn account not connected. Visit /oauth/linkedin/connect first."
            )

        decorate_request(request, token)
        return await self._executor.execute_request(request)

    async def me(self) -> Profile:
        """Get the profile of the member the current token belongs to."""
        request = ApiRequest(
            method="GET", path=PROFILE_PATH, required_scopes=list(PROFILE_SCOPES)
        )
        response = await self.prepare_request(request)
        data = decode_json(response)

        if not response.ok:
            raise LinkedinProviderError(response.status_code, data)

        return Profile.from_json(data)

    async def resolve_identity(self, token: AccessToken) -> Profile:
        """
        Fetch the profile for a freshly issued token.

        The token is installed only for this call and scope verification is
        switched off, since the new token's scopes are not known yet. Both
        are restored when the call finishes, also on error. Errors are
        propagated as they are.
        """
        async with self._executor.credential_scope(token, verify_scopes=False):
            return await self.me()

    async def label_for_token(self, token: AccessToken) -> str | None:
        """
        Human-recognizable label for a new token: the member's last name.

        Returns None when the profile has no last name.
        """
        profile = await self.resolve_identity(token)
        return profile.get_last_name()

    def get_remaining_requests(self, response: ApiResponse) -> int:
        """
        Estimate remaining requests after ``response``.

        LinkedIn sends no rate limit headers, so this is the configured
        default minus the call just made.
        """
        # TODO: count requests per window locally instead of a fixed estimate
        return self._config.default_remaining_requests - 1

    def get_remaining_time(self, response: ApiResponse) -> int:
        """Seconds until the estimated request budget resets."""
        return self._config.default_remaining_time
