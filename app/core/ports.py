"""
Port definitions (interfaces) for the core domain.

Ports define the contracts between the core domain and external systems.
Infrastructure adapters implement these ports.
"""

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from app.core.domain import AccessToken, ApiRequest, ApiResponse


class RequestExecutor(Protocol):
    """
    Port (interface) for executing API requests.

    Implemented by infrastructure adapters (e.g. HttpxRequestExecutor).
    The authentication core depends on this capability set, not on a
    concrete HTTP client.
    """

    async def execute_request(self, request: ApiRequest) -> ApiResponse:
        """
        Send a request and return the raw response.

        Args:
            request: Fully decorated request

        Returns:
            Raw response, whatever its status code

        Raises:
            LinkedinTransportError: If the provider could not be reached
            InsufficientScopeError: If scope verification is enabled and
                the current token lacks a required scope
        """
        ...

    def get_current_token(self) -> AccessToken | None:
        """Return the active credential, if any."""
        ...

    def set_current_token(self, token: AccessToken | None) -> None:
        """Replace the active credential."""
        ...

    def credential_scope(
        self, token: AccessToken, verify_scopes: bool = True
    ) -> AbstractAsyncContextManager[AccessToken]:
        """
        Temporarily install ``token`` and a scope verification policy.

        The previous token and policy are restored on exit, including
        when the body raises.
        """
        ...
