"""
Core service for handling OAuth 2.0 authorization flows.
"""

import hmac
import logging
from dataclasses import dataclass
from typing import Protocol

from authlib.integrations.base_client import MismatchingStateError

from app.core.domain import AccessToken, HandshakeState
from app.core.exceptions import AuthorizationDeniedError


logger = logging.getLogger(__name__)


class OAuthProvider(Protocol):
    """A protocol for an OAuth provider."""

    name: str

    def authorization_url(self, scopes: str | None = None) -> tuple[str, HandshakeState]:
        """Build the consent URL and the state to keep until the callback."""
        ...

    def parse_callback(self, callback_url: str) -> tuple[str | None, str | None, str | None]:
        """Return (code, state, error) from the callback URL."""
        ...

    async def exchange_code(self, code: str) -> AccessToken:
        """Exchange the authorization code for an access token."""
        ...

    async def label_for_token(self, token: AccessToken) -> str | None:
        """Resolve a human-recognizable label for a new token."""
        ...

    def activate_token(self, token: AccessToken | None) -> None:
        """Make the token the current credential for API calls."""
        ...


@dataclass(frozen=True)
class ConnectedAccount:
    """Outcome of a completed authorization."""

    provider: str
    token: AccessToken
    label: str | None


def verify_state(handshake: HandshakeState | None, returned_state: str | None) -> None:
    """
    Compare the state echoed by the provider with the pending handshake.

    Raises:
        MismatchingStateError: If nothing is pending, no state came back,
            or the values differ
    """
    if handshake is None or not returned_state:
        raise MismatchingStateError()
    if not hmac.compare_digest(
        handshake.csrf_token.encode(), returned_state.encode()
    ):
        raise MismatchingStateError()


class OAuthService:
    """
    A service for handling OAuth 2.0 flows with different providers.

    Holds no per-attempt state: the HandshakeState returned by ``login``
    must be passed back into ``auth``.
    """

    def __init__(self, provider: OAuthProvider):
        self.provider = provider

    def login(self, scopes: str | None = None) -> tuple[str, HandshakeState]:
        """Initiate the OAuth 2.0 login flow."""
        return self.provider.authorization_url(scopes)

    async def auth(
        self, callback_url: str, handshake: HandshakeState | None
    ) -> ConnectedAccount:
        """
        Handle the OAuth 2.0 callback.

        Verifies the state, exchanges the code, labels the new token with
        the account identity and makes it the current credential.

        Raises:
            MismatchingStateError: If the state does not match the handshake
            AuthorizationDeniedError: If the callback has no code
        """
        code, state, error = self.provider.parse_callback(callback_url)

        verify_state(handshake, state)

        if code is None:
            raise AuthorizationDeniedError(error)

        token = await self.provider.exchange_code(code)
        label = await self.provider.label_for_token(token)

        if not token.scopes and handshake is not None and handshake.scopes:
            # Provider did not report granted scopes; use the consented ones
            token = token.with_scopes(
                [s.strip() for s in handshake.scopes.split(",") if s.strip()]
            )

        self.provider.activate_token(token)

        logger.info(
            f"Authorized {self.provider.name} account",
            extra={"provider": self.provider.name, "label": label},
        )
        return ConnectedAccount(provider=self.provider.name, token=token, label=label)
