"""
OAuth 2.0 provider implementations.
"""

from app.core.domain import AccessToken, HandshakeState
from app.core.ports import RequestExecutor
from app.integrations.linkedin import auth
from app.integrations.linkedin.client import LinkedinClient
from app.integrations.linkedin.config import LinkedinConfig


class LinkedinOAuthProvider:
    """OAuth provider for LinkedIn."""

    def __init__(self, config: LinkedinConfig, executor: RequestExecutor):
        self.name = "linkedin"
        self._config = config
        self._executor = executor
        self._client = LinkedinClient(executor, config)

    def authorization_url(
        self, scopes: str | None = None
    ) -> tuple[str, HandshakeState]:
        return auth.build_authorization_url(scopes, self._config)

    def parse_callback(
        self, callback_url: str
    ) -> tuple[str | None, str | None, str | None]:
        return (
            auth.extract_code(callback_url),
            auth.extract_state(callback_url),
            auth.extract_error(callback_url),
        )

    async def exchange_code(self, code: str) -> AccessToken:
        data = await auth.exchange_code(code, self._config, self._executor)
        return auth.token_from_data(data)

    async def label_for_token(self, token: AccessToken) -> str | None:
        return await self._client.label_for_token(token)

    def activate_token(self, token: AccessToken | None) -> None:
        self._executor.set_current_token(token)
