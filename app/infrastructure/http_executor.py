"""
httpx-based request executor.

This is a driven adapter that implements the RequestExecutor port
defined in the core domain.
"""

import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import AsyncIterator

import httpx

from app.core.domain import AccessToken, ApiRequest, ApiResponse
from app.integrations.linkedin.config import (
    LINKEDIN_API_PORT,
    LINKEDIN_HTTP_SCHEME,
    LinkedinConfig,
)
from app.integrations.linkedin.exceptions import (
    InsufficientScopeError,
    LinkedinTransportError,
)

logger = logging.getLogger(__name__)

# Temporary credentials per executor (keyed by id), local to the current task
_credential_overrides: ContextVar[dict[int, tuple[AccessToken, bool]]] = ContextVar(
    "linkedin_credential_overrides"
)


class HttpxRequestExecutor:
    """
    Concrete implementation of RequestExecutor using httpx.

    Holds the current credential for the configured application/user pair
    and, when enabled, checks that it carries the scopes a request declares.
    Temporary credentials installed with ``credential_scope`` live in a
    context variable, so they are only visible to the task that installed
    them.
    """

    def __init__(
        self,
        config: LinkedinConfig,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the executor.

        Args:
            config: LinkedIn configuration (API host, prefix, timeout)
            client: Optional shared AsyncClient; a short-lived client is
                opened per request otherwise
        """
        self._config = config
        self._client = client
        self._token: AccessToken | None = None
        self._verify_scopes = True

    def _get_override(self) -> tuple[AccessToken, bool] | None:
        return _credential_overrides.get({}).get(id(self))

    def get_current_token(self) -> AccessToken | None:
        override = self._get_override()
        if override is not None:
            return override[0]
        return self._token

    def set_current_token(self, token: AccessToken | None) -> None:
        self._token = token

    @property
    def verify_scopes(self) -> bool:
        """Whether scope verification runs before each call."""
        override = self._get_override()
        if override is not None:
            return override[1]
        return self._verify_scopes

    @verify_scopes.setter
    def verify_scopes(self, value: bool) -> None:
        self._verify_scopes = value

    @asynccontextmanager
    async def credential_scope(
        self, token: AccessToken, verify_scopes: bool = True
    ) -> AsyncIterator[AccessToken]:
        """
        Install ``token`` and a verification policy for the enclosed block.

        The previous credential and policy are back in effect as soon as the
        block exits, whether it returns or raises.
        """
        overrides = dict(_credential_overrides.get({}))
        overrides[id(self)] = (token, verify_scopes)
        reset_token = _credential_overrides.set(overrides)
        try:
            yield token
        finally:
            _credential_overrides.reset(reset_token)

    def build_url(self, request: ApiRequest) -> str:
        """Compose the absolute URL for a request."""
        hostname = request.hostname or self._config.hostname
        netloc = hostname
        if request.hostname is None and self._config.port != LINKEDIN_API_PORT:
            netloc = f"{hostname}:{self._config.port}"

        prefix = (
            self._config.path_prefix
            if request.path_prefix is None
            else request.path_prefix
        )
        parts = [p.strip("/") for p in (prefix, request.path) if p and p.strip("/")]
        return f"{LINKEDIN_HTTP_SCHEME}://{netloc}/{'/'.join(parts)}"

    def _check_scopes(self, request: ApiRequest) -> None:
        if not self.verify_scopes or not request.required_scopes:
            return

        token = self.get_current_token()
        granted = set(token.scopes) if token else set()
        missing = set(request.required_scopes) - granted
        if missing:
            raise InsufficientScopeError(missing)

    async def execute_request(self, request: ApiRequest) -> ApiResponse:
        """
        Send the request and return the raw response, whatever its status.

        Raises:
            InsufficientScopeError: If verification is enabled and the
                current token lacks a required scope
            LinkedinTransportError: On connection errors and timeouts
        """
        self._check_scopes(request)

        url = self.build_url(request)
        logger.debug(f"LinkedIn request: {request.method} {url}")

        try:
            if self._client is not None:
                response = await self._send(self._client, request, url)
            else:
                async with httpx.AsyncClient(
                    timeout=self._config.http_timeout
                ) as client:
                    response = await self._send(client, request, url)
        except httpx.RequestError as e:
            raise LinkedinTransportError(f"Network error: {e}") from e

        return ApiResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    async def _send(
        self, client: httpx.AsyncClient, request: ApiRequest, url: str
    ) -> httpx.Response:
        return await client.request(
            request.method,
            url,
            params=request.query or None,
            headers=request.headers,
            data=request.data,
        )

    async def aclose(self) -> None:
        """Close the shared client, if one was supplied."""
        if self._client is not None:
            await self._client.aclose()
