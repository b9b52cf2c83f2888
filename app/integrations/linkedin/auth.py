"""
LinkedIn OAuth2 authorization-code handshake.

Covers the steps from building the consent URL to exchanging the code:
- State generation (CSRF protection)
- Authorization URL construction
- Code/state extraction from the callback URL
- Code exchange at the token endpoint
"""

import json
import secrets
from typing import Any
from urllib.parse import parse_qs, quote, urlparse

from pydantic import ValidationError

from app.core.domain import AccessToken, ApiRequest, ApiResponse, HandshakeState
from app.core.ports import RequestExecutor
from app.integrations.linkedin.config import (
    LINKEDIN_AUTH_HOSTNAME,
    LINKEDIN_AUTHORIZE_PATH,
    LINKEDIN_HTTP_SCHEME,
    LINKEDIN_TOKEN_PATH,
    LinkedinConfig,
)
from app.integrations.linkedin.exceptions import (
    LinkedinProtocolError,
    LinkedinProviderError,
)


STATE_BYTES = 16

AUTHORIZE_URL = f"{LINKEDIN_HTTP_SCHEME}://{LINKEDIN_AUTH_HOSTNAME}/{LINKEDIN_AUTHORIZE_PATH}"

# Header LinkedIn uses to select the response format
FORMAT_HEADER = "x-li-format"
FORMAT_JSON = "json"


def generate_state() -> str:
    """Return a fresh 128-bit random state as lowercase hex."""
    return secrets.token_hex(STATE_BYTES)


def format_scopes(scopes: str) -> str:
    """Turn comma-separated scopes into the space-escaped ``scope`` value."""
    return "%20".join(
        quote(s.strip(), safe="") for s in scopes.split(",") if s.strip()
    )


def build_authorization_url(
    scopes: str | None, config: LinkedinConfig
) -> tuple[str, HandshakeState]:
    """
    Build the URL the user is sent to for consent.

    A new state is generated on every call; the returned HandshakeState
    replaces whatever attempt the caller had pending.

    Args:
        scopes: Comma-separated scopes (configured scopes if empty)
        config: Client configuration

    Returns:
        Tuple of (authorization URL, HandshakeState)

    Raises:
        LinkedinConfigurationError: If app_id or redirect_uri is missing
    """
    config.validate()

    scopes = scopes or config.scopes
    handshake = HandshakeState(csrf_token=generate_state(), scopes=scopes)

    query = "&".join(
        [
            "response_type=code",
            f"redirect_uri={quote(str(config.redirect_uri), safe='')}",
            f"client_id={quote(str(config.app_id), safe='')}",
            f"state={handshake.csrf_token}",
            f"scope={format_scopes(scopes)}",
        ]
    )
    return f"{AUTHORIZE_URL}?{query}", handshake


def _query_param(callback_url: str, name: str) -> str | None:
    values = parse_qs(urlparse(callback_url).query).get(name)
    if not values:
        return None
    return values[0]


def extract_code(callback_url: str) -> str | None:
    """
    Get the authorization code from the callback URL.

    Returns None when the provider did not send one (user denied consent or
    the callback is malformed).
    """
    return _query_param(callback_url, "code")


def extract_state(callback_url: str) -> str | None:
    """Get the echoed state from the callback URL, if present."""
    return _query_param(callback_url, "state")


def extract_error(callback_url: str) -> str | None:
    """Get the provider's error indicator (e.g. ``access_denied``), if any."""
    return _query_param(callback_url, "error")


def decode_json(response: ApiResponse) -> Any:
    """
    Decode a response body.

    Raises:
        LinkedinProtocolError: If the body is not valid JSON
    """
    try:
        return json.loads(response.text)
    except ValueError as e:
        raise LinkedinProtocolError(
            f"LinkedIn returned a non-JSON body (status {response.status_code})"
        ) from e


async def exchange_code(
    code: str, config: LinkedinConfig, executor: RequestExecutor
) -> dict[str, Any]:
    """
    Exchange an authorization code for access token data.

    Args:
        code: Authorization code from the callback
        config: Client configuration
        executor: Request executor used for the POST

    Returns:
        Decoded token response (``access_token``, ``expires_in``, ...)

    Raises:
        LinkedinConfigurationError: If app_id, redirect_uri or app_secret is missing
        LinkedinTransportError: If LinkedIn could not be reached
        LinkedinProviderError: If LinkedIn rejected the exchange
        LinkedinProtocolError: If the response body is not JSON
    """
    config.validate(require_secret=True)

    request = ApiRequest(
        method="POST",
        path=LINKEDIN_TOKEN_PATH,
        hostname=LINKEDIN_AUTH_HOSTNAME,
        path_prefix="",
        data={
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": config.redirect_uri,
            "client_id": config.app_id,
            "client_secret": config.app_secret,
        },
        headers={FORMAT_HEADER: FORMAT_JSON},
    )

    response = await executor.execute_request(request)
    data = decode_json(response)

    if not response.ok:
        raise LinkedinProviderError(response.status_code, data)

    if not isinstance(data, dict):
        raise LinkedinProtocolError("Token response is not a JSON object")
    return data


def access_token_from_data(data: dict[str, Any]) -> str | None:
    return data.get("access_token")


def token_type_from_data(data: dict[str, Any]) -> str:
    # LinkedIn's token type is not used when calling the API
    return ""


def token_from_data(data: dict[str, Any]) -> AccessToken:
    """
    Build an AccessToken from a successful exchange response.

    Raises:
        LinkedinProtocolError: If the response carries no access token or
            its fields have unexpected types
    """
    value = access_token_from_data(data)
    if not value:
        raise LinkedinProtocolError("Token response has no access_token")

    scope = data.get("scope") or ""
    if isinstance(scope, list):
        scope = " ".join(str(s) for s in scope)
    elif not isinstance(scope, str):
        raise LinkedinProtocolError("Token response has an invalid scope")

    try:
        return AccessToken(
            access_token=value,
            token_type=token_type_from_data(data),
            expires_in=data.get("expires_in"),
            scopes=[s for s in scope.replace(",", " ").split() if s],
        )
    except ValidationError as e:
        raise LinkedinProtocolError(f"Invalid token response: {e}") from e
