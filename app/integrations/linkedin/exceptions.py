"""
LinkedIn integration exceptions.

Transport, provider and protocol failures are kept apart so callers can
tell "could not reach LinkedIn" from "LinkedIn rejected the request".
"""

from typing import Any


class LinkedinError(Exception):
    """Base exception for LinkedIn errors."""

    pass


class LinkedinConfigurationError(LinkedinError):
    """Required client configuration is missing."""

    pass


class LinkedinTransportError(LinkedinError):
    """Network, connection or timeout failure talking to LinkedIn."""

    pass


class LinkedinProviderError(LinkedinError):
    """
    LinkedIn answered with a non-success status and a JSON error body.

    The decoded body is kept on ``payload`` so callers can inspect the
    provider's own error code (e.g. ``invalid_grant``).
    """

    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"LinkedIn returned {status_code}: {payload}")

    @property
    def error(self) -> str | None:
        """Provider error code, if the payload carries one."""
        if isinstance(self.payload, dict):
            return self.payload.get("error")
        return None

    @property
    def description(self) -> str | None:
        """Provider error description, if the payload carries one."""
        if isinstance(self.payload, dict):
            return self.payload.get("error_description") or self.payload.get(
                "message"
            )
        return None


class LinkedinProtocolError(LinkedinError):
    """Response body could not be decoded as JSON."""

    pass


class LinkedinNotConnectedError(LinkedinError):
    """An API call was attempted without a current access token."""

    pass


class InsufficientScopeError(LinkedinError):
    """Current token was not granted the scopes a request requires."""

    def __init__(self, missing: set[str]):
        self.missing = missing
        super().__init__(f"Access token is missing scopes: {sorted(missing)}")
