"""
Domain exceptions for the OAuth handshake.

These exceptions are caught by the OAuth router and mapped to HTTP
responses there.
"""


class AuthorizationDeniedError(Exception):
    """
    Raised when the callback carries no authorization code.

    This happens when the user declines consent or the callback URL is
    malformed. ``error`` holds the provider's error indicator, if any.
    """

    def __init__(self, error: str | None = None):
        self.error = error
        super().__init__(f"Authorization not granted: {error or 'no code in callback'}")
