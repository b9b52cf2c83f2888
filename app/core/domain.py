"""
Core domain models for the OAuth2 handshake and API requests.

These models are independent of any HTTP library or web framework.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class HandshakeState:
    """
    Pending authorization attempt.

    Created when the authorization URL is built and handed back to the
    caller, who keeps it (e.g. in the session) until the provider redirects
    to the callback. A new attempt produces a new HandshakeState, which
    supersedes the old one.
    """

    csrf_token: str
    scopes: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_session(self) -> dict[str, Any]:
        """Serialize for storage in a signed session cookie."""
        return {
            "csrf_token": self.csrf_token,
            "scopes": self.scopes,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_session(cls, data: dict[str, Any] | None) -> "HandshakeState | None":
        """Restore from session data, or None if nothing is pending."""
        if not data or not data.get("csrf_token"):
            return None
        created_at = data.get("created_at")
        return cls(
            csrf_token=data["csrf_token"],
            scopes=data.get("scopes", ""),
            created_at=(
                datetime.fromisoformat(created_at)
                if created_at
                else datetime.now(UTC)
            ),
        )


class AccessToken(BaseModel):
    """
    OAuth2 access token obtained from a successful code exchange.

    There is no expiry tracking or refresh; a token is valid until it is
    replaced.
    """

    access_token: str = Field(description="OAuth2 access token")
    token_type: str = Field(default="", description="Token type (unused)")
    expires_in: int | None = Field(
        default=None, description="Lifetime in seconds, as reported"
    )
    scopes: list[str] = Field(
        default_factory=list, description="Scopes granted to this token"
    )

    model_config = ConfigDict(frozen=True)

    def with_scopes(self, scopes: list[str]) -> "AccessToken":
        """Copy of this token carrying the given granted scopes."""
        return self.model_copy(update={"scopes": list(scopes)})


@dataclass
class ApiRequest:
    """
    Outbound API request.

    Built fresh for every call and augmented in place by request
    decoration before it reaches the executor. ``hostname`` and
    ``path_prefix`` override the executor defaults when set.
    """

    method: str
    path: str
    query: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    data: dict[str, Any] | None = None
    hostname: str | None = None
    path_prefix: str | None = None
    required_scopes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ApiResponse:
    """Raw response returned by a request executor."""

    status_code: int
    text: str
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status_code == 200
