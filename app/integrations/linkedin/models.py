"""
LinkedIn response models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Profile(BaseModel):
    """
    Read-only view over a ``people/~`` response.

    Accessors never raise; a field missing from the response reads as None.
    """

    id: str | None = Field(default=None, description="LinkedIn member ID")
    last_name: str | None = Field(
        default=None, alias="lastName", description="Member last name"
    )

    # Original response, kept for fields without an accessor
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("id", "last_name", mode="before")
    @classmethod
    def coerce_to_str(cls, v):
        if v is None:
            return None
        return str(v)

    @classmethod
    def from_json(cls, data: Any) -> "Profile":
        """
        Create a Profile from the decoded response body.

        Args:
            data: Decoded JSON; anything other than an object yields an
                empty profile

        Returns:
            Profile instance
        """
        if not isinstance(data, dict):
            data = {}
        return cls(id=data.get("id"), last_name=data.get("lastName"), raw=dict(data))

    def get_id(self) -> str | None:
        return self.id

    def get_last_name(self) -> str | None:
        return self.last_name

    def get_json(self) -> dict[str, Any]:
        return self.raw
