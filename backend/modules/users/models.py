"""
User profile data models.
"""

from typing import Optional

from pydantic import Field, HttpUrl, field_validator

from shared.models import CamelModel


class UserProfile(CamelModel):
    """The parts of a user a profile page shows."""

    id: str
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    email_verified: bool = False


class UpdateProfileRequest(CamelModel):
    """
    Partial profile update.

    Omitted fields are left alone; avatarUrl may be sent as null to clear it.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar_url: Optional[HttpUrl] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("Name cannot be null")
        return value

    def changes(self) -> dict:
        """Only the fields the client actually sent, as column values."""
        fields = {}
        if "name" in self.model_fields_set:
            fields["name"] = self.name
        if "avatar_url" in self.model_fields_set:
            fields["avatar_url"] = str(self.avatar_url) if self.avatar_url is not None else None
        return fields
