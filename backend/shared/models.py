"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class UserRole(str, Enum):
    """Access roles stored on the user record."""

    FREE = "free"
    PRO = "pro"
    ADMIN = "admin"


class SubscriptionPlan(str, Enum):
    """Plans a subscription can be on."""

    FREE = "free"
    PRO = "pro"


class SubscriptionStatus(str, Enum):
    """Stored lifecycle state of a subscription."""

    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class SubscriptionSnapshot(BaseModel):
    """The parts of a subscription row needed for access decisions."""

    plan: SubscriptionPlan = SubscriptionPlan.FREE
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, from_attributes=True)


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    Built by the auth middleware from a verified access token plus the
    user's database row, then handed explicitly to route handlers via
    dependency injection. It is never stored on the request.
    """

    id: str = Field(..., description="User ID (UUID)")
    email: str = Field(..., description="User's email address")
    name: Optional[str] = Field(None, description="Display name")
    avatar_url: Optional[str] = Field(None, description="Avatar URL")
    role: UserRole = Field(default=UserRole.FREE, description="User role")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    created_at: datetime = Field(..., description="Account creation time")
    subscription: Optional[SubscriptionSnapshot] = Field(
        None, description="Subscription row, if any"
    )

    model_config = ConfigDict(
        frozen=True,  # Make immutable for safety
        from_attributes=True,
    )
