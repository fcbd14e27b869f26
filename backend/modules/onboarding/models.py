"""
Onboarding module data models.

The wizard has four input steps followed by a final "complete" step.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from shared.models import CamelModel

TOTAL_STEPS = 5
WEEKLY_HOURS_OPTIONS = (5, 10, 15, 20)
CUSTOM_ROLE_MIN_LENGTH = 2


class CurrentRole(str, Enum):
    """What the user does today."""

    BACKEND_DEVELOPER = "backend_developer"
    DEVOPS_ENGINEER = "devops_engineer"
    DATA_ANALYST = "data_analyst"
    QA_ENGINEER = "qa_engineer"
    IT_PROFESSIONAL = "it_professional"
    OTHER = "other"


class TargetRole(str, Enum):
    """The role the learning path aims at."""

    ML_ENGINEER = "ml_engineer"
    DATA_SCIENTIST = "data_scientist"
    MLOPS_ENGINEER = "mlops_engineer"
    AI_ENGINEER = "ai_engineer"


def _check_custom_role(current_role: CurrentRole, custom_role_text: Optional[str]) -> Optional[str]:
    if current_role != CurrentRole.OTHER:
        return None
    text = (custom_role_text or "").strip()
    if len(text) < CUSTOM_ROLE_MIN_LENGTH:
        raise ValueError('Custom role text is required when selecting "Other"')
    return text


def _check_weekly_hours(value: int) -> int:
    if value not in WEEKLY_HOURS_OPTIONS:
        raise ValueError("Weekly hours must be 5, 10, 15, or 20")
    return value


def _check_skill_ids(values: list[str]) -> list[str]:
    result = []
    for value in values:
        try:
            result.append(str(uuid.UUID(value)))
        except (ValueError, AttributeError, TypeError):
            raise ValueError("Invalid skill ID")
    return result


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class Step1Request(CamelModel):
    """Current role. customRoleText is required for "other"."""

    current_role: CurrentRole
    custom_role_text: Optional[str] = Field(None, max_length=100)

    @model_validator(mode="after")
    def _custom_role(self) -> "Step1Request":
        self.custom_role_text = _check_custom_role(self.current_role, self.custom_role_text)
        return self


class Step2Request(CamelModel):
    """Target role."""

    target_role: TargetRole


class Step3Request(CamelModel):
    """Weekly time budget in hours."""

    weekly_hours: int

    @field_validator("weekly_hours")
    @classmethod
    def _weekly_hours(cls, value: int) -> int:
        return _check_weekly_hours(value)


class Step4Request(CamelModel):
    """Skills the user already has. May be empty."""

    skills_to_skip: list[str] = Field(default_factory=list)

    @field_validator("skills_to_skip")
    @classmethod
    def _skill_ids(cls, value: list[str]) -> list[str]:
        return _check_skill_ids(value)


class UpdatePreferencesRequest(CamelModel):
    """Replaces every onboarding answer at once."""

    current_role: CurrentRole
    custom_role_text: Optional[str] = Field(None, max_length=100)
    target_role: TargetRole
    weekly_hours: int
    skills_to_skip: list[str] = Field(default_factory=list)

    @field_validator("weekly_hours")
    @classmethod
    def _weekly_hours(cls, value: int) -> int:
        return _check_weekly_hours(value)

    @field_validator("skills_to_skip")
    @classmethod
    def _skill_ids(cls, value: list[str]) -> list[str]:
        return _check_skill_ids(value)

    @model_validator(mode="after")
    def _custom_role(self) -> "UpdatePreferencesRequest":
        self.custom_role_text = _check_custom_role(self.current_role, self.custom_role_text)
        return self


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------


class OnboardingRecord(CamelModel):
    """A user's stored onboarding answers."""

    id: str
    user_id: str
    current_role: Optional[CurrentRole] = None
    custom_role_text: Optional[str] = None
    target_role: Optional[TargetRole] = None
    weekly_hours: Optional[int] = None
    skills_to_skip: list[str] = Field(default_factory=list)
    completed_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OnboardingStatus(CamelModel):
    """Progress through the wizard."""

    is_complete: bool
    current_step: int = Field(..., ge=1, le=TOTAL_STEPS)
    total_steps: int = TOTAL_STEPS
    response: Optional[OnboardingRecord] = None


class CompleteOnboardingResult(CamelModel):
    """Returned by POST /onboarding/complete."""

    onboarding_response: OnboardingRecord
    roadmap_id: Optional[str] = None


class UpdatePreferencesResult(CamelModel):
    """Returned by PUT /onboarding/preferences."""

    onboarding_response: OnboardingRecord
    roadmap_regenerated: bool = False
    new_roadmap_id: Optional[str] = None
    preserved_modules_count: int = 0
