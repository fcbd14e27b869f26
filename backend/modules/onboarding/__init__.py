"""
Onboarding module.

A five-step wizard recording the user's current role, target role,
weekly hours and skills to skip.
"""

from .interfaces import IOnboardingService
from .models import (
    CurrentRole,
    TargetRole,
    OnboardingRecord,
    OnboardingStatus,
    CompleteOnboardingResult,
    UpdatePreferencesResult,
)
from .exceptions import (
    OnboardingNotStartedError,
    OnboardingIncompleteError,
    OnboardingNotFoundError,
    OnboardingNotCompletedError,
)

__all__ = [
    "IOnboardingService",
    "CurrentRole",
    "TargetRole",
    "OnboardingRecord",
    "OnboardingStatus",
    "CompleteOnboardingResult",
    "UpdatePreferencesResult",
    "OnboardingNotStartedError",
    "OnboardingIncompleteError",
    "OnboardingNotFoundError",
    "OnboardingNotCompletedError",
]
