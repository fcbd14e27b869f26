"""
Onboarding module interface.
"""

from typing import Protocol, runtime_checkable

from .models import (
    CompleteOnboardingResult,
    OnboardingRecord,
    OnboardingStatus,
    Step1Request,
    Step2Request,
    Step3Request,
    Step4Request,
    UpdatePreferencesRequest,
    UpdatePreferencesResult,
)


@runtime_checkable
class IOnboardingService(Protocol):
    """Interface for the onboarding wizard."""

    async def get_status(self, user_id: str) -> OnboardingStatus:
        """Current step (1-5), completion flag and stored answers."""
        ...

    async def save_step1(self, user_id: str, data: Step1Request) -> OnboardingRecord:
        """Save the current role, starting onboarding if needed."""
        ...

    async def save_step2(self, user_id: str, data: Step2Request) -> OnboardingRecord:
        ...

    async def save_step3(self, user_id: str, data: Step3Request) -> OnboardingRecord:
        ...

    async def save_step4(self, user_id: str, data: Step4Request) -> OnboardingRecord:
        ...

    async def complete(self, user_id: str) -> CompleteOnboardingResult:
        """
        Mark onboarding complete. Calling it again is a no-op.

        Raises:
            ValidationError: If onboarding wasn't started or a step is missing
        """
        ...

    async def update_preferences(
        self,
        user_id: str,
        data: UpdatePreferencesRequest,
    ) -> UpdatePreferencesResult:
        """
        Replace every answer after onboarding has been completed.

        Raises:
            NotFoundError: If the user never started onboarding
            ValidationError: If onboarding isn't complete yet
        """
        ...

    async def has_completed(self, user_id: str) -> bool:
        ...
