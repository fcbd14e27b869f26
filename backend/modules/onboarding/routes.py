"""
Onboarding API endpoints.

All endpoints require an authenticated user and act on that user's answers.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_onboarding_service
from api.middleware.auth import require_auth
from shared.models import AuthenticatedUser

from .interfaces import IOnboardingService
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

router = APIRouter()


@router.get("", response_model=OnboardingStatus)
async def get_onboarding_status(
    user: AuthenticatedUser = Depends(require_auth),
    service: IOnboardingService = Depends(get_onboarding_service),
) -> OnboardingStatus:
    """Get the current onboarding step and saved answers."""
    return await service.get_status(user.id)


@router.patch("/step/1", response_model=OnboardingRecord)
async def save_step1(
    request: Step1Request,
    user: AuthenticatedUser = Depends(require_auth),
    service: IOnboardingService = Depends(get_onboarding_service),
) -> OnboardingRecord:
    """Save the current role. Starts onboarding if it hasn't been started."""
    return await service.save_step1(user.id, request)


@router.patch("/step/2", response_model=OnboardingRecord)
async def save_step2(
    request: Step2Request,
    user: AuthenticatedUser = Depends(require_auth),
    service: IOnboardingService = Depends(get_onboarding_service),
) -> OnboardingRecord:
    """Save the target role."""
    return await service.save_step2(user.id, request)


@router.patch("/step/3", response_model=OnboardingRecord)
async def save_step3(
    request: Step3Request,
    user: AuthenticatedUser = Depends(require_auth),
    service: IOnboardingService = Depends(get_onboarding_service),
) -> OnboardingRecord:
    """Save the weekly time budget."""
    return await service.save_step3(user.id, request)


@router.patch("/step/4", response_model=OnboardingRecord)
async def save_step4(
    request: Step4Request,
    user: AuthenticatedUser = Depends(require_auth),
    service: IOnboardingService = Depends(get_onboarding_service),
) -> OnboardingRecord:
    """Save skills to skip."""
    return await service.save_step4(user.id, request)


@router.post("/complete", response_model=CompleteOnboardingResult)
async def complete_onboarding(
    user: AuthenticatedUser = Depends(require_auth),
    service: IOnboardingService = Depends(get_onboarding_service),
) -> CompleteOnboardingResult:
    """Finish onboarding. Safe to call more than once."""
    return await service.complete(user.id)


@router.put("/preferences", response_model=UpdatePreferencesResult)
async def update_preferences(
    request: UpdatePreferencesRequest,
    user: AuthenticatedUser = Depends(require_auth),
    service: IOnboardingService = Depends(get_onboarding_service),
) -> UpdatePreferencesResult:
    """Change answers after onboarding has been completed."""
    return await service.update_preferences(user.id, request)
