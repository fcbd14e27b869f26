"""
Onboarding service implementation.

Each step upserts the user's single onboarding row. The current step is
inferred from which answers are present.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.database import get_session_factory, utcnow
from shared.tables import OnboardingResponse

from .exceptions import (
    OnboardingIncompleteError,
    OnboardingNotCompletedError,
    OnboardingNotFoundError,
    OnboardingNotStartedError,
)
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
from .repository import OnboardingRepository

logger = logging.getLogger(__name__)


def calculate_current_step(response: Optional[OnboardingResponse]) -> int:
    """
    Which step the wizard should show.

    Step 4 (skills to skip) is optional, so an empty list only keeps the
    user on step 4 until onboarding is completed.
    """
    if response is None or not response.current_role:
        return 1
    if not response.target_role:
        return 2
    if not response.weekly_hours:
        return 3
    if not response.skills_to_skip and response.completed_at is None:
        return 4
    return 5


class OnboardingService(IOnboardingService):
    """Implementation of the onboarding wizard."""

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self._session_factory = session_factory or get_session_factory()

    async def get_status(self, user_id: str) -> OnboardingStatus:
        async with self._session_factory() as session:
            row = await OnboardingRepository(session).get_by_user(user_id)

        return OnboardingStatus(
            is_complete=row is not None and row.completed_at is not None,
            current_step=calculate_current_step(row),
            response=OnboardingRecord.model_validate(row) if row is not None else None,
        )

    async def has_completed(self, user_id: str) -> bool:
        async with self._session_factory() as session:
            row = await OnboardingRepository(session).get_by_user(user_id)
        return row is not None and row.completed_at is not None

    async def save_step1(self, user_id: str, data: Step1Request) -> OnboardingRecord:
        fields = {
            "current_role": data.current_role.value,
            "custom_role_text": data.custom_role_text,
        }
        async with self._session_factory() as session:
            async with session.begin():
                row = await OnboardingRepository(session).upsert(user_id, fields)

        logger.info("Onboarding step 1 saved for user %s", user_id)
        return OnboardingRecord.model_validate(row)

    async def _update_started(self, user_id: str, step: int, fields: dict) -> OnboardingRecord:
        async with self._session_factory() as session:
            async with session.begin():
                repository = OnboardingRepository(session)
                row = await repository.get_by_user(user_id)
                if row is None:
                    raise OnboardingNotStartedError()
                row = await repository.update(row, fields)

        logger.info("Onboarding step %d saved for user %s", step, user_id)
        return OnboardingRecord.model_validate(row)

    async def save_step2(self, user_id: str, data: Step2Request) -> OnboardingRecord:
        return await self._update_started(user_id, 2, {"target_role": data.target_role.value})

    async def save_step3(self, user_id: str, data: Step3Request) -> OnboardingRecord:
        return await self._update_started(user_id, 3, {"weekly_hours": data.weekly_hours})

    async def save_step4(self, user_id: str, data: Step4Request) -> OnboardingRecord:
        return await self._update_started(user_id, 4, {"skills_to_skip": data.skills_to_skip})

    async def complete(self, user_id: str) -> CompleteOnboardingResult:
        async with self._session_factory() as session:
            async with session.begin():
                repository = OnboardingRepository(session)
                row = await repository.get_by_user(user_id)
                if row is None:
                    raise OnboardingNotStartedError(
                        "Onboarding not started. Please complete all steps first."
                    )
                if not row.current_role:
                    raise OnboardingIncompleteError(1, "Current role")
                if not row.target_role:
                    raise OnboardingIncompleteError(2, "Target role")
                if not row.weekly_hours:
                    raise OnboardingIncompleteError(3, "Weekly hours")

                if row.completed_at is not None:
                    logger.info("Onboarding already completed for user %s", user_id)
                else:
                    row = await repository.update(row, {"completed_at": utcnow()})
                    logger.info(
                        "Onboarding completed for user %s (target=%s, hours=%s, skipped=%d)",
                        user_id,
                        row.target_role,
                        row.weekly_hours,
                        len(row.skills_to_skip or []),
                    )

        # TODO: return the generated roadmap id once roadmap generation exists
        return CompleteOnboardingResult(
            onboarding_response=OnboardingRecord.model_validate(row),
            roadmap_id=None,
        )

    async def update_preferences(
        self,
        user_id: str,
        data: UpdatePreferencesRequest,
    ) -> UpdatePreferencesResult:
        fields = {
            "current_role": data.current_role.value,
            "custom_role_text": data.custom_role_text,
            "target_role": data.target_role.value,
            "weekly_hours": data.weekly_hours,
            "skills_to_skip": data.skills_to_skip,
        }
        async with self._session_factory() as session:
            async with session.begin():
                repository = OnboardingRepository(session)
                row = await repository.get_by_user(user_id)
                if row is None:
                    raise OnboardingNotFoundError()
                if row.completed_at is None:
                    raise OnboardingNotCompletedError()
                row = await repository.update(row, fields)

        logger.info("Preferences updated for user %s", user_id)
        return UpdatePreferencesResult(
            onboarding_response=OnboardingRecord.model_validate(row),
            roadmap_regenerated=False,
            new_roadmap_id=None,
            preserved_modules_count=0,
        )

