import uuid

import pytest

from modules.onboarding.exceptions import (
    OnboardingIncompleteError,
    OnboardingNotCompletedError,
    OnboardingNotFoundError,
    OnboardingNotStartedError,
)
from modules.onboarding.models import (
    TOTAL_STEPS,
    CurrentRole,
    Step1Request,
    Step2Request,
    Step3Request,
    Step4Request,
    TargetRole,
    UpdatePreferencesRequest,
)
from modules.onboarding.service import OnboardingService, calculate_current_step
from shared.database import as_utc

USER_ID = "user-123"


class TestOnboardingService:
    @pytest.fixture
    def service(self, session_factory):
        return OnboardingService(session_factory=session_factory)

    async def _answer_required_steps(self, service) -> None:
        await service.save_step1(USER_ID, Step1Request(current_role="backend_developer"))
        await service.save_step2(USER_ID, Step2Request(target_role="ml_engineer"))
        await service.save_step3(USER_ID, Step3Request(weekly_hours=10))

    @pytest.mark.asyncio
    async def test_status_before_starting(self, service):
        status = await service.get_status(USER_ID)
        assert status.is_complete is False
        assert status.current_step == 1
        assert status.total_steps == TOTAL_STEPS
        assert status.response is None

    @pytest.mark.asyncio
    async def test_step1_starts_onboarding(self, service):
        record = await service.save_step1(
            USER_ID, Step1Request(current_role="other", custom_role_text="Designer")
        )
        assert record.user_id == USER_ID
        assert record.current_role == CurrentRole.OTHER
        assert record.custom_role_text == "Designer"
        assert record.target_role is None
        assert record.weekly_hours is None
        assert record.skills_to_skip == []

        status = await service.get_status(USER_ID)
        assert status.current_step == 2

    @pytest.mark.asyncio
    async def test_step1_again_updates_same_row(self, service):
        first = await service.save_step1(USER_ID, Step1Request(current_role="qa_engineer"))
        second = await service.save_step1(USER_ID, Step1Request(current_role="data_analyst"))
        assert first.id == second.id
        assert second.current_role == CurrentRole.DATA_ANALYST

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,data",
        [
            ("save_step2", Step2Request(target_role="ml_engineer")),
            ("save_step3", Step3Request(weekly_hours=5)),
            ("save_step4", Step4Request()),
        ],
    )
    async def test_later_steps_need_step1(self, service, method, data):
        with pytest.raises(OnboardingNotStartedError):
            await getattr(service, method)(USER_ID, data)

    @pytest.mark.asyncio
    async def test_steps_advance(self, service):
        await self._answer_required_steps(service)
        status = await service.get_status(USER_ID)
        assert status.current_step == 4

        skill = str(uuid.uuid4())
        record = await service.save_step4(USER_ID, Step4Request(skills_to_skip=[skill]))
        assert record.skills_to_skip == [skill]
        assert (await service.get_status(USER_ID)).current_step == 5

    @pytest.mark.asyncio
    async def test_complete(self, service):
        await self._answer_required_steps(service)

        result = await service.complete(USER_ID)

        assert result.onboarding_response.completed_at is not None
        assert result.roadmap_id is None
        status = await service.get_status(USER_ID)
        assert status.is_complete is True
        assert status.current_step == 5
        assert await service.has_completed(USER_ID) is True

    @pytest.mark.asyncio
    async def test_complete_is_idempotent(self, service):
        await self._answer_required_steps(service)
        first = await service.complete(USER_ID)
        second = await service.complete(USER_ID)
        assert as_utc(second.onboarding_response.completed_at) == as_utc(
            first.onboarding_response.completed_at
        )

    @pytest.mark.asyncio
    async def test_complete_not_started(self, service):
        with pytest.raises(OnboardingNotStartedError):
            await service.complete(USER_ID)

    @pytest.mark.asyncio
    async def test_complete_missing_answer(self, service):
        await service.save_step1(USER_ID, Step1Request(current_role="backend_developer"))
        await service.save_step2(USER_ID, Step2Request(target_role="ml_engineer"))

        with pytest.raises(OnboardingIncompleteError) as exc_info:
            await service.complete(USER_ID)
        assert exc_info.value.message == "Weekly hours is required. Please complete Step 3."
        assert exc_info.value.details == {"step": 3}
        assert await service.has_completed(USER_ID) is False

    @pytest.mark.asyncio
    async def test_update_preferences(self, service):
        await self._answer_required_steps(service)
        await service.complete(USER_ID)

        result = await service.update_preferences(
            USER_ID,
            UpdatePreferencesRequest(
                current_role="data_analyst",
                target_role="data_scientist",
                weekly_hours=20,
            ),
        )

        assert result.onboarding_response.target_role == TargetRole.DATA_SCIENTIST
        assert result.onboarding_response.weekly_hours == 20
        assert result.roadmap_regenerated is False
        assert result.new_roadmap_id is None
        assert result.preserved_modules_count == 0

    @pytest.mark.asyncio
    async def test_update_preferences_without_onboarding(self, service):
        data = UpdatePreferencesRequest(
            current_role="data_analyst", target_role="data_scientist", weekly_hours=20
        )
        with pytest.raises(OnboardingNotFoundError):
            await service.update_preferences(USER_ID, data)

    @pytest.mark.asyncio
    async def test_update_preferences_before_completion(self, service):
        await self._answer_required_steps(service)
        data = UpdatePreferencesRequest(
            current_role="data_analyst", target_role="data_scientist", weekly_hours=20
        )
        with pytest.raises(OnboardingNotCompletedError):
            await service.update_preferences(USER_ID, data)


class TestCalculateCurrentStep:
    def test_none(self):
        assert calculate_current_step(None) == 1
