import uuid

import pytest
from pydantic import ValidationError

from modules.onboarding.models import (
    CurrentRole,
    Step1Request,
    Step3Request,
    Step4Request,
    TargetRole,
    UpdatePreferencesRequest,
)


class TestStep1Request:
    def test_plain_role_drops_custom_text(self):
        request = Step1Request(current_role="backend_developer", custom_role_text="ignored")
        assert request.current_role == CurrentRole.BACKEND_DEVELOPER
        assert request.custom_role_text is None

    def test_other_requires_custom_text(self):
        with pytest.raises(ValidationError) as exc_info:
            Step1Request(current_role="other")
        assert 'selecting "Other"' in str(exc_info.value)

    def test_other_custom_text_too_short(self):
        with pytest.raises(ValidationError):
            Step1Request(current_role="other", custom_role_text=" x ")

    def test_other_custom_text_is_trimmed(self):
        request = Step1Request.model_validate({"currentRole": "other", "customRoleText": "  Designer "})
        assert request.custom_role_text == "Designer"

    def test_unknown_role(self):
        with pytest.raises(ValidationError):
            Step1Request(current_role="astronaut")


class TestStep3Request:
    @pytest.mark.parametrize("hours", [5, 10, 15, 20])
    def test_allowed_hours(self, hours):
        assert Step3Request(weekly_hours=hours).weekly_hours == hours

    @pytest.mark.parametrize("hours", [0, 4, 12, 25])
    def test_other_hours_rejected(self, hours):
        with pytest.raises(ValidationError) as exc_info:
            Step3Request(weekly_hours=hours)
        assert "Weekly hours must be 5, 10, 15, or 20" in str(exc_info.value)


class TestStep4Request:
    def test_empty_is_allowed(self):
        assert Step4Request().skills_to_skip == []

    def test_uuids_are_normalized(self):
        skill = uuid.uuid4()
        request = Step4Request(skills_to_skip=[str(skill).upper()])
        assert request.skills_to_skip == [str(skill)]

    def test_invalid_skill_id(self):
        with pytest.raises(ValidationError) as exc_info:
            Step4Request(skills_to_skip=["not-a-uuid"])
        assert "Invalid skill ID" in str(exc_info.value)


class TestUpdatePreferencesRequest:
    def test_full_payload(self):
        request = UpdatePreferencesRequest.model_validate(
            {
                "currentRole": "data_analyst",
                "targetRole": "data_scientist",
                "weeklyHours": 10,
                "skillsToSkip": [],
            }
        )
        assert request.target_role == TargetRole.DATA_SCIENTIST
        assert request.weekly_hours == 10

    def test_requires_every_answer(self):
        with pytest.raises(ValidationError):
            UpdatePreferencesRequest(current_role="data_analyst", weekly_hours=10)
