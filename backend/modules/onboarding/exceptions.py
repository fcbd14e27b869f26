"""
Onboarding module exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class OnboardingNotStartedError(ValidationError):
    """Raised when a later step is saved before step 1."""

    def __init__(self, message: str = "Onboarding not started. Please complete previous steps first."):
        super().__init__(message, code="ONBOARDING_NOT_STARTED")


class OnboardingIncompleteError(ValidationError):
    """Raised when completing onboarding with a required answer missing."""

    def __init__(self, step: int, field: str):
        super().__init__(
            f"{field} is required. Please complete Step {step}.",
            code="ONBOARDING_INCOMPLETE",
            details={"step": step},
        )


class OnboardingNotFoundError(NotFoundError):
    """Raised when updating preferences for a user who never onboarded."""

    def __init__(self):
        super().__init__(
            "Onboarding not found. Please complete onboarding first.",
            code="ONBOARDING_NOT_FOUND",
        )


class OnboardingNotCompletedError(ValidationError):
    """Raised when updating preferences before onboarding is complete."""

    def __init__(self):
        super().__init__(
            "Onboarding not completed. Please complete onboarding first.",
            code="ONBOARDING_NOT_COMPLETED",
        )
