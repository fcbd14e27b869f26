"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

When we're ready to extract a module to a microservice, we only need
to change the implementation here to an HTTP client.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService
    from modules.email.interfaces import IEmailService
    from modules.onboarding.interfaces import IOnboardingService
    from modules.password_reset.interfaces import IPasswordResetService
    from modules.users.interfaces import IUserService
    from shared.analytics import IEventRecorder


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._events: "IEventRecorder | None" = None
        self._email_service: "IEmailService | None" = None
        self._auth_service: "IAuthService | None" = None
        self._password_reset_service: "IPasswordResetService | None" = None
        self._onboarding_service: "IOnboardingService | None" = None
        self._user_service: "IUserService | None" = None

    @property
    def events(self) -> "IEventRecorder":
        """Get the analytics event recorder."""
        if self._events is None:
            from shared.analytics import LoggingEventRecorder
            self._events = LoggingEventRecorder()
        return self._events

    @property
    def email(self) -> "IEmailService":
        """Get the email service instance."""
        if self._email_service is None:
            from modules.email.service import SmtpEmailService
            self._email_service = SmtpEmailService()
        return self._email_service

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(events=self.events)
        return self._auth_service

    @property
    def password_reset(self) -> "IPasswordResetService":
        """Get the password reset service instance."""
        if self._password_reset_service is None:
            from modules.password_reset.service import PasswordResetService
            self._password_reset_service = PasswordResetService(email_service=self.email)
        return self._password_reset_service

    @property
    def onboarding(self) -> "IOnboardingService":
        """Get the onboarding service instance."""
        if self._onboarding_service is None:
            from modules.onboarding.service import OnboardingService
            self._onboarding_service = OnboardingService()
        return self._onboarding_service

    @property
    def users(self) -> "IUserService":
        """Get the user profile service instance."""
        if self._user_service is None:
            from modules.users.service import UserService
            self._user_service = UserService()
        return self._user_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._events = None
        self._email_service = None
        self._auth_service = None
        self._password_reset_service = None
        self._onboarding_service = None
        self._user_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_password_reset_service() -> "IPasswordResetService":
    """FastAPI dependency for password reset service."""
    return get_container().password_reset


def get_onboarding_service() -> "IOnboardingService":
    """FastAPI dependency for onboarding service."""
    return get_container().onboarding


def get_user_service() -> "IUserService":
    """FastAPI dependency for user profile service."""
    return get_container().users
