"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import AuthResponse, LoginResponse, LogoutResponse, SessionResponse


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def register(self, email: str, password: str, name: str) -> AuthResponse:
        """
        Create an account with a trial subscription and sign the user in.

        Raises:
            ConflictError: If the email is already registered
        """
        ...

    async def login(self, email: str, password: str) -> Optional[LoginResponse]:
        """
        Check credentials and issue tokens.

        Returns:
            LoginResponse, or None when the email is unknown or the
            password is wrong (the two are indistinguishable)
        """
        ...

    async def refresh(self, refresh_token: str) -> AuthResponse:
        """
        Exchange a stored refresh token for a new token pair.

        The old refresh token is revoked.

        Raises:
            AuthenticationError: If the token is invalid, expired or revoked
        """
        ...

    async def logout(
        self,
        user: Optional[AuthenticatedUser],
        refresh_token: Optional[str] = None,
        logout_all: bool = False,
    ) -> LogoutResponse:
        """
        Revoke one refresh token, or all of the user's tokens.

        Raises:
            AuthenticationError: If there is no authenticated user
        """
        ...

    def get_current_session(self, user: AuthenticatedUser) -> SessionResponse:
        """Shape the authenticated user into the session response."""
        ...

    async def get_user_by_id(self, user_id: str) -> Optional[AuthenticatedUser]:
        """
        Load a user with their subscription.

        Returns:
            AuthenticatedUser if found, None otherwise
        """
        ...
