"""
Authentication service implementation.

Registration, login, token refresh, logout and session lookup on top of
the users, subscriptions and refresh_tokens tables.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.analytics import IEventRecorder, LoggingEventRecorder, record_event_safely
from shared.config import Settings, get_settings
from shared.database import get_session_factory, utcnow
from shared.models import AuthenticatedUser

from .exceptions import (
    EmailAlreadyRegisteredError,
    MissingTokenError,
    RevokedTokenError,
)
from .interfaces import IAuthService
from .models import (
    AuthResponse,
    LoginResponse,
    LogoutMethod,
    LogoutResponse,
    SessionResponse,
    UserResponse,
)
from .passwords import CredentialHasher
from .refresh_tokens import RefreshTokenStore
from .repository import UserRepository
from .subscription import (
    calculate_trial_end_date,
    determine_status,
    get_subscription_status,
    get_trial_ends_at,
)
from .tokens import issue_access_token, verify_refresh_token

logger = logging.getLogger(__name__)

SIGNUP_COMPLETED = "signup_completed"
LOGIN_COMPLETED = "login_completed"
LOGOUT_COMPLETED = "logout_completed"


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Each operation opens its own session; multi-row writes run in a single
    transaction so they land together or not at all.
    """

    def __init__(
        self,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        hasher: Optional[CredentialHasher] = None,
        events: Optional[IEventRecorder] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._session_factory = session_factory or get_session_factory()
        self._hasher = hasher or CredentialHasher(self._settings.bcrypt_rounds)
        self._events = events or LoggingEventRecorder()

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    async def register(self, email: str, password: str, name: str) -> AuthResponse:
        email = email.strip().lower()

        async with self._session_factory() as session:
            if await UserRepository(session).email_exists(email):
                raise EmailAlreadyRegisteredError()

        password_hash = await self._hasher.hash(password)
        trial_start = utcnow()
        trial_end = calculate_trial_end_date(trial_start, self._settings.trial_duration_days)

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    users = UserRepository(session)
                    user = await users.create_user(email, password_hash, name)
                    await users.create_subscription(user, trial_end)
                    refresh = await RefreshTokenStore(session, self._settings).create(user.id)
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            logger.info("Registration conflict on unique constraint for %s", email)
            raise EmailAlreadyRegisteredError()

        access_token = issue_access_token(user.id, user.email, user.role, self._settings)

        record_event_safely(
            self._events,
            SIGNUP_COMPLETED,
            {
                "userId": user.id,
                "trialStartDate": trial_start.isoformat(),
                "trialEndDate": trial_end.isoformat(),
            },
        )
        logger.info("Registered user %s", user.id)

        return AuthResponse(
            user=UserResponse.model_validate(user),
            access_token=access_token,
            refresh_token=refresh.token,
        )

    # -------------------------------------------------------------------------
    # Login
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> Optional[LoginResponse]:
        email = email.strip().lower()

        async with self._session_factory() as session:
            async with session.begin():
                user = await UserRepository(session).get_by_email(email)

                if user is None:
                    await self._hasher.verify_dummy(password)
                    logger.debug("Login failed for %s", email)
                    return None

                if not await self._hasher.verify(password, user.password_hash):
                    logger.debug("Login failed for %s", email)
                    return None

                refresh = await RefreshTokenStore(session, self._settings).create(user.id)

        access_token = issue_access_token(user.id, user.email, user.role, self._settings)
        status = determine_status(user, trial_days=self._settings.trial_duration_days)

        record_event_safely(
            self._events,
            LOGIN_COMPLETED,
            {"userId": user.id, "subscriptionStatus": status.value},
        )

        return LoginResponse(
            user=UserResponse.model_validate(user),
            access_token=access_token,
            refresh_token=refresh.token,
            subscription_status=status,
        )

    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------

    async def refresh(self, refresh_token: str) -> AuthResponse:
        payload = verify_refresh_token(refresh_token, self._settings)

        async with self._session_factory() as session:
            async with session.begin():
                store = RefreshTokenStore(session, self._settings)
                row = await store.find_active(payload.token_id, payload.user_id)
                if row is None:
                    raise RevokedTokenError()

                user = await UserRepository(session).get_by_id(payload.user_id)
                if user is None:
                    raise RevokedTokenError()

                await store.revoke_token_id(payload.token_id, payload.user_id)
                new_refresh = await store.create(user.id)

        return AuthResponse(
            user=UserResponse.model_validate(user),
            access_token=issue_access_token(user.id, user.email, user.role, self._settings),
            refresh_token=new_refresh.token,
        )

    # -------------------------------------------------------------------------
    # Logout
    # -------------------------------------------------------------------------

    async def logout(
        self,
        user: Optional[AuthenticatedUser],
        refresh_token: Optional[str] = None,
        logout_all: bool = False,
    ) -> LogoutResponse:
        if user is None:
            raise MissingTokenError()

        async with self._session_factory() as session:
            async with session.begin():
                store = RefreshTokenStore(session, self._settings)
                if logout_all:
                    method = LogoutMethod.ALL_SESSIONS
                    revoked = await store.revoke_all(user.id)
                elif refresh_token:
                    method = LogoutMethod.SINGLE_SESSION
                    revoked = await store.revoke(refresh_token, user_id=user.id)
                else:
                    method = LogoutMethod.CLIENT_ONLY
                    revoked = 0

        logger.debug("Logout for %s revoked %d refresh token(s)", user.id, revoked)
        record_event_safely(
            self._events,
            LOGOUT_COMPLETED,
            {"userId": user.id, "logoutAll": logout_all, "method": method.value},
        )

        message = (
            "Logged out from all sessions" if logout_all else "Logged out successfully"
        )
        return LogoutResponse(success=True, message=message)

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    def get_current_session(self, user: AuthenticatedUser) -> SessionResponse:
        return SessionResponse(
            user_id=user.id,
            email=user.email,
            name=user.name,
            avatar_url=user.avatar_url,
            subscription_status=get_subscription_status(user),
            trial_ends_at=get_trial_ends_at(user),
            is_verified=user.email_verified,
            role=user.role,
            created_at=user.created_at,
        )

    async def get_user_by_id(self, user_id: str) -> Optional[AuthenticatedUser]:
        async with self._session_factory() as session:
            user = await UserRepository(session).get_by_id(user_id)
            if user is None:
                return None
            return AuthenticatedUser.model_validate(user)

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    async def cleanup_expired_refresh_tokens(self) -> int:
        """Delete refresh token rows past their expiry. Returns the count removed."""
        async with self._session_factory() as session:
            async with session.begin():
                count = await RefreshTokenStore(session, self._settings).delete_expired()
        logger.info("Cleaned up %d expired refresh token(s)", count)
        return count
