from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from sqlalchemy import select, update

from modules.auth.refresh_tokens import RefreshTokenStore
from modules.auth.repository import UserRepository
from modules.email.models import EmailResult
from modules.password_reset.exceptions import (
    InvalidResetTokenError,
    PasswordResetFailedError,
    ResetTokenExpiredError,
    ResetTokenUsedError,
)
from modules.password_reset.models import GENERIC_REQUEST_MESSAGE, RESET_SUCCESS_MESSAGE
from modules.password_reset.repository import PasswordResetRepository
from modules.password_reset.service import (
    PasswordResetService,
    generate_reset_token,
    hash_reset_token,
)
from shared.config import Settings
from shared.database import utcnow
from shared.tables import PasswordResetToken
from tests.conftest import TEST_PASSWORD

NEW_PASSWORD = "N3w!Password"


class TestTokenHelpers:
    def test_generate_reset_token(self):
        token = generate_reset_token()
        assert len(token) == 64
        assert token != generate_reset_token()

    def test_hash_reset_token_is_sha256_hex(self):
        digest = hash_reset_token("abc")
        assert digest == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


class TestPasswordResetService:
    @pytest.fixture
    def email_service(self):
        email = AsyncMock()
        email.send_password_reset_email.return_value = EmailResult(success=True, message_id="<id>")
        return email

    @pytest.fixture
    def service(self, session_factory, hasher, email_service):
        return PasswordResetService(
            email_service=email_service,
            session_factory=session_factory,
            hasher=hasher,
            settings=Settings(environment="test", frontend_url="https://app.example.com/"),
        )

    @pytest_asyncio.fixture
    async def user(self, session_factory, hasher):
        async with session_factory() as session:
            async with session.begin():
                user = await UserRepository(session).create_user(
                    "ada@example.com", await hasher.hash(TEST_PASSWORD), "Ada"
                )
                await RefreshTokenStore(session).create(user.id)
        return user

    async def _request_token(self, service, email_service, email="ada@example.com") -> str:
        """Run a forgot-password request and pull the raw token from the emailed link."""
        await service.request_reset(email)
        reset_url = email_service.send_password_reset_email.call_args.args[1]
        return reset_url.rsplit("/", 1)[1]

    async def _tokens(self, session_factory) -> list[PasswordResetToken]:
        async with session_factory() as session:
            return list((await session.execute(select(PasswordResetToken))).scalars())

    # -------------------------------------------------------------------------
    # request_reset
    # -------------------------------------------------------------------------

    def test_build_reset_url(self, service):
        assert service.build_reset_url("abc") == "https://app.example.com/reset-password/abc"

    @pytest.mark.asyncio
    async def test_request_reset_emails_link(self, service, email_service, session_factory, user):
        result = await service.request_reset("ADA@example.com")

        assert result.success is True
        assert result.message == GENERIC_REQUEST_MESSAGE
        email_service.send_password_reset_email.assert_awaited_once()
        to, reset_url = email_service.send_password_reset_email.call_args.args
        assert to == "ada@example.com"
        assert reset_url.startswith("https://app.example.com/reset-password/")

        raw_token = reset_url.rsplit("/", 1)[1]
        (row,) = await self._tokens(session_factory)
        assert row.token_hash == hash_reset_token(raw_token)
        assert row.token_hash != raw_token
        assert row.user_id == user.id
        assert row.used_at is None

    @pytest.mark.asyncio
    async def test_request_reset_unknown_email_same_response(self, service, email_service, session_factory):
        """Unknown emails get the same answer and no email is sent."""
        result = await service.request_reset("nobody@example.com")

        assert result.success is True
        assert result.message == GENERIC_REQUEST_MESSAGE
        email_service.send_password_reset_email.assert_not_awaited()
        assert await self._tokens(session_factory) == []

    @pytest.mark.asyncio
    async def test_request_reset_replaces_unused_tokens(self, service, email_service, session_factory, user):
        first = await self._request_token(service, email_service)
        second = await self._request_token(service, email_service)

        (row,) = await self._tokens(session_factory)
        assert row.token_hash == hash_reset_token(second)
        assert await service.validate_token(first) is False
        assert await service.validate_token(second) is True

    @pytest.mark.asyncio
    async def test_request_reset_email_failure_is_hidden(self, service, email_service, user):
        email_service.send_password_reset_email.return_value = EmailResult(
            success=False, error="connection refused"
        )
        result = await service.request_reset("ada@example.com")
        assert result.message == GENERIC_REQUEST_MESSAGE

    @pytest.mark.asyncio
    async def test_request_reset_email_exception_is_hidden(self, service, email_service, user):
        email_service.send_password_reset_email.side_effect = RuntimeError("boom")
        result = await service.request_reset("ada@example.com")
        assert result.success is True
        assert result.message == GENERIC_REQUEST_MESSAGE

    # -------------------------------------------------------------------------
    # validate_token
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_validate_token_unknown(self, service):
        assert await service.validate_token("unknown") is False

    @pytest.mark.asyncio
    async def test_validate_token_does_not_consume(self, service, email_service, user):
        token = await self._request_token(service, email_service)
        assert await service.validate_token(token) is True
        assert await service.validate_token(token) is True

    # -------------------------------------------------------------------------
    # reset_password
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_reset_password_changes_password(self, service, email_service, session_factory, hasher, user):
        token = await self._request_token(service, email_service)

        result = await service.reset_password(token, NEW_PASSWORD)

        assert result.success is True
        assert result.message == RESET_SUCCESS_MESSAGE
        async with session_factory() as session:
            stored = await UserRepository(session).get_by_id(user.id)
        assert await hasher.verify(NEW_PASSWORD, stored.password_hash)
        assert not await hasher.verify(TEST_PASSWORD, stored.password_hash)

    @pytest.mark.asyncio
    async def test_reset_password_revokes_all_sessions(self, service, email_service, session_factory, user):
        token = await self._request_token(service, email_service)

        await service.reset_password(token, NEW_PASSWORD)

        async with session_factory() as session:
            assert await RefreshTokenStore(session).count_for_user(user.id) == 0

    @pytest.mark.asyncio
    async def test_reset_password_single_use(self, service, email_service, user):
        token = await self._request_token(service, email_service)
        await service.reset_password(token, NEW_PASSWORD)

        with pytest.raises(ResetTokenUsedError):
            await service.reset_password(token, "An0ther!Password")
        assert await service.validate_token(token) is False

    @pytest.mark.asyncio
    async def test_reset_password_unknown_token(self, service):
        with pytest.raises(InvalidResetTokenError) as exc_info:
            await service.reset_password("unknown", NEW_PASSWORD)
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_reset_password_expired_token_is_deleted(self, service, email_service, session_factory, user):
        token = await self._request_token(service, email_service)
        async with session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(PasswordResetToken).values(expires_at=utcnow() - timedelta(minutes=1))
                )

        with pytest.raises(ResetTokenExpiredError):
            await service.reset_password(token, NEW_PASSWORD)

        assert await self._tokens(session_factory) == []
        assert await service.validate_token(token) is False
        with pytest.raises(InvalidResetTokenError):
            await service.reset_password(token, NEW_PASSWORD)

    @pytest.mark.asyncio
    async def test_reset_password_lost_race(self, service, email_service, user):
        """If another request consumes the token first, this one fails."""
        token = await self._request_token(service, email_service)
        with patch(
            "modules.password_reset.service.PasswordResetRepository.mark_used",
            AsyncMock(return_value=False),
        ):
            with pytest.raises(ResetTokenUsedError):
                await service.reset_password(token, NEW_PASSWORD)

    @pytest.mark.asyncio
    async def test_reset_password_token_expires_while_hashing(
        self, service, email_service, session_factory, hasher, user
    ):
        """Expiry is checked again when the token is consumed."""
        token = await self._request_token(service, email_service)
        clock = {"now": utcnow()}
        real_hash = hasher.hash

        async def slow_hash(password: str) -> str:
            clock["now"] += timedelta(hours=2)
            return await real_hash(password)

        with patch("modules.password_reset.service.utcnow", lambda: clock["now"]), \
                patch("modules.password_reset.repository.utcnow", lambda: clock["now"]), \
                patch.object(hasher, "hash", slow_hash):
            with pytest.raises(ResetTokenExpiredError):
                await service.reset_password(token, NEW_PASSWORD)

        (row,) = await self._tokens(session_factory)
        assert row.used_at is None
        async with session_factory() as session:
            stored = await UserRepository(session).get_by_email("ada@example.com")
        assert await hasher.verify(TEST_PASSWORD, stored.password_hash) is True

    @pytest.mark.asyncio
    async def test_mark_used_rejects_expired_token(self, service, email_service, session_factory, user):
        await self._request_token(service, email_service)
        (row,) = await self._tokens(session_factory)

        async with session_factory() as session:
            async with session.begin():
                tokens = PasswordResetRepository(session)
                assert await tokens.mark_used(row.id, now=utcnow() + timedelta(hours=2)) is False
                assert await tokens.mark_used(row.id) is True
                assert await tokens.mark_used(row.id) is False

    @pytest.mark.asyncio
    async def test_reset_password_unexpected_error(self, service, email_service, user):
        token = await self._request_token(service, email_service)
        with patch(
            "modules.password_reset.service.UserRepository.update_password",
            AsyncMock(side_effect=RuntimeError("db down")),
        ):
            with pytest.raises(PasswordResetFailedError):
                await service.reset_password(token, NEW_PASSWORD)

        # The failed transaction rolled back, so the token still works
        assert await service.validate_token(token) is True

    # -------------------------------------------------------------------------
    # cleanup_expired_tokens
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_cleanup_removes_expired_and_used(self, service, session_factory, user):
        now = utcnow()
        async with session_factory() as session:
            async with session.begin():
                session.add_all([
                    PasswordResetToken(
                        user_id=user.id, email=user.email, token_hash="a" * 64,
                        expires_at=now - timedelta(minutes=1),
                    ),
                    PasswordResetToken(
                        user_id=user.id, email=user.email, token_hash="b" * 64,
                        expires_at=now + timedelta(hours=1), used_at=now,
                    ),
                    PasswordResetToken(
                        user_id=user.id, email=user.email, token_hash="c" * 64,
                        expires_at=now + timedelta(hours=1),
                    ),
                ])

        assert await service.cleanup_expired_tokens() == 2
        (remaining,) = await self._tokens(session_factory)
        assert remaining.token_hash == "c" * 64

    @pytest.mark.asyncio
    async def test_cleanup_failure_returns_zero(self, service):
        with patch(
            "modules.password_reset.service.PasswordResetRepository.delete_expired_or_used",
            AsyncMock(side_effect=RuntimeError("db down")),
        ):
            assert await service.cleanup_expired_tokens() == 0
