"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import AuthenticationError, ConflictError, ForbiddenError


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class TokenVerificationError(AuthenticationError):
    """Raised when token verification fails for any other reason."""

    def __init__(self, message: str = "Token verification failed"):
        super().__init__(message, code="TOKEN_VERIFICATION_FAILED")


class MissingTokenError(AuthenticationError):
    """Raised when no authenticated user is attached to the request."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class InvalidCredentialsError(AuthenticationError):
    """
    Raised when login fails.

    Used for both unknown email and wrong password so the two cases
    cannot be told apart.
    """

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class RevokedTokenError(AuthenticationError):
    """Raised when a refresh token's stored record is gone or expired."""

    def __init__(self):
        super().__init__("Invalid refresh token", code="INVALID_TOKEN")


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when registering an email that already has an account."""

    def __init__(self):
        super().__init__(
            "A user with this email already exists",
            code="EMAIL_ALREADY_REGISTERED",
        )


class ProSubscriptionRequiredError(ForbiddenError):
    """Raised when a free user hits a Pro-gated feature."""

    def __init__(self, message: str = "Pro subscription required for this feature"):
        super().__init__(message, code="PRO_REQUIRED")


class InvalidPhaseError(ForbiddenError):
    """Raised when a route is gated on a phase that doesn't exist."""

    def __init__(self, phase: object):
        super().__init__(
            f"Invalid phase: {phase}",
            code="INVALID_PHASE",
            details={"phase": str(phase)},
        )
