"""
Shared infrastructure for the PLPG backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Async SQLAlchemy engine and session factory
- tables: ORM table definitions
- exceptions: Base exception classes
- analytics: Best-effort event recording

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import Base, get_engine, get_session_factory, init_db, reset_engine
from .exceptions import (
    PlpgError,
    ValidationError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    RateLimitError,
    ExternalServiceError,
)
from .models import AuthenticatedUser

__all__ = [
    "Settings",
    "get_settings",
    "Base",
    "get_engine",
    "get_session_factory",
    "init_db",
    "reset_engine",
    "PlpgError",
    "ValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "ExternalServiceError",
    "AuthenticatedUser",
]
