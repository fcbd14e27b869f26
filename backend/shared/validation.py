"""
Explicit validation results for request payloads.

Most routes let FastAPI validate bodies before the handler runs. Routes
that need to decide for themselves how a bad payload is reported use
parse_payload(), which returns Ok or Err instead of raising.
"""

import re
from dataclasses import dataclass, field
from typing import Annotated, Any, Generic, TypeVar, Union

from pydantic import AfterValidator, BaseModel, BeforeValidator, EmailStr
from pydantic import ValidationError as PydanticValidationError

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class Ok(Generic[M]):
    """Payload parsed successfully."""

    value: M


@dataclass(frozen=True)
class Err:
    """Payload failed validation. Maps field path to message."""

    field_errors: dict[str, str] = field(default_factory=dict)

    @property
    def first_message(self) -> str:
        return next(iter(self.field_errors.values()), "Invalid request data")


ValidationResult = Union[Ok[M], Err]


def field_errors_from(errors: list[dict[str, Any]]) -> dict[str, str]:
    """Flatten pydantic error dicts into {"field.path": "message"}."""
    result: dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        key = ".".join(loc) or "body"
        message = str(error.get("msg", "Invalid value"))
        # pydantic prefixes messages from custom validators
        message = message.removeprefix("Value error, ")
        result.setdefault(key, message)
    return result


def parse_payload(model: type[M], data: Any) -> ValidationResult:
    """Validate data against model without raising."""
    try:
        return Ok(model.model_validate(data))
    except PydanticValidationError as e:
        return Err(field_errors_from(e.errors()))


# -----------------------------------------------------------------------------
# Field rules shared by several request models
# -----------------------------------------------------------------------------

EMAIL_MIN_LENGTH = 5
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

_PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain at least one special character"),
)


def normalize_email(value: Any) -> Any:
    """Trim and lowercase an email before format validation."""
    if not isinstance(value, str):
        return value
    value = value.strip().lower()
    if len(value) < EMAIL_MIN_LENGTH:
        raise ValueError(f"Email must be at least {EMAIL_MIN_LENGTH} characters")
    if len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
    return value


def check_password_strength(value: str) -> str:
    """Enforce length and character-class rules for new passwords."""
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(value) > PASSWORD_MAX_LENGTH:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_LENGTH} characters")
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(value):
            raise ValueError(message)
    return value


NormalizedEmail = Annotated[EmailStr, BeforeValidator(normalize_email)]
StrongPassword = Annotated[str, AfterValidator(check_password_strength)]
