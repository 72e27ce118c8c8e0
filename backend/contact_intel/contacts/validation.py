"""Contact validation: untrusted form fields in, normalized record or field errors out.

Every field is checked, so a submission with three bad fields reports three
errors. Within one field the first failing check wins. Failures are returned
as data; only a non-mapping input raises.
"""

import enum
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from .models import Category, Priority
from .scoring import (
    COMPLETENESS,
    MIN_PHONE_DIGITS,
    compute_score,
    digit_count,
    field_text,
    get_scorer,
    is_valid_email,
)

MIN_NAME_LENGTH = 2
# Column widths of the contacts table
MAX_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255
MAX_PHONE_LENGTH = 50


class ErrorCode(enum.StrEnum):
    MISSING_FIELD = "MissingField"
    TOO_SHORT = "TooShort"
    TOO_LONG = "TooLong"
    INVALID_FORMAT = "InvalidFormat"
    INVALID_ENUM = "InvalidEnum"


class FieldError(BaseModel):
    code: ErrorCode
    message: str


class ContactRecord(BaseModel):
    """A validated, normalized contact, ready for the store."""

    name: str
    email: str
    phone: str
    message: str = ""
    category: Category = Category.LEAD
    priority: Priority = Priority.MEDIUM


class ValidationResult(BaseModel):
    ok: bool
    record: ContactRecord | None = None
    score: int | None = None
    errors: dict[str, FieldError] = Field(default_factory=dict)

    def messages(self) -> dict[str, str]:
        """Field -> human-readable message, for rendering under form inputs."""
        return {field: error.message for field, error in self.errors.items()}


def normalize_email(value: str) -> str:
    return value.strip().lower()


def _check_name(raw: Mapping[str, Any]) -> FieldError | None:
    name = field_text(raw, "name")
    if not name:
        return FieldError(code=ErrorCode.MISSING_FIELD, message="Name is required")
    if len(name) < MIN_NAME_LENGTH:
        return FieldError(code=ErrorCode.TOO_SHORT, message=f"Name must be at least {MIN_NAME_LENGTH} characters")
    if len(name) > MAX_NAME_LENGTH:
        return FieldError(code=ErrorCode.TOO_LONG, message=f"Name must be at most {MAX_NAME_LENGTH} characters")
    return None


def _check_email(raw: Mapping[str, Any]) -> FieldError | None:
    email = field_text(raw, "email")
    if not email:
        return FieldError(code=ErrorCode.MISSING_FIELD, message="Email is required")
    if not is_valid_email(email):
        return FieldError(code=ErrorCode.INVALID_FORMAT, message="Invalid email format")
    if len(email) > MAX_EMAIL_LENGTH:
        return FieldError(code=ErrorCode.TOO_LONG, message=f"Email must be at most {MAX_EMAIL_LENGTH} characters")
    return None


def _check_phone(raw: Mapping[str, Any]) -> FieldError | None:
    phone = field_text(raw, "phone")
    if not phone:
        return FieldError(code=ErrorCode.MISSING_FIELD, message="Phone is required")
    if digit_count(phone) < MIN_PHONE_DIGITS:
        return FieldError(code=ErrorCode.TOO_SHORT, message=f"Phone must be at least {MIN_PHONE_DIGITS} digits")
    # Stored verbatim, so the untrimmed length counts
    if len(str(raw["phone"])) > MAX_PHONE_LENGTH:
        return FieldError(code=ErrorCode.TOO_LONG, message=f"Phone must be at most {MAX_PHONE_LENGTH} characters")
    return None


def _resolve_enum(raw: Mapping[str, Any], key: str, enum_cls: type[enum.StrEnum], default):
    """Return (value, error). Absent or blank means the default."""
    value = field_text(raw, key)
    if not value:
        return default, None
    try:
        return enum_cls(value), None
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        return None, FieldError(
            code=ErrorCode.INVALID_ENUM,
            message=f"{key.capitalize()} must be one of: {allowed}",
        )


def validate(raw: Mapping[str, Any], rubric: str = COMPLETENESS) -> ValidationResult:
    """Validate raw contact fields and score the normalized record.

    Keys other than the six contact fields are ignored, including any
    client-supplied ``score``: the score is always recomputed here.
    """
    if not isinstance(raw, Mapping):
        raise TypeError(f"contact fields must be a mapping, got {type(raw).__name__}")
    # Unknown rubric names raise KeyError whether or not the fields are valid
    get_scorer(rubric)

    errors: dict[str, FieldError] = {}
    for field, check in (("name", _check_name), ("email", _check_email), ("phone", _check_phone)):
        error = check(raw)
        if error is not None:
            errors[field] = error

    category, error = _resolve_enum(raw, "category", Category, Category.LEAD)
    if error is not None:
        errors["category"] = error
    priority, error = _resolve_enum(raw, "priority", Priority, Priority.MEDIUM)
    if error is not None:
        errors["priority"] = error

    if errors:
        return ValidationResult(ok=False, errors=errors)

    message = raw.get("message")
    record = ContactRecord(
        name=field_text(raw, "name"),
        email=normalize_email(str(raw["email"])),
        phone=str(raw["phone"]),
        message="" if message is None else str(message),
        category=category,
        priority=priority,
    )
    return ValidationResult(ok=True, record=record, score=compute_score(record, rubric))
