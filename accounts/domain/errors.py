from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    EMAIL_USED = "email_used"
    WRONG_OTP = "wrong_otp"
    WRONG_PASSWORD = "wrong_password"
    ALREADY_ACTIVE = "already_active"
    INTERNAL = "internal"


class DomainError(Exception):
    """Base class for all domain-level errors."""

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message: str = "domain error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class UserNotFound(DomainError):
    """No user matches the lookup criteria (id or email)."""

    kind = ErrorKind.NOT_FOUND
    default_message = "user not found"


class OtpNotFound(DomainError):
    """No outstanding OTP for the email (never issued, already used, or expired)."""

    kind = ErrorKind.NOT_FOUND
    default_message = "otp not found"


class EmailAlreadyUsed(DomainError):
    """Another user already registered this email."""

    kind = ErrorKind.EMAIL_USED
    default_message = "email already used"


class WrongOtp(DomainError):
    """An OTP is outstanding but the submitted code does not match it."""

    kind = ErrorKind.WRONG_OTP
    default_message = "otp invalid"


class WrongPassword(DomainError):
    kind = ErrorKind.WRONG_PASSWORD
    default_message = "wrong password"


class UserAlreadyActive(DomainError):
    """Tried to activate (or re-issue a code for) a user that is already active."""

    kind = ErrorKind.ALREADY_ACTIVE
    default_message = "user already active"


class ValidationFailed(DomainError):
    """Input shape or constraint violation, with per-field detail."""

    kind = ErrorKind.VALIDATION
    default_message = "validation failed"

    def __init__(
        self,
        field_errors: list[dict[str, str]] | None = None,
        message: str | None = None,
    ) -> None:
        self.field_errors = field_errors or []
        super().__init__(message)


class EmailDeliveryError(DomainError):
    """The mail relay rejected the message or could not be reached."""

    default_message = "email delivery failed"
