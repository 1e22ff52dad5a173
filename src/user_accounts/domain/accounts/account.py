"""Untrusted account input with normalization and action-based validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from user_accounts.domain.accounts.email_format import is_valid_email_format
from user_accounts.domain.accounts.sanitization import sanitize_text
from user_accounts.domain.accounts.validation_action import (
    ValidationAction,
    parse_validation_action,
)

MIN_PASSWORD_LENGTH = 6

REQUIRED_USERNAME_MESSAGE = "required username"
REQUIRED_PASSWORD_MESSAGE = "required password"
INVALID_PASSWORD_MESSAGE = f"password should be at least {MIN_PASSWORD_LENGTH} characters"
REQUIRED_EMAIL_MESSAGE = "required email"
INVALID_EMAIL_MESSAGE = "invalid email"


@dataclass
class AccountDraft:
    """Caller-supplied account fields before validation and persistence."""

    username: str = ""
    email: str = ""
    password: str = ""
    avatar: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    _last_stamp: datetime | None = field(default=None, init=False, repr=False, compare=False)

    def prepare(self, *, now: datetime | None = None) -> None:
        """Sanitize username/email and stamp both timestamps.

        Caller-supplied `created_at`/`updated_at` values are discarded.
        """

        self.username = sanitize_text(self.username)
        self.email = sanitize_text(self.email)
        stamp = self._next_timestamp(now)
        self.created_at = stamp
        self.updated_at = stamp

    def touch(self, *, now: datetime | None = None) -> None:
        """Refresh `updated_at` ahead of an update write."""

        self.updated_at = self._next_timestamp(now)

    def validate(self, action: str | ValidationAction = ValidationAction.SIGNUP) -> dict[str, str]:
        """Return every failed rule for the action as `code -> message`.

        Username and email are judged on their trimmed values.
        """

        resolved = parse_validation_action(action)
        errors: dict[str, str] = {}

        if resolved is ValidationAction.SIGNUP:
            if not self.username.strip():
                errors["required_username"] = REQUIRED_USERNAME_MESSAGE
            self._check_password(errors, enforce_length=True)
        elif resolved is ValidationAction.LOGIN:
            self._check_password(errors, enforce_length=False)

        self._check_email(errors)
        return errors

    def _check_password(self, errors: dict[str, str], *, enforce_length: bool) -> None:
        if not self.password:
            errors["required_password"] = REQUIRED_PASSWORD_MESSAGE
        elif enforce_length and len(self.password) < MIN_PASSWORD_LENGTH:
            errors["invalid_password"] = INVALID_PASSWORD_MESSAGE

    def _check_email(self, errors: dict[str, str]) -> None:
        email = self.email.strip()
        if not email:
            errors["required_email"] = REQUIRED_EMAIL_MESSAGE
        elif not is_valid_email_format(email):
            errors["invalid_email"] = INVALID_EMAIL_MESSAGE

    def _next_timestamp(self, now: datetime | None) -> datetime:
        """Return a UTC stamp no earlier than the last one this draft issued."""

        stamp = _as_utc(now) if now is not None else datetime.now(tz=UTC)
        if self._last_stamp is not None and stamp < self._last_stamp:
            stamp = self._last_stamp
        self._last_stamp = stamp
        return stamp


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
