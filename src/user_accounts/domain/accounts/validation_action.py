"""Validation actions selecting which account field rules apply."""

from __future__ import annotations

from enum import StrEnum


class ValidationAction(StrEnum):
    """Supported account validation actions."""

    SIGNUP = "signup"
    LOGIN = "login"
    UPDATE = "update"
    FORGOT_PASSWORD = "forgotpassword"


def parse_validation_action(value: str | ValidationAction) -> ValidationAction:
    """Resolve one action tag case-insensitively, falling back to signup rules."""

    if isinstance(value, ValidationAction):
        return value
    normalized = value.strip().lower()
    try:
        return ValidationAction(normalized)
    except ValueError:
        return ValidationAction.SIGNUP
