"""Email address format checks."""

from __future__ import annotations

from email_validator import EmailNotValidError, validate_email


def is_valid_email_format(value: str) -> bool:
    """Return whether value is a syntactically valid email address.

    Only syntax is checked; no DNS lookup is made for the domain.
    """

    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
