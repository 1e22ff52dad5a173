"""Port for password hashing and verification."""

from __future__ import annotations

from typing import Protocol


class PasswordHashingError(ValueError):
    """Raised when a password cannot be hashed with the configured algorithm."""


class PasswordMismatchError(ValueError):
    """Raised when a plaintext password does not match a stored hash."""

    def __init__(self) -> None:
        super().__init__("password does not match stored hash")


class PasswordHasherPort(Protocol):
    """Password hashing/verification contract."""

    def hash_password(self, password: str) -> str:
        """Hash plaintext password for storage."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Verify plaintext password against stored hash."""

    def check_password(self, *, password: str, password_hash: str) -> None:
        """Raise `PasswordMismatchError` unless password matches stored hash."""
