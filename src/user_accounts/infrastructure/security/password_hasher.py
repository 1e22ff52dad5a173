"""Bcrypt password hasher adapter."""

from __future__ import annotations

import bcrypt

from user_accounts.application.ports.password_hasher_port import (
    PasswordHasherPort,
    PasswordHashingError,
    PasswordMismatchError,
)

DEFAULT_BCRYPT_ROUNDS = 12
MIN_BCRYPT_ROUNDS = 4
MAX_BCRYPT_ROUNDS = 31
MAX_BCRYPT_PASSWORD_BYTES = 72


class BcryptPasswordHasher(PasswordHasherPort):
    """Password hashing adapter using bcrypt."""

    def __init__(self, *, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._rounds = rounds

    def hash_password(self, password: str) -> str:
        if not MIN_BCRYPT_ROUNDS <= self._rounds <= MAX_BCRYPT_ROUNDS:
            raise PasswordHashingError(
                f"bcrypt rounds must be between {MIN_BCRYPT_ROUNDS} and "
                f"{MAX_BCRYPT_ROUNDS}, got {self._rounds}"
            )
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_BCRYPT_PASSWORD_BYTES:
            raise PasswordHashingError(
                f"password exceeds {MAX_BCRYPT_PASSWORD_BYTES} bytes supported by bcrypt"
            )
        try:
            return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")
        except ValueError as exc:
            raise PasswordHashingError(str(exc)) from exc

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_BCRYPT_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError:
            return False

    def check_password(self, *, password: str, password_hash: str) -> None:
        if not self.verify_password(password=password, password_hash=password_hash):
            raise PasswordMismatchError()
