"""Port for account persistence operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol


class AccountStorageError(RuntimeError):
    """Raised when the account store fails to execute one operation."""


class AccountConstraintViolationError(AccountStorageError):
    """Raised when a write violates a store constraint such as a unique key."""


@dataclass(frozen=True)
class AccountRecord:
    """Account persistence model."""

    account_id: int
    username: str
    email: str
    password_hash: str
    avatar: str
    created_at: datetime
    updated_at: datetime

    def to_payload(self, *, include_password: bool = False) -> dict[str, Any]:
        """Return JSON-serializable account fields, blanking the hash by default."""

        return {
            "id": self.account_id,
            "username": self.username,
            "email": self.email,
            "password": self.password_hash if include_password else "",
            "avatar": self.avatar,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class AccountCreateInput:
    """Sanitized, hashed payload for inserting one account."""

    username: str
    email: str
    password_hash: str
    avatar: str
    created_at: datetime
    updated_at: datetime


class AccountRepositoryPort(Protocol):
    """Account repository contract."""

    async def create_account(self, payload: AccountCreateInput) -> AccountRecord:
        """Insert one account and return the stored row."""

    async def list_accounts(self, *, limit: int) -> list[AccountRecord]:
        """Return up to `limit` accounts ordered by id."""

    async def get_by_id(self, *, account_id: int) -> AccountRecord | None:
        """Return account by id or None."""

    async def get_by_email(self, *, email: str) -> AccountRecord | None:
        """Return account by sanitized email or None."""

    async def update_columns(
        self,
        *,
        account_id: int,
        values: dict[str, Any],
    ) -> AccountRecord | None:
        """Update selected columns by id and return the re-read row or None."""

    async def update_password_hash_by_email(
        self,
        *,
        email: str,
        password_hash: str,
        updated_at: datetime,
    ) -> int:
        """Update password hash for the account owning email; return affected rows."""

    async def delete_account(self, *, account_id: int) -> int:
        """Hard-delete one account and return affected rows."""
