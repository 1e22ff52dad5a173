"""SQLAlchemy adapter for account persistence."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any, cast

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from user_accounts.application.ports.account_repository_port import (
    AccountConstraintViolationError,
    AccountCreateInput,
    AccountRecord,
    AccountRepositoryPort,
    AccountStorageError,
)
from user_accounts.infrastructure.db.metadata import accounts

logger = logging.getLogger(__name__)

_UPDATABLE_COLUMNS = frozenset({"email", "password_hash", "avatar", "updated_at"})


class SqlAlchemyAccountRepository(AccountRepositoryPort):
    """Account repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_account(self, payload: AccountCreateInput) -> AccountRecord:
        """Insert one account row and return it with the assigned id."""

        statement = sa.insert(accounts).values(
            username=payload.username,
            email=payload.email,
            password_hash=payload.password_hash,
            avatar=payload.avatar,
            created_at=payload.created_at,
            updated_at=payload.updated_at,
        ).returning(*accounts.c)

        with _storage_errors("create_account"):
            async with self._session_factory() as session:
                result = await session.execute(statement)
                row = result.mappings().one()
                await session.commit()

        return _to_account_record(row)

    async def list_accounts(self, *, limit: int) -> list[AccountRecord]:
        """Return up to `limit` accounts ordered by id."""

        statement = sa.select(*accounts.c).order_by(accounts.c.id).limit(limit)

        with _storage_errors("list_accounts"):
            async with self._session_factory() as session:
                result = await session.execute(statement)
                rows = result.mappings().all()

        return [_to_account_record(row) for row in rows]

    async def get_by_id(self, *, account_id: int) -> AccountRecord | None:
        """Return account by id or None."""

        statement = sa.select(*accounts.c).where(accounts.c.id == account_id).limit(1)

        with _storage_errors("get_by_id"):
            async with self._session_factory() as session:
                result = await session.execute(statement)
                row = result.mappings().first()

        if row is None:
            return None
        return _to_account_record(row)

    async def get_by_email(self, *, email: str) -> AccountRecord | None:
        """Return account by sanitized email or None."""

        statement = sa.select(*accounts.c).where(accounts.c.email == email).limit(1)

        with _storage_errors("get_by_email"):
            async with self._session_factory() as session:
                result = await session.execute(statement)
                row = result.mappings().first()

        if row is None:
            return None
        return _to_account_record(row)

    async def update_columns(
        self,
        *,
        account_id: int,
        values: dict[str, Any],
    ) -> AccountRecord | None:
        """Update selected columns and return the re-read row, or None when missing."""

        unknown = set(values) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"unsupported account columns: {sorted(unknown)}")

        update_statement = sa.update(accounts).where(accounts.c.id == account_id).values(**values)
        select_statement = sa.select(*accounts.c).where(accounts.c.id == account_id).limit(1)

        with _storage_errors("update_columns"):
            async with self._session_factory() as session:
                await session.execute(update_statement)
                await session.commit()
                result = await session.execute(select_statement)
                row = result.mappings().first()

        if row is None:
            return None
        return _to_account_record(row)

    async def update_password_hash_by_email(
        self,
        *,
        email: str,
        password_hash: str,
        updated_at: datetime,
    ) -> int:
        """Update password hash for the account owning email; return affected rows."""

        statement = (
            sa.update(accounts)
            .where(accounts.c.email == email)
            .values(password_hash=password_hash, updated_at=updated_at)
        )

        with _storage_errors("update_password_hash_by_email"):
            async with self._session_factory() as session:
                result = cast(CursorResult[Any], await session.execute(statement))
                await session.commit()

        return int(result.rowcount or 0)

    async def delete_account(self, *, account_id: int) -> int:
        """Hard-delete one account and return affected rows."""

        statement = sa.delete(accounts).where(accounts.c.id == account_id)

        with _storage_errors("delete_account"):
            async with self._session_factory() as session:
                result = cast(CursorResult[Any], await session.execute(statement))
                await session.commit()

        return int(result.rowcount or 0)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into account storage errors."""

    try:
        yield
    except IntegrityError as exc:
        logger.info("account_constraint_violation operation=%s", operation)
        raise AccountConstraintViolationError(
            f"account constraint violated during {operation}"
        ) from exc
    except SQLAlchemyError as exc:
        logger.error("account_storage_failed operation=%s error=%s", operation, type(exc).__name__)
        raise AccountStorageError(f"account storage failed during {operation}") from exc


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_account_record(row: sa.RowMapping) -> AccountRecord:
    return AccountRecord(
        account_id=int(row["id"]),
        username=cast(str, row["username"]),
        email=cast(str, row["email"]),
        password_hash=cast(str, row["password_hash"]),
        avatar=cast(str | None, row["avatar"]) or "",
        created_at=_as_utc(cast(datetime, row["created_at"])),
        updated_at=_as_utc(cast(datetime, row["updated_at"])),
    )
