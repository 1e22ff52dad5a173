"""Application service for account lifecycle and credential operations."""

from __future__ import annotations

import logging
import secrets
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from user_accounts.application.ports.account_repository_port import (
    AccountConstraintViolationError,
    AccountCreateInput,
    AccountRecord,
    AccountRepositoryPort,
)
from user_accounts.application.ports.password_hasher_port import PasswordHasherPort
from user_accounts.domain.accounts.account import (
    INVALID_PASSWORD_MESSAGE,
    MIN_PASSWORD_LENGTH,
    REQUIRED_PASSWORD_MESSAGE,
    AccountDraft,
)
from user_accounts.domain.accounts.sanitization import sanitize_text
from user_accounts.domain.accounts.validation_action import ValidationAction

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 100


class AccountValidationError(ValueError):
    """Raised when account input fails validation for one action."""

    def __init__(self, *, action: ValidationAction, errors: dict[str, str]) -> None:
        super().__init__(f"account validation failed for {action.value}: {sorted(errors)}")
        self.action = action
        self.errors = dict(errors)


class AccountNotFoundError(LookupError):
    """Raised when a target account cannot be found."""

    def __init__(self, *, account_id: int | None = None, email: str | None = None) -> None:
        target = f"id={account_id}" if account_id is not None else f"email={email}"
        super().__init__(f"account not found: {target}")
        self.account_id = account_id
        self.email = email


class AccountAlreadyExistsError(AccountConstraintViolationError):
    """Raised when username or email is already taken by another account."""

    def __init__(self) -> None:
        super().__init__("username or email already exists")


class InvalidCredentialsError(PermissionError):
    """Raised when email/password do not identify an account."""

    def __init__(self) -> None:
        super().__init__("invalid email or password")


class AccountService:
    """Expose account signup, lookup, update and removal use-cases."""

    def __init__(
        self,
        *,
        accounts: AccountRepositoryPort,
        password_hasher: PasswordHasherPort,
        avatar_base_url: str = "",
    ) -> None:
        self._accounts = accounts
        self._password_hasher = password_hasher
        self._avatar_base_url = avatar_base_url
        self._decoy_password_hash: str | None = None

    async def create_account(self, *, draft: AccountDraft) -> AccountRecord:
        """Validate, sanitize, hash and persist one new account."""

        _require_valid(draft, ValidationAction.SIGNUP)
        draft.prepare()
        assert draft.created_at is not None and draft.updated_at is not None

        password_hash = self._password_hasher.hash_password(draft.password)
        try:
            created = await self._accounts.create_account(
                AccountCreateInput(
                    username=draft.username,
                    email=draft.email,
                    password_hash=password_hash,
                    avatar=draft.avatar,
                    created_at=draft.created_at,
                    updated_at=draft.updated_at,
                )
            )
        except AccountConstraintViolationError as exc:
            raise AccountAlreadyExistsError() from exc

        logger.info("account_created account_id=%s", created.account_id)
        return self._present(created)

    async def list_accounts(self, *, limit: int = MAX_LIST_LIMIT) -> list[AccountRecord]:
        """Return up to `limit` accounts, never more than the listing cap."""

        if limit <= 0:
            return []
        resolved_limit = min(limit, MAX_LIST_LIMIT)
        listed = await self._accounts.list_accounts(limit=resolved_limit)
        return [self._present(record) for record in listed]

    async def get_account(self, *, account_id: int) -> AccountRecord:
        """Return one account or raise `AccountNotFoundError`."""

        record = await self._accounts.get_by_id(account_id=account_id)
        if record is None:
            raise AccountNotFoundError(account_id=account_id)
        return self._present(record)

    async def update_account(self, *, account_id: int, draft: AccountDraft) -> AccountRecord:
        """Update email, and password when one is supplied, then return the fresh row."""

        _require_valid(draft, ValidationAction.UPDATE)
        draft.email = sanitize_text(draft.email)
        draft.touch()

        values: dict[str, Any] = {"email": draft.email, "updated_at": draft.updated_at}
        if draft.password:
            values["password_hash"] = self._password_hasher.hash_password(draft.password)

        try:
            updated = await self._accounts.update_columns(account_id=account_id, values=values)
        except AccountConstraintViolationError as exc:
            raise AccountAlreadyExistsError() from exc
        if updated is None:
            raise AccountNotFoundError(account_id=account_id)

        logger.info(
            "account_updated account_id=%s password_changed=%s",
            account_id,
            "password_hash" in values,
        )
        return self._present(updated)

    async def update_avatar(self, *, account_id: int, avatar: str) -> AccountRecord:
        """Replace the stored avatar reference and return the fresh row."""

        updated = await self._accounts.update_columns(
            account_id=account_id,
            values={"avatar": avatar.strip(), "updated_at": datetime.now(tz=UTC)},
        )
        if updated is None:
            raise AccountNotFoundError(account_id=account_id)

        logger.info("account_avatar_updated account_id=%s", account_id)
        return self._present(updated)

    async def update_password(self, *, email: str, password: str) -> None:
        """Hash and store a new password for the account owning email."""

        draft = AccountDraft(email=email, password=password)
        errors = draft.validate(ValidationAction.FORGOT_PASSWORD)
        if not password:
            errors["required_password"] = REQUIRED_PASSWORD_MESSAGE
        elif len(password) < MIN_PASSWORD_LENGTH:
            errors["invalid_password"] = INVALID_PASSWORD_MESSAGE
        if errors:
            raise AccountValidationError(action=ValidationAction.FORGOT_PASSWORD, errors=errors)

        normalized_email = sanitize_text(email)
        password_hash = self._password_hasher.hash_password(password)
        affected = await self._accounts.update_password_hash_by_email(
            email=normalized_email,
            password_hash=password_hash,
            updated_at=datetime.now(tz=UTC),
        )
        if affected == 0:
            raise AccountNotFoundError(email=normalized_email)

        logger.info("account_password_reset rows=%s", affected)

    async def delete_account(self, *, account_id: int) -> int:
        """Hard-delete one account; zero affected rows signals a missing id."""

        affected = await self._accounts.delete_account(account_id=account_id)
        logger.info("account_deleted account_id=%s rows=%s", account_id, affected)
        return affected

    async def authenticate(self, *, email: str, password: str) -> AccountRecord:
        """Return the account identified by email/password or raise."""

        draft = AccountDraft(email=email, password=password)
        _require_valid(draft, ValidationAction.LOGIN)

        account = await self._accounts.get_by_email(email=sanitize_text(email))
        if account is None:
            self._password_hasher.verify_password(
                password=password,
                password_hash=self._decoy_hash(),
            )
            logger.info("account_login_failed reason=unknown_email")
            raise InvalidCredentialsError()

        is_valid = self._password_hasher.verify_password(
            password=password,
            password_hash=account.password_hash,
        )
        if not is_valid:
            logger.warning(
                "account_login_failed account_id=%s reason=bad_password",
                account.account_id,
            )
            raise InvalidCredentialsError()

        return self._present(account)

    def _decoy_hash(self) -> str:
        """Return a hash with the configured cost, used to equalize login timing."""

        if self._decoy_password_hash is None:
            self._decoy_password_hash = self._password_hasher.hash_password(
                secrets.token_urlsafe(16)
            )
        return self._decoy_password_hash

    def _present(self, record: AccountRecord) -> AccountRecord:
        """Expand a stored avatar reference into a fully-qualified URL."""

        if not record.avatar:
            return record
        return replace(record, avatar=f"{self._avatar_base_url}{record.avatar}")


def _require_valid(draft: AccountDraft, action: ValidationAction) -> None:
    """Raise `AccountValidationError` with every failed rule for the action."""

    errors = draft.validate(action)
    if errors:
        logger.info("account_validation_failed action=%s codes=%s", action.value, sorted(errors))
        raise AccountValidationError(action=action, errors=errors)
